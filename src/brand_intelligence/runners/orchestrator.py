"""Feature runner orchestrator.

Holds the runner registry for one process and dispatches runners against a
shared context. A runner's failure is captured as a structured result and
never cancels or taints another runner's result.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from typing import Optional

from ..core.errors import RunnerError
from ..core.models import FeatureContext, RunnerResult
from .base import FeatureRunner

logger = logging.getLogger(__name__)

RUNNER_NOT_FOUND = "RUNNER_NOT_FOUND"
RUNNER_DISABLED = "RUNNER_DISABLED"
RUNNER_ERROR = "RUNNER_ERROR"
RUNNER_TIMEOUT = "RUNNER_TIMEOUT"


class FeatureRunnerOrchestrator:
    """Registry plus fork-join dispatcher for feature runners.

    Args:
        timeout: Optional per-runner deadline in seconds. A runner that
            exceeds it is cancelled and reported as ``RUNNER_TIMEOUT``.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._runners: dict[str, FeatureRunner] = {}
        self.timeout = timeout

    def register(self, runner: FeatureRunner) -> None:
        name = runner.name
        if not name:
            raise ValueError(f"Runner {type(runner).__name__} has no name")
        if name in self._runners:
            logger.warning("Runner with name %s already registered, overwriting", name)
        self._runners[name] = runner
        logger.info("Registered runner: %s", name)

    def unregister(self, name: str) -> bool:
        return self._runners.pop(name, None) is not None

    def get_runner(self, name: str) -> Optional[FeatureRunner]:
        return self._runners.get(name)

    def has_runner(self, name: str) -> bool:
        return name in self._runners

    @property
    def runners(self) -> list[FeatureRunner]:
        return list(self._runners.values())

    def clear(self) -> None:
        self._runners.clear()
        logger.info("Cleared all registered runners")

    async def enabled_runners(self) -> list[FeatureRunner]:
        """Runners whose enablement check passes. A failing check excludes only that runner."""
        enabled = []
        for runner in list(self._runners.values()):
            try:
                if await runner.is_enabled():
                    enabled.append(runner)
            except Exception as exc:
                logger.error(
                    "Error checking if runner %s is enabled: %s", runner.name, exc, exc_info=True
                )
        return enabled

    async def run_all(self, context: FeatureContext) -> dict[str, RunnerResult]:
        """Run every enabled runner concurrently and collect results by name."""
        runners = await self.enabled_runners()
        logger.info("Running %d enabled runners for brand %s", len(runners), context.brand_id)

        results = await asyncio.gather(*(self._invoke(r, context) for r in runners))
        return {runner.name: result for runner, result in zip(runners, results)}

    async def run_one(self, name: str, context: FeatureContext) -> RunnerResult:
        runner = self._runners.get(name)
        if runner is None:
            return RunnerResult.failure(f"Runner {name} not found", RUNNER_NOT_FOUND, {"runner": name})

        try:
            enabled = await runner.is_enabled()
        except Exception as exc:
            logger.error("Error checking if runner %s is enabled: %s", name, exc, exc_info=True)
            return self._error_result(name, exc)

        if not enabled:
            return RunnerResult.failure(f"Runner {name} is disabled", RUNNER_DISABLED, {"runner": name})

        return await self._invoke(runner, context)

    async def _invoke(self, runner: FeatureRunner, context: FeatureContext) -> RunnerResult:
        started = time.perf_counter()
        try:
            if self.timeout is not None:
                result = await asyncio.wait_for(runner.run(context), self.timeout)
            else:
                result = await runner.run(context)
            if not isinstance(result, RunnerResult):
                result = RunnerResult.model_validate(result)
        except asyncio.TimeoutError as exc:
            if self.timeout is None:
                logger.error("Error running %s: %s", runner.name, exc, exc_info=True)
                return self._error_result(runner.name, exc)
            logger.error("Runner %s exceeded its %.1fs deadline", runner.name, self.timeout)
            return RunnerResult.failure(
                f"Runner {runner.name} timed out after {self.timeout}s",
                RUNNER_TIMEOUT,
                {"runner": runner.name, "timestamp": datetime.utcnow().isoformat()},
            )
        except Exception as exc:
            logger.error("Error running %s: %s", runner.name, exc, exc_info=True)
            return self._error_result(runner.name, exc)

        logger.debug(
            "Runner %s completed in %.0fms with success=%s",
            runner.name,
            (time.perf_counter() - started) * 1000,
            result.success,
        )
        return result

    @staticmethod
    def _error_result(name: str, exc: Exception) -> RunnerResult:
        error = RunnerError(
            str(exc) or type(exc).__name__,
            code=RUNNER_ERROR,
            details={"runner": name, "timestamp": datetime.utcnow().isoformat()},
        )
        return RunnerResult.failure(error.message, error.code, error.details)
