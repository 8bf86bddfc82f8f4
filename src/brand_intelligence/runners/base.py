"""Feature runner contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from ..core.errors import BrandIntelligenceError
from ..core.interfaces import ConfigProvider
from ..core.models import FeatureContext, RunnerResult


class FeatureRunner(ABC):
    """An independently enable-able unit of analysis logic.

    ``run`` must return a ``RunnerResult``. Domain failures are mapped to the
    runner's own error codes; anything else may be raised and is normalized
    by the orchestrator.
    """

    name: str = ""
    flag: Optional[str] = None
    enabled_by_default: bool = True

    def __init__(self, config: Optional[ConfigProvider] = None):
        self._config = config

    async def is_enabled(self) -> bool:
        if self._config is None or not self.flag:
            return self.enabled_by_default
        return bool(self._config.get(self.flag, self.enabled_by_default))

    @abstractmethod
    async def run(self, context: FeatureContext) -> RunnerResult: ...

    def error_result(
        self,
        context: FeatureContext,
        message: str,
        code: str,
        **details: Any,
    ) -> RunnerResult:
        return RunnerResult.failure(
            message,
            code,
            {"brand_id": context.brand_id, "timestamp": datetime.utcnow().isoformat(), **details},
        )

    def domain_error_result(
        self,
        context: FeatureContext,
        exc: BrandIntelligenceError,
        code: str,
    ) -> RunnerResult:
        details = {
            **exc.details,
            "brand_id": context.brand_id,
            "cause": exc.code,
            "timestamp": datetime.utcnow().isoformat(),
        }
        return RunnerResult.failure(exc.message, code, details)
