"""Brand health refresh scheduler.

Periodically runs the brand-health runner for every configured brand.
Uses asyncio tasks, no external scheduler dependency.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional, Sequence

from .core.models import FeatureContext, RunnerResult
from .runners import BrandHealthRunner, FeatureRunnerOrchestrator

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL_HOURS = 6


class BrandHealthScheduler:
    """Manages periodic brand-health summaries."""

    def __init__(
        self,
        orchestrator: FeatureRunnerOrchestrator,
        brand_ids: Optional[Sequence[str]] = None,
        interval_seconds: Optional[float] = None,
    ):
        self._orchestrator = orchestrator
        self._task: asyncio.Task | None = None
        self._running = False
        if brand_ids is None:
            brand_ids = [b.strip() for b in os.environ.get("BRAND_IDS", "").split(",") if b.strip()]
        self.brand_ids = list(brand_ids)
        if interval_seconds is None:
            interval_seconds = int(os.environ.get(
                "REFRESH_INTERVAL_HOURS",
                str(DEFAULT_REFRESH_INTERVAL_HOURS),
            )) * 3600
        self._interval_seconds = interval_seconds
        self.last_results: dict[str, RunnerResult] = {}

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        """Start the background refresh loop."""
        if self._running:
            return
        if not self.brand_ids:
            logger.warning("BRAND_IDS not set; brand health scheduler disabled")
            return
        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(
            "Brand health scheduler started for %d brands (interval: %.0fs)",
            len(self.brand_ids),
            self._interval_seconds,
        )

    async def stop(self):
        """Stop the background refresh loop."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Brand health scheduler stopped")

    async def refresh(self) -> dict[str, RunnerResult]:
        """Run one brand-health pass over every configured brand."""
        for brand_id in self.brand_ids:
            result = await self._orchestrator.run_one(
                BrandHealthRunner.name, FeatureContext(brand_id=brand_id)
            )
            if not result.success:
                logger.warning(
                    "Brand health refresh failed for %s: %s", brand_id, result.error.message
                )
            self.last_results[brand_id] = result
        return dict(self.last_results)

    async def _run_loop(self):
        while self._running:
            try:
                await self.refresh()
                await asyncio.sleep(self._interval_seconds)
            except asyncio.CancelledError:
                break
            except Exception as exc:
                logger.error("Scheduled brand health refresh failed: %s", exc, exc_info=True)
                await asyncio.sleep(60)
