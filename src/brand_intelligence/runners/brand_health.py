"""Runner that reports brand health for a window."""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from ..core.brand_health import BrandHealthAggregator
from ..core.errors import BrandIntelligenceError
from ..core.interfaces import ConfigProvider
from ..core.models import FeatureContext, RunnerResult, TimeWindow
from .base import FeatureRunner

INVALID_WINDOW = "INVALID_WINDOW"
BRAND_HEALTH_ERROR = "BRAND_HEALTH_ERROR"


class BrandHealthRunner(FeatureRunner):
    """Reads ``metadata["window"]`` ({start, end}) or ``metadata["days"]``."""

    name = "brand-health"
    flag = "features.brand_health.enabled"

    def __init__(self, aggregator: BrandHealthAggregator, config: Optional[ConfigProvider] = None):
        super().__init__(config)
        self._aggregator = aggregator

    async def run(self, context: FeatureContext) -> RunnerResult:
        try:
            window = self._window(context)
        except (PydanticValidationError, TypeError, ValueError) as exc:
            return self.error_result(context, f"Invalid window: {exc}", INVALID_WINDOW)

        try:
            health = await self._aggregator.get(context.brand_id, window)
        except BrandIntelligenceError as exc:
            return self.domain_error_result(context, exc, BRAND_HEALTH_ERROR)

        return RunnerResult.ok({"health": health.model_dump(mode="json")})

    @staticmethod
    def _window(context: FeatureContext) -> Optional[TimeWindow]:
        metadata = context.metadata
        if metadata.get("window"):
            return TimeWindow.model_validate(metadata["window"])
        if metadata.get("days"):
            return TimeWindow.trailing_days(int(metadata["days"]))
        return None
