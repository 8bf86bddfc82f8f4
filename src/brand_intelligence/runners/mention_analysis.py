"""Runner for the mention analysis feature."""

from __future__ import annotations

from typing import Optional

from ..core.analysis import MentionAnalyzer
from ..core.brand_health import BrandHealthAggregator
from ..core.errors import BrandIntelligenceError
from ..core.interfaces import ConfigProvider
from ..core.mentions import analyze_prominence
from ..core.models import FeatureContext, RunnerResult
from .base import FeatureRunner

MISSING_CONTENT = "MISSING_CONTENT"
MISSING_BRAND = "MISSING_BRAND"
MENTION_ANALYSIS_ERROR = "MENTION_ANALYSIS_ERROR"


class MentionAnalysisRunner(FeatureRunner):
    """Analyzes ``metadata["content"]`` and reports the stored mention plus brand health.

    Recognized metadata: ``content`` (required), ``brand_name`` (enables
    prominence scoring), ``context`` (stored with the mention) and
    ``citations`` (list of ``{"source", "metadata"}``).
    """

    name = "mention-analysis"
    flag = "features.mention_analysis.enabled"

    def __init__(
        self,
        analyzer: MentionAnalyzer,
        brand_health: BrandHealthAggregator,
        config: Optional[ConfigProvider] = None,
    ):
        super().__init__(config)
        self._analyzer = analyzer
        self._brand_health = brand_health

    async def run(self, context: FeatureContext) -> RunnerResult:
        metadata = context.metadata
        content = metadata.get("content")
        if not content or not str(content).strip():
            return self.error_result(context, "Missing content in request", MISSING_CONTENT)

        brand_name = metadata.get("brand_name")
        if brand_name is not None and not str(brand_name).strip():
            return self.error_result(context, "Brand name must not be blank", MISSING_BRAND)

        try:
            mention = await self._analyzer.analyze_mention(
                brand_id=context.brand_id,
                content=content,
                context=metadata.get("context"),
                citations=metadata.get("citations"),
            )
            data = {"mention": mention.model_dump(mode="json")}

            if brand_name:
                data["prominence"] = analyze_prominence(content, brand_name).model_dump(mode="json")

            health = await self._brand_health.get(context.brand_id)
            data["health"] = health.model_dump(mode="json")
        except BrandIntelligenceError as exc:
            return self.domain_error_result(context, exc, MENTION_ANALYSIS_ERROR)

        return RunnerResult.ok(data)
