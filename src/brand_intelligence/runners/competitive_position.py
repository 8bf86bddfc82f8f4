"""Runner for competitive position analysis."""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from ..core import competitive
from ..core.competitive import CompetitiveAnalyzer
from ..core.errors import BrandIntelligenceError
from ..core.interfaces import ConfigProvider
from ..core.models import CompetitorMention, FeatureContext, RunnerResult
from .base import FeatureRunner

MISSING_COMPETITOR_DATA = "MISSING_COMPETITOR_DATA"
INVALID_COMPETITOR_DATA = "INVALID_COMPETITOR_DATA"
COMPETITIVE_POSITION_ERROR = "COMPETITIVE_POSITION_ERROR"


class CompetitivePositionRunner(FeatureRunner):
    """Share of voice, ranking and market position for a batch of responses.

    Uses ``metadata["competitor_mentions"]`` when supplied. Otherwise, with a
    language model configured, extracts them from ``metadata["content"]`` for
    the names in ``metadata["competitors"]``.
    """

    name = "competitive-position"
    flag = "features.competitive_position.enabled"

    def __init__(
        self,
        analyzer: Optional[CompetitiveAnalyzer] = None,
        config: Optional[ConfigProvider] = None,
    ):
        super().__init__(config)
        self._analyzer = analyzer

    async def run(self, context: FeatureContext) -> RunnerResult:
        metadata = context.metadata
        brand_name = metadata.get("brand_name") or context.brand_id
        total_responses = metadata.get("total_responses", 1)

        try:
            mentions = await self._collect_mentions(context)
            if mentions is None:
                return self.error_result(
                    context,
                    "No competitor mentions supplied and none could be extracted",
                    MISSING_COMPETITOR_DATA,
                )

            stats = competitive.aggregate(mentions, total_responses)
        except PydanticValidationError as exc:
            return self.error_result(context, str(exc), INVALID_COMPETITOR_DATA)
        except BrandIntelligenceError as exc:
            return self.domain_error_result(context, exc, COMPETITIVE_POSITION_ERROR)

        ranking = competitive.rank_competitors(stats)
        return RunnerResult.ok({
            "brand_name": brand_name,
            "total_responses": total_responses,
            "competitors": {name: stat.model_dump() for name, stat in stats.items()},
            "ranking": [r.model_dump() for r in ranking],
            "market_position": competitive.market_position(stats, brand_name),
        })

    async def _collect_mentions(self, context: FeatureContext) -> Optional[list[CompetitorMention]]:
        metadata = context.metadata
        supplied = metadata.get("competitor_mentions")
        if supplied is not None:
            return [CompetitorMention.model_validate(m) for m in supplied]

        content = metadata.get("content")
        competitors = metadata.get("competitors")
        if self._analyzer is None or not content or not competitors:
            return None
        return await self._analyzer.extract_competitor_mentions(content, competitors)
