"""Competitive position scoring.

Aggregates per-competitor mention records into share of voice and a weighted
composite ranking, then places the tracked brand within that ranking.
"""

from __future__ import annotations

import json
import logging
from typing import Iterable, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from .errors import AnalysisError, ValidationError
from .interfaces import CompletionProvider
from .models import CompetitorMention, CompetitorStat, RankedCompetitor

logger = logging.getLogger(__name__)

MENTION_WEIGHT = 0.3
POSITION_WEIGHT = 0.4
SENTIMENT_WEIGHT = 0.3


def aggregate(
    mentions: Iterable[CompetitorMention],
    total_responses: int,
) -> dict[str, CompetitorStat]:
    """Fold raw competitor mentions into per-name statistics.

    share_of_voice = mention_count / total_responses * 100, capped at 100 for
    names that appear more often than there are responses.
    """
    if total_responses <= 0:
        raise ValidationError(
            "total_responses must be positive",
            code="INVALID_TOTAL_RESPONSES",
            details={"total_responses": total_responses},
        )

    totals: dict[str, list[float]] = {}
    for mention in mentions:
        count, position, sentiment = totals.setdefault(mention.name, [0, 0.0, 0.0])
        totals[mention.name] = [count + 1, position + mention.position, sentiment + mention.sentiment]

    stats = {}
    for name, (count, position, sentiment) in totals.items():
        stats[name] = CompetitorStat(
            name=name,
            mention_count=int(count),
            average_position=position / count,
            average_sentiment=sentiment / count,
            share_of_voice=min(100.0, count / total_responses * 100),
        )
    return stats


def ranking_score(stat: CompetitorStat) -> float:
    return (
        stat.mention_count * MENTION_WEIGHT
        + stat.average_position * POSITION_WEIGHT
        + ((stat.average_sentiment + 1) / 2) * SENTIMENT_WEIGHT
    ) * 100


def rank_competitors(stats: dict[str, CompetitorStat]) -> list[RankedCompetitor]:
    ranked = [RankedCompetitor(name=name, score=ranking_score(stat)) for name, stat in stats.items()]
    ranked.sort(key=lambda r: r.score, reverse=True)
    return ranked


def market_position(stats: dict[str, CompetitorStat], brand: str) -> float:
    """Relative standing of ``brand``: 100 for the leader, 0 when absent."""
    ranked = rank_competitors(stats)
    for index, entry in enumerate(ranked):
        if entry.name == brand:
            return 100 * (1 - index / len(ranked))
    return 0.0


EXTRACTION_SYSTEM_PROMPT = (
    "You are a competitive analysis expert. Analyze text for competitor mentions "
    "and sentiment. Always respond with valid JSON."
)


class CompetitiveAnalyzer:
    """Extracts competitor mention records from free text via a language model."""

    def __init__(self, llm: CompletionProvider):
        self._llm = llm

    async def extract_competitor_mentions(
        self,
        text: str,
        competitors: Sequence[str],
        model: Optional[str] = None,
    ) -> list[CompetitorMention]:
        listing = "\n".join(f"- {name}" for name in competitors)
        prompt = (
            f'Analyze this response for mentions of the competitors below:\n"{text}"\n\n'
            f"Competitors:\n{listing}\n\n"
            'Respond as {"mentions": [{"name": str, "position": number (1-10, 1 being most '
            'prominent), "sentiment": number (-1 to 1)}]}'
        )
        options = {"system": EXTRACTION_SYSTEM_PROMPT, "temperature": 0.3}
        if model:
            options["model"] = model
        raw = await self._llm.complete(prompt, **options)

        try:
            payload = json.loads(raw)
            records = payload["mentions"]
            return [CompetitorMention.model_validate(r) for r in records]
        except (json.JSONDecodeError, KeyError, TypeError, PydanticValidationError) as exc:
            logger.warning("Unparseable competitor extraction output: %s", raw[:200])
            raise AnalysisError(
                f"Competitor extraction returned malformed output: {exc}",
                details={"competitors": list(competitors)},
            ) from exc
