"""Brand health rollup over a time window."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .interfaces import MentionStore
from .models import BrandHealth, Mention, TimeWindow

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30
DEFAULT_FETCH_LIMIT = 100
DEFAULT_TOP_CITATIONS = 10


class BrandHealthAggregator:
    """Summarizes stored mentions into sentiment, trend and top citations.

    ``mention_count`` is the number of mentions fetched (at most
    ``fetch_limit``), not a global total. Top citations are gathered across
    every fetched mention.
    """

    def __init__(
        self,
        store: MentionStore,
        fetch_limit: int = DEFAULT_FETCH_LIMIT,
        top_citation_limit: int = DEFAULT_TOP_CITATIONS,
        default_days: int = DEFAULT_WINDOW_DAYS,
    ):
        self._store = store
        self.fetch_limit = fetch_limit
        self.top_citation_limit = top_citation_limit
        self.default_days = default_days

    async def get(self, brand_id: str, window: Optional[TimeWindow] = None) -> BrandHealth:
        window = window or TimeWindow.trailing_days(self.default_days)

        mentions, trend = await asyncio.gather(
            self._store.find_mentions_by_brand(
                brand_id, start=window.start, end=window.end, limit=self.fetch_limit
            ),
            self._store.sentiment_trend(brand_id, window.start, window.end),
        )

        top_citations = []
        if mentions:
            top_citations = await self._store.find_citations(
                mention_ids=[m.id for m in mentions],
                limit=self.top_citation_limit,
            )

        logger.debug(
            "Brand health for %s: %d mentions, %d trend points", brand_id, len(mentions), len(trend)
        )
        return BrandHealth(
            brand_id=brand_id,
            overall_sentiment=overall_sentiment(mentions),
            trend=trend,
            mention_count=len(mentions),
            top_citations=top_citations,
            window=window,
        )


def overall_sentiment(mentions: list[Mention]) -> float:
    if not mentions:
        return 0.0
    return sum(m.sentiment_score for m in mentions) / len(mentions)
