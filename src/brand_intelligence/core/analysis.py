"""Mention analysis: score sentiment, persist the mention, track citations."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Optional, Sequence

from .citations import CitationTracker
from .errors import ValidationError
from .interfaces import MentionStore, MetricsRecorder
from .metrics import ANALYSIS_FAILURE
from .models import Mention
from .sentiment import SentimentAnalyzer

logger = logging.getLogger(__name__)


class MentionAnalyzer:
    def __init__(
        self,
        store: MentionStore,
        sentiment: SentimentAnalyzer,
        citations: CitationTracker,
        metrics: MetricsRecorder,
    ):
        self._store = store
        self._sentiment = sentiment
        self._citations = citations
        self._metrics = metrics

    async def analyze_mention(
        self,
        brand_id: str,
        content: str,
        context: Optional[dict[str, Any]] = None,
        citations: Optional[Sequence[dict[str, Any]]] = None,
    ) -> Mention:
        """Analyze ``content`` for ``brand_id`` and return the stored mention.

        ``citations`` items are ``{"source": str, "metadata": dict}``; they are
        scored and persisted concurrently once the mention exists. Failures
        are counted as ``analysis_failure`` and re-raised.
        """
        if not content or not content.strip():
            raise ValidationError(
                "Missing content in request",
                code="MISSING_CONTENT",
                details={"brand_id": brand_id},
            )
        for item in citations or ():
            if not item.get("source"):
                raise ValidationError(
                    "Citation is missing a source",
                    code="MISSING_CITATION_SOURCE",
                    details={"brand_id": brand_id},
                )

        started = time.perf_counter()
        try:
            sentiment = await self._sentiment.analyze(content)
            mention = await self._store.save_mention(Mention(
                brand_id=brand_id,
                content=content,
                sentiment_score=sentiment.score,
                magnitude=sentiment.magnitude,
                context_metadata=context or {},
            ))

            if citations:
                await asyncio.gather(*(
                    self._citations.track(c["source"], mention, c.get("metadata"))
                    for c in citations
                ))

            self._metrics.record_analysis_duration((time.perf_counter() - started) * 1000)
            return await self._store.find_mention_with_citations(mention.id)
        except Exception:
            self._metrics.increment_error_count(ANALYSIS_FAILURE)
            raise
