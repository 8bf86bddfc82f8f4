"""Rule-based sentiment scoring with per-aspect breakdown.

Counts words from fixed positive and negative lists and turns the counts into
a polarity score and a magnitude. Aspects (performance, quality, ...) are
scored from the sentences that mention one of their keywords. Results are
cached by a hash of the input text.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping, Optional, Sequence

from .cache import TTLCache, content_key
from .errors import AnalysisError
from .models import AspectSentiment, SentimentResult

logger = logging.getLogger(__name__)

SENTIMENT_CACHE_TTL = 3600

POSITIVE_WORDS = (
    "good", "great", "excellent", "amazing", "wonderful", "fantastic",
    "happy", "joy", "love", "like", "best", "better", "positive",
    "recommend", "impressive", "awesome", "outstanding", "perfect",
    "brilliant", "exceptional", "superb", "terrific", "delightful",
)

NEGATIVE_WORDS = (
    "bad", "terrible", "awful", "horrible", "poor", "worst",
    "hate", "dislike", "negative", "disappointing", "mediocre",
    "failure", "fail", "problem", "issue", "trouble", "difficult",
    "frustrating", "annoying", "useless", "waste", "regret",
)

ASPECT_KEYWORDS: dict[str, tuple[str, ...]] = {
    "performance": ("performance", "speed", "fast", "slow", "responsive"),
    "quality": ("quality", "well-made", "durable", "cheap", "premium"),
    "usability": ("usability", "easy", "difficult", "intuitive", "confusing"),
    "value": ("value", "price", "expensive", "affordable", "cost"),
    "support": ("support", "service", "help", "assistance", "customer service"),
}

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def _word_pattern(words: Sequence[str]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(w) for w in words)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


def _ratio(positive: int, negative: int) -> float:
    total = positive + negative
    if total == 0:
        return 0.0
    return (positive - negative) / total


def score_sentiment(
    text: str,
    positive_words: Sequence[str] = POSITIVE_WORDS,
    negative_words: Sequence[str] = NEGATIVE_WORDS,
    aspects: Mapping[str, Sequence[str]] = ASPECT_KEYWORDS,
) -> SentimentResult:
    """Score ``text`` without touching any cache.

    score = (pos - neg) / (pos + neg); magnitude = (pos + neg) / words * 5.
    Text with no sentiment words is neutral and reports no aspects.
    """
    if not text or not text.strip():
        return SentimentResult.neutral()

    lowered = text.lower()
    positive_re = _word_pattern(positive_words)
    negative_re = _word_pattern(negative_words)

    positive_count = len(positive_re.findall(lowered))
    negative_count = len(negative_re.findall(lowered))
    sentiment_words = positive_count + negative_count
    if sentiment_words == 0:
        return SentimentResult.neutral()

    total_words = len(lowered.split())
    score = _ratio(positive_count, negative_count)
    magnitude = (sentiment_words / total_words) * 5

    return SentimentResult(
        score=score,
        magnitude=magnitude,
        aspects=_extract_aspects(lowered, positive_re, negative_re, aspects),
    )


def _extract_aspects(
    text: str,
    positive_re: re.Pattern[str],
    negative_re: re.Pattern[str],
    aspects: Mapping[str, Sequence[str]],
) -> list[AspectSentiment]:
    sentences = _SENTENCE_SPLIT.split(text)
    results = []

    for topic, keywords in aspects.items():
        matched = [k for k in keywords if re.search(rf"\b{re.escape(k)}\b", text)]
        if not matched:
            continue

        positive = 0
        negative = 0
        for keyword in matched:
            for sentence in sentences:
                if keyword in sentence:
                    positive += len(positive_re.findall(sentence))
                    negative += len(negative_re.findall(sentence))

        results.append(AspectSentiment(topic=topic, score=_ratio(positive, negative)))

    return results


class SentimentAnalyzer:
    """Cached front for ``score_sentiment``."""

    def __init__(
        self,
        cache: TTLCache,
        ttl: int = SENTIMENT_CACHE_TTL,
        positive_words: Optional[Sequence[str]] = None,
        negative_words: Optional[Sequence[str]] = None,
        aspects: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        self._cache = cache
        self._ttl = ttl
        self._positive = tuple(positive_words or POSITIVE_WORDS)
        self._negative = tuple(negative_words or NEGATIVE_WORDS)
        self._aspects = dict(aspects or ASPECT_KEYWORDS)

    async def analyze(self, text: str) -> SentimentResult:
        if not text or not text.strip():
            return SentimentResult.neutral()

        async def compute() -> SentimentResult:
            try:
                result = score_sentiment(text, self._positive, self._negative, self._aspects)
            except Exception as exc:
                logger.error("Sentiment analysis failed: %s", exc, exc_info=True)
                raise AnalysisError(
                    f"Failed to analyze sentiment: {exc}",
                    details={"content_preview": text[:50]},
                ) from exc
            logger.debug("Analyzed sentiment for content: %s...", text[:50])
            return result

        return await self._cache.get_or_set(content_key("sentiment", text), compute, self._ttl)
