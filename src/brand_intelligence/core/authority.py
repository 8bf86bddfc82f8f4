"""Citation source authority scoring.

Maps a URL or bare domain to a 0-1 credibility score from a domain table,
then nudges it with source-level heuristics (scheme, academic paths,
government/education paths, research keywords, blog/forum penalty).
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional
from urllib.parse import urlsplit

from .cache import TTLCache, content_key
from .errors import AnalysisError

logger = logging.getLogger(__name__)

AUTHORITY_CACHE_TTL = 86400
DEFAULT_AUTHORITY = 0.5

# Exact domains first, then generic suffixes. Suffix matching walks this
# table in order, so more specific entries must precede broader ones.
DOMAIN_SCORES: dict[str, float] = {
    "wikipedia.org": 0.9,
    "github.com": 0.85,
    "arxiv.org": 0.88,
    "scholar.google.com": 0.92,
    "research.gov": 0.95,
    "nih.gov": 0.95,
    "edu": 0.85,
    "gov": 0.9,
    "org": 0.75,
    "com": 0.6,
    "net": 0.6,
    "io": 0.65,
}


def extract_domain(source: str) -> str:
    """Normalize a source to a lowercased hostname.

    Falls back to the lowercased raw string when it cannot be parsed.
    """
    url = source if source.startswith("http") else f"https://{source}"
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        hostname = None
    if not hostname:
        return source.lower()
    return hostname.lower()


def domain_score(domain: str, table: Mapping[str, float] = DOMAIN_SCORES) -> float:
    if domain in table:
        return table[domain]
    for key, score in table.items():
        if domain.endswith(f".{key}"):
            return score
    return DEFAULT_AUTHORITY


def apply_source_factors(source: str, score: float) -> float:
    if source.startswith("https://"):
        score += 0.05
    if "doi.org" in source or "arxiv.org" in source:
        score += 0.1
    if ".gov/" in source:
        score += 0.1
    if ".edu/" in source:
        score += 0.08
    if "research" in source or "institute" in source or "foundation" in source:
        score += 0.05
    if "blog" in source or "forum" in source:
        score -= 0.1
    return score


def calculate_authority(source: str, table: Mapping[str, float] = DOMAIN_SCORES) -> float:
    """Uncached authority score in [0, 1]."""
    score = domain_score(extract_domain(source), table)
    score = apply_source_factors(source, score)
    return max(0.0, min(1.0, score))


class AuthorityScorer:
    """Cached front for ``calculate_authority``."""

    def __init__(
        self,
        cache: TTLCache,
        ttl: int = AUTHORITY_CACHE_TTL,
        domain_scores: Optional[Mapping[str, float]] = None,
    ):
        self._cache = cache
        self._ttl = ttl
        self._table = dict(domain_scores or DOMAIN_SCORES)

    async def score(self, source: str) -> float:
        async def compute() -> float:
            try:
                return calculate_authority(source, self._table)
            except Exception as exc:
                raise AnalysisError(
                    f"Failed to score authority for {source!r}: {exc}",
                    details={"source": source},
                ) from exc

        return await self._cache.get_or_set(content_key("authority", source), compute, self._ttl)
