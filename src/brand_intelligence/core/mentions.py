"""Brand mention detection and prominence scoring."""

from __future__ import annotations

import math

from .errors import ValidationError
from .models import ProminenceResult

MAX_FREQUENCY_POINTS = 50.0
MAX_POSITION_POINTS = 50.0


def brand_patterns(brand: str) -> list[str]:
    """Surface forms that count as a mention of ``brand``."""
    return [
        brand,
        brand.lower(),
        brand.upper(),
        f"{brand}'s",
        f"{brand.lower()}'s",
    ]


def find_brand_mentions(text: str, brand: str) -> tuple[int, list[int], int]:
    """Scan whitespace-delimited tokens for the brand.

    Returns (mention count, token index of each match, total token count).
    A token containing any surface form counts once, so ``Nike.`` and
    ``Nike's`` both match ``Nike``.
    """
    if not brand or not brand.strip():
        raise ValidationError("Brand name is required for mention detection", code="MISSING_BRAND")

    patterns = brand_patterns(brand.strip())
    tokens = text.split()
    positions = [i for i, token in enumerate(tokens) if any(p in token for p in patterns)]
    return len(positions), positions, len(tokens)


def prominence_score(mentions: int, positions: list[int], total_length: int) -> float:
    """Combine mention frequency and earliness into a 0-100 score.

    Frequency: min(log10(mentions + 1) * 25, 50).
    Position: mean of max(0, 100 - idx / total * 100), scaled to 0-50.
    """
    if mentions == 0:
        return 0.0

    frequency = min(math.log10(mentions + 1) * 25, MAX_FREQUENCY_POINTS)

    position = 0.0
    if positions and total_length > 0:
        weights = [max(0.0, 100 - (pos / total_length) * 100) for pos in positions]
        position = (sum(weights) / len(weights)) / 100 * MAX_POSITION_POINTS

    return min(frequency + position, 100.0)


def analyze_prominence(text: str, brand: str) -> ProminenceResult:
    count, positions, total = find_brand_mentions(text, brand)
    return ProminenceResult(
        brand=brand,
        mention_count=count,
        positions=positions,
        total_tokens=total,
        prominence_score=prominence_score(count, positions, total),
    )
