"""Analysis metrics hooks.

Advisory only: nothing in the pipeline depends on these counters for
correctness.
"""

from __future__ import annotations

import logging
from collections import Counter, deque

logger = logging.getLogger(__name__)

ANALYSIS_FAILURE = "analysis_failure"
DEFAULT_RECENT_DURATIONS = 1000


class LoggingMetrics:
    """Keeps counters in process and logs each observation.

    Durations are kept as running totals plus a bounded window of the most
    recent samples.
    """

    def __init__(self, recent_limit: int = DEFAULT_RECENT_DURATIONS):
        self.error_counts: Counter[str] = Counter()
        self.recent_durations_ms: deque[float] = deque(maxlen=recent_limit)
        self.analysis_count = 0
        self.total_duration_ms = 0.0
        self.max_duration_ms = 0.0

    @property
    def average_duration_ms(self) -> float:
        if not self.analysis_count:
            return 0.0
        return self.total_duration_ms / self.analysis_count

    def record_analysis_duration(self, duration_ms: float) -> None:
        self.recent_durations_ms.append(duration_ms)
        self.analysis_count += 1
        self.total_duration_ms += duration_ms
        self.max_duration_ms = max(self.max_duration_ms, duration_ms)
        logger.debug("Analysis duration: %.1fms", duration_ms)

    def increment_error_count(self, category: str) -> None:
        self.error_counts[category] += 1
        logger.info("Error count incremented for %s (now %d)", category, self.error_counts[category])
