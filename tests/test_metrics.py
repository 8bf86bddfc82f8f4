"""Test the in-process metrics recorder."""

from brand_intelligence.core.metrics import ANALYSIS_FAILURE, LoggingMetrics


def test_durations_keep_running_totals_and_a_bounded_window():
    metrics = LoggingMetrics(recent_limit=3)

    for duration in (10.0, 40.0, 20.0, 30.0, 50.0):
        metrics.record_analysis_duration(duration)

    assert list(metrics.recent_durations_ms) == [20.0, 30.0, 50.0]
    assert metrics.analysis_count == 5
    assert metrics.total_duration_ms == 150.0
    assert metrics.max_duration_ms == 50.0
    assert metrics.average_duration_ms == 30.0


def test_no_samples():
    assert LoggingMetrics().average_duration_ms == 0.0


def test_error_counts_by_category():
    metrics = LoggingMetrics()
    metrics.increment_error_count(ANALYSIS_FAILURE)
    metrics.increment_error_count(ANALYSIS_FAILURE)

    assert metrics.error_counts == {ANALYSIS_FAILURE: 2}
