"""Test competitive position scoring."""

import json
from unittest.mock import AsyncMock

import pytest

from brand_intelligence.core.competitive import (
    CompetitiveAnalyzer,
    aggregate,
    market_position,
    rank_competitors,
)
from brand_intelligence.core.errors import AnalysisError, ValidationError
from brand_intelligence.core.models import CompetitorMention


@pytest.fixture
def mentions():
    return [
        CompetitorMention(name="Acme", position=1, sentiment=0.5),
        CompetitorMention(name="Acme", position=3, sentiment=-0.5),
        CompetitorMention(name="Globex", position=2, sentiment=1.0),
    ]


def test_aggregate_per_name_statistics(mentions):
    stats = aggregate(mentions, total_responses=4)

    acme = stats["Acme"]
    assert acme.mention_count == 2
    assert acme.average_position == 2.0
    assert acme.average_sentiment == 0.0
    assert acme.share_of_voice == 50.0
    assert stats["Globex"].share_of_voice == 25.0


def test_share_of_voice_sums_to_mentions_over_responses(mentions):
    stats = aggregate(mentions, total_responses=4)

    assert sum(s.share_of_voice for s in stats.values()) == pytest.approx(len(mentions) / 4 * 100)
    assert all(0 <= s.share_of_voice <= 100 for s in stats.values())


def test_share_of_voice_is_capped():
    records = [CompetitorMention(name="Acme", position=1, sentiment=0)] * 3

    assert aggregate(records, total_responses=1)["Acme"].share_of_voice == 100.0


@pytest.mark.parametrize("total", [0, -1])
def test_non_positive_total_responses_rejected(mentions, total):
    with pytest.raises(ValidationError) as exc_info:
        aggregate(mentions, total_responses=total)

    assert exc_info.value.code == "INVALID_TOTAL_RESPONSES"


def test_ranking_is_sorted_by_weighted_score(mentions):
    ranked = rank_competitors(aggregate(mentions, total_responses=4))

    assert [r.name for r in ranked] == ["Acme", "Globex"]
    assert ranked[0].score == pytest.approx(155.0)
    assert ranked[1].score == pytest.approx(140.0)


def test_market_position(mentions):
    stats = aggregate(mentions, total_responses=4)

    assert market_position(stats, "Acme") == 100.0
    assert market_position(stats, "Globex") == 50.0
    assert market_position(stats, "Initech") == 0.0


def test_empty_mentions_yield_empty_stats():
    stats = aggregate([], total_responses=3)

    assert stats == {}
    assert rank_competitors(stats) == []
    assert market_position(stats, "Acme") == 0.0


@pytest.mark.asyncio
async def test_extract_competitor_mentions_parses_model_output():
    llm = AsyncMock()
    llm.complete.return_value = json.dumps({"mentions": [
        {"name": "Acme", "position": 1, "sentiment": 0.8},
        {"name": "Globex", "position": 4, "sentiment": -0.2},
    ]})
    analyzer = CompetitiveAnalyzer(llm)

    records = await analyzer.extract_competitor_mentions("Acme leads, Globex trails", ["Acme", "Globex"])

    assert [r.name for r in records] == ["Acme", "Globex"]
    assert records[1].sentiment == -0.2
    prompt = llm.complete.call_args.args[0]
    assert "- Acme" in prompt and "- Globex" in prompt
    assert llm.complete.call_args.kwargs["temperature"] == 0.3


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", [
    "not json",
    json.dumps({"results": []}),
    json.dumps({"mentions": [{"name": "Acme", "position": 42, "sentiment": 0}]}),
])
async def test_malformed_model_output_raises_analysis_error(raw):
    llm = AsyncMock()
    llm.complete.return_value = raw

    with pytest.raises(AnalysisError):
        await CompetitiveAnalyzer(llm).extract_competitor_mentions("text", ["Acme"])
