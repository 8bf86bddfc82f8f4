"""Test the SQLite mention store."""

from datetime import date, datetime, timedelta

import pytest

from brand_intelligence.core.errors import NotFoundError
from brand_intelligence.core.models import Citation


def _citation(mention_id: str, source: str, authority: float) -> Citation:
    return Citation(mention_id=mention_id, source=source, text=source, authority_score=authority)


@pytest.mark.asyncio
async def test_save_and_find_mentions_newest_first(store, make_mention):
    base = datetime(2026, 3, 1, 12, 0)
    older = await store.save_mention(make_mention(mentioned_at=base))
    newer = await store.save_mention(make_mention(mentioned_at=base + timedelta(hours=1)))
    await store.save_mention(make_mention(brand_id="other"))

    found = await store.find_mentions_by_brand("brand-1")

    assert [m.id for m in found] == [newer.id, older.id]


@pytest.mark.asyncio
async def test_find_mentions_by_brand_window_and_limit(store, make_mention):
    base = datetime(2026, 3, 1)
    for day in range(5):
        await store.save_mention(make_mention(mentioned_at=base + timedelta(days=day)))

    windowed = await store.find_mentions_by_brand(
        "brand-1", start=base + timedelta(days=1), end=base + timedelta(days=3)
    )
    limited = await store.find_mentions_by_brand("brand-1", limit=2)

    assert [m.mentioned_at.day for m in windowed] == [4, 3, 2]
    assert [m.mentioned_at.day for m in limited] == [5, 4]


@pytest.mark.asyncio
async def test_find_mention_with_citations_orders_by_authority(store, make_mention):
    mention = await store.save_mention(make_mention())
    await store.save_citation(_citation(mention.id, "low.example", 0.3))
    await store.save_citation(_citation(mention.id, "high.example", 0.9))

    loaded = await store.find_mention_with_citations(mention.id)

    assert loaded.id == mention.id
    assert [c.source for c in loaded.citations] == ["high.example", "low.example"]


@pytest.mark.asyncio
async def test_missing_mention_raises_not_found(store):
    with pytest.raises(NotFoundError) as exc_info:
        await store.find_mention_with_citations("does-not-exist")

    assert exc_info.value.code == "NOT_FOUND"


@pytest.mark.asyncio
async def test_citation_requires_existing_mention(store):
    with pytest.raises(NotFoundError):
        await store.save_citation(_citation("does-not-exist", "example.com", 0.6))

    assert await store.find_citations() == []


@pytest.mark.asyncio
async def test_find_citations_filters_and_limits(store, make_mention):
    first = await store.save_mention(make_mention())
    second = await store.save_mention(make_mention())
    await store.save_citation(_citation(first.id, "a.example", 0.4))
    await store.save_citation(_citation(second.id, "b.example", 0.8))
    await store.save_citation(_citation(second.id, "c.example", 0.6))

    assert [c.source for c in await store.find_citations(mention_ids=[second.id])] == ["b.example", "c.example"]
    assert [c.source for c in await store.find_citations(limit=2)] == ["b.example", "c.example"]
    assert await store.find_citations(mention_ids=[]) == []


@pytest.mark.asyncio
async def test_soft_delete_hides_mention_and_drops_citations(store, make_mention):
    mention = await store.save_mention(make_mention())
    await store.save_citation(_citation(mention.id, "example.com", 0.6))

    await store.delete_mention(mention.id)

    assert await store.find_mentions_by_brand("brand-1") == []
    assert await store.find_citations(mention_ids=[mention.id]) == []
    with pytest.raises(NotFoundError):
        await store.find_mention_with_citations(mention.id)
    with pytest.raises(NotFoundError):
        await store.delete_mention(mention.id)


@pytest.mark.asyncio
async def test_sentiment_trend_averages_per_day(store, make_mention):
    await store.save_mention(make_mention(sentiment=0.5, mentioned_at=datetime(2026, 3, 1, 9)))
    await store.save_mention(make_mention(sentiment=-0.1, mentioned_at=datetime(2026, 3, 1, 18)))
    await store.save_mention(make_mention(sentiment=1.0, mentioned_at=datetime(2026, 3, 2, 9)))
    await store.save_mention(make_mention(sentiment=-1.0, mentioned_at=datetime(2026, 4, 1)))

    trend = await store.sentiment_trend("brand-1", datetime(2026, 3, 1), datetime(2026, 3, 31))

    assert [p.date for p in trend] == [date(2026, 3, 1), date(2026, 3, 2)]
    assert trend[0].average_sentiment == pytest.approx(0.2)
    assert trend[1].average_sentiment == pytest.approx(1.0)
