"""Test citation tracking."""

import pytest

from brand_intelligence.core.errors import NotFoundError


@pytest.mark.asyncio
async def test_track_scores_and_persists(tracker, store, make_mention):
    mention = await store.save_mention(make_mention())

    citation = await tracker.track("https://en.wikipedia.org/wiki/Nike", mention, {"rank": 1})

    assert citation.mention_id == mention.id
    assert citation.text == citation.source
    assert citation.authority_score == pytest.approx(0.95)
    assert citation.metadata == {"rank": 1}
    assert [c.id for c in await tracker.citations_by_mention(mention.id)] == [citation.id]


@pytest.mark.asyncio
async def test_track_accepts_mention_id(tracker, store, make_mention):
    mention = await store.save_mention(make_mention())

    citation = await tracker.track("github.com", mention.id)

    assert citation.mention_id == mention.id
    assert citation.metadata == {}


@pytest.mark.asyncio
async def test_track_unknown_mention_propagates_store_error(tracker):
    with pytest.raises(NotFoundError):
        await tracker.track("github.com", "missing-mention")


@pytest.mark.asyncio
async def test_top_citations_across_mentions(tracker, store, make_mention):
    first = await store.save_mention(make_mention())
    second = await store.save_mention(make_mention(brand_id="brand-2"))
    await tracker.track("http://someblog.example", first)
    await tracker.track("https://arxiv.org/abs/1234", second)
    await tracker.track("example.com", first)

    top = await tracker.top_citations(limit=2)

    assert [c.source for c in top] == ["https://arxiv.org/abs/1234", "example.com"]
