"""Pytest configuration and shared fixtures."""

from datetime import datetime

import pytest
import pytest_asyncio

from brand_intelligence.bootstrap import build_services
from brand_intelligence.config import EnvConfig
from brand_intelligence.core.authority import AuthorityScorer
from brand_intelligence.core.cache import TTLCache
from brand_intelligence.core.citations import CitationTracker
from brand_intelligence.core.models import Mention
from brand_intelligence.db import create_engine, init_db
from brand_intelligence.db import session_factory as make_session_factory
from brand_intelligence.store import SqlMentionStore


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> TTLCache:
    return TTLCache(clock=clock)


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Isolated SQLite database per test."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield make_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def store(session_factory) -> SqlMentionStore:
    return SqlMentionStore(session_factory)


@pytest.fixture
def tracker(store, cache) -> CitationTracker:
    return CitationTracker(store, AuthorityScorer(cache))


@pytest.fixture
def config() -> EnvConfig:
    """Config isolated from the real process environment."""
    return EnvConfig(environ={})


@pytest.fixture
def services(session_factory, config):
    return build_services(session_factory=session_factory, config=config)


@pytest.fixture
def make_mention():
    def _make(brand_id: str = "brand-1", sentiment: float = 0.0, mentioned_at: datetime = None, **kwargs) -> Mention:
        fields = {"brand_id": brand_id, "content": f"{brand_id} content", "sentiment_score": sentiment, **kwargs}
        if mentioned_at is not None:
            fields["mentioned_at"] = mentioned_at
        return Mention(**fields)

    return _make
