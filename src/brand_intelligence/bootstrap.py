"""Composition root.

Builds the scoring services and the runner orchestrator once per process from
an explicit list of runner constructors. Nothing here is module-global; the
host keeps the returned ``Services`` and passes it where it is needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .config import EnvConfig
from .core.analysis import MentionAnalyzer
from .core.authority import AuthorityScorer
from .core.brand_health import BrandHealthAggregator
from .core.cache import TTLCache
from .core.citations import CitationTracker
from .core.clients.llm import API_BASE, DEFAULT_MODEL, OpenAICompletionClient
from .core.competitive import CompetitiveAnalyzer
from .core.interfaces import CompletionProvider, MentionStore, MetricsRecorder
from .core.metrics import LoggingMetrics
from .core.sentiment import SentimentAnalyzer
from .runners import (
    BrandHealthRunner,
    CompetitivePositionRunner,
    FeatureRunner,
    FeatureRunnerOrchestrator,
    MentionAnalysisRunner,
)
from .store import SqlMentionStore

logger = logging.getLogger(__name__)

DEFAULT_CACHE_ENTRIES = 10_000


@dataclass
class Services:
    config: EnvConfig
    store: MentionStore
    cache: TTLCache
    metrics: MetricsRecorder
    sentiment: SentimentAnalyzer
    authority: AuthorityScorer
    citations: CitationTracker
    analyzer: MentionAnalyzer
    brand_health: BrandHealthAggregator
    competitive: Optional[CompetitiveAnalyzer]
    orchestrator: FeatureRunnerOrchestrator


RunnerFactory = Callable[[Services], FeatureRunner]

RUNNER_FACTORIES: list[RunnerFactory] = [
    lambda s: MentionAnalysisRunner(s.analyzer, s.brand_health, s.config),
    lambda s: CompetitivePositionRunner(s.competitive, s.config),
    lambda s: BrandHealthRunner(s.brand_health, s.config),
]


def completion_provider_from_config(config: EnvConfig) -> Optional[CompletionProvider]:
    """OpenAI-compatible client when ``OPENAI_API_KEY`` is set, else None."""
    api_key = config.get("openai.api_key", "")
    if not api_key:
        logger.info("OPENAI_API_KEY not set; language-model extraction disabled")
        return None
    return OpenAICompletionClient(
        api_key=api_key,
        model=config.get("openai.model", DEFAULT_MODEL),
        base_url=config.get("openai.base_url", API_BASE),
    )


def build_services(
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    config: Optional[EnvConfig] = None,
    store: Optional[MentionStore] = None,
    llm: Optional[CompletionProvider] = None,
    metrics: Optional[MetricsRecorder] = None,
    runner_factories: Optional[list[RunnerFactory]] = None,
) -> Services:
    """Wire every component and register the runners.

    Either ``store`` or ``session_factory`` must be given.
    """
    config = config or EnvConfig()
    if store is None:
        if session_factory is None:
            raise ValueError("build_services needs a store or a session factory")
        store = SqlMentionStore(session_factory)
    if llm is None:
        llm = completion_provider_from_config(config)

    cache = TTLCache(max_entries=config.get("cache.max_entries", DEFAULT_CACHE_ENTRIES))
    metrics = metrics or LoggingMetrics()
    sentiment = SentimentAnalyzer(cache)
    authority = AuthorityScorer(cache)
    citations = CitationTracker(store, authority)
    timeout = config.get("runner.timeout.seconds", 0.0)

    services = Services(
        config=config,
        store=store,
        cache=cache,
        metrics=metrics,
        sentiment=sentiment,
        authority=authority,
        citations=citations,
        analyzer=MentionAnalyzer(store, sentiment, citations, metrics),
        brand_health=BrandHealthAggregator(store),
        competitive=CompetitiveAnalyzer(llm) if llm is not None else None,
        orchestrator=FeatureRunnerOrchestrator(timeout=timeout or None),
    )

    for factory in runner_factories if runner_factories is not None else RUNNER_FACTORIES:
        services.orchestrator.register(factory(services))

    return services
