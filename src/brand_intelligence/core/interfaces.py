"""Collaborator interfaces the core depends on.

The scoring engine never imports a database driver or HTTP client directly;
it talks to these protocols. ``store.SqlMentionStore``,
``core.clients.llm.OpenAICompletionClient``, ``config.EnvConfig`` and
``core.metrics.LoggingMetrics`` are the shipped implementations.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from .models import Citation, Mention, TrendPoint


class MentionStore(Protocol):
    async def save_mention(self, mention: Mention) -> Mention: ...

    async def find_mentions_by_brand(
        self,
        brand_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> list[Mention]: ...

    async def find_mention_with_citations(self, mention_id: str) -> Mention: ...

    async def sentiment_trend(
        self, brand_id: str, start: datetime, end: datetime
    ) -> list[TrendPoint]: ...

    async def save_citation(self, citation: Citation) -> Citation: ...

    async def find_citations(
        self,
        mention_ids: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> list[Citation]: ...

    async def delete_mention(self, mention_id: str) -> None: ...


class CompletionProvider(Protocol):
    async def complete(self, prompt: str, **options: Any) -> str: ...


class ConfigProvider(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...


class MetricsRecorder(Protocol):
    def record_analysis_duration(self, duration_ms: float) -> None: ...

    def increment_error_count(self, category: str) -> None: ...
