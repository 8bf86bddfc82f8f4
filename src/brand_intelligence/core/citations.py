"""Citation tracking: score a source once, persist it against a mention."""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from .authority import AuthorityScorer
from .interfaces import MentionStore
from .models import Citation, Mention

logger = logging.getLogger(__name__)


class CitationTracker:
    def __init__(self, store: MentionStore, authority: AuthorityScorer):
        self._store = store
        self._authority = authority

    async def track(
        self,
        source: str,
        mention: Union[Mention, str],
        metadata: Optional[dict[str, Any]] = None,
    ) -> Citation:
        """Score ``source`` and persist it as a citation of ``mention``.

        The source string doubles as the citation's display text. Store
        failures propagate unchanged.
        """
        mention_id = mention.id if isinstance(mention, Mention) else mention
        authority = await self._authority.score(source)

        citation = Citation(
            mention_id=mention_id,
            source=source,
            text=source,
            authority_score=authority,
            metadata=metadata or {},
        )
        saved = await self._store.save_citation(citation)
        logger.debug("Tracked citation %s for mention %s (authority %.2f)", source, mention_id, authority)
        return saved

    async def citations_by_mention(self, mention_id: str) -> list[Citation]:
        return await self._store.find_citations(mention_ids=[mention_id])

    async def top_citations(self, limit: int = 10) -> list[Citation]:
        return await self._store.find_citations(limit=limit)
