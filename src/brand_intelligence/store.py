"""SQLite-backed mention and citation store.

Implements the ``MentionStore`` protocol the core depends on. SQLAlchemy
failures surface as ``PersistenceError``; nothing is retried here.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import AsyncIterator, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .core.errors import NotFoundError, PersistenceError
from .core.models import Citation, Mention, TrendPoint
from .sqlmodels import CitationRow, MentionRow

logger = logging.getLogger(__name__)


def _mention_from_row(row: MentionRow, citations: Optional[list[Citation]] = None) -> Mention:
    return Mention(
        id=row.id,
        brand_id=row.brand_id,
        content=row.content,
        sentiment_score=row.sentiment_score,
        magnitude=row.magnitude,
        context_metadata=row.context_metadata or {},
        mentioned_at=row.mentioned_at,
        deleted_at=row.deleted_at,
        citations=citations or [],
    )


def _citation_from_row(row: CitationRow) -> Citation:
    return Citation(
        id=row.id,
        mention_id=row.mention_id,
        source=row.source,
        text=row.text,
        authority_score=row.authority_score,
        metadata=row.metadata_ or {},
        created_at=row.created_at,
    )


class SqlMentionStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Store operation failed: %s", exc, exc_info=True)
            raise PersistenceError(f"Store operation failed: {exc}") from exc

    async def _live_mention(self, session: AsyncSession, mention_id: str) -> MentionRow:
        row = await session.get(MentionRow, mention_id)
        if row is None or row.deleted_at is not None:
            raise NotFoundError(f"Mention {mention_id} not found", details={"mention_id": mention_id})
        return row

    async def save_mention(self, mention: Mention) -> Mention:
        async with self._session() as session:
            session.add(MentionRow(
                id=mention.id,
                brand_id=mention.brand_id,
                content=mention.content,
                sentiment_score=mention.sentiment_score,
                magnitude=mention.magnitude,
                context_metadata=mention.context_metadata,
                mentioned_at=mention.mentioned_at,
            ))
            await session.commit()
        return mention

    async def find_mentions_by_brand(
        self,
        brand_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> list[Mention]:
        """Most recent first, soft-deleted mentions excluded."""
        query = (
            select(MentionRow)
            .where(MentionRow.brand_id == brand_id, MentionRow.deleted_at.is_(None))
            .order_by(MentionRow.mentioned_at.desc())
        )
        if start is not None:
            query = query.where(MentionRow.mentioned_at >= start)
        if end is not None:
            query = query.where(MentionRow.mentioned_at <= end)
        if limit is not None:
            query = query.limit(limit)

        async with self._session() as session:
            result = await session.execute(query)
            rows = result.scalars().all()
        return [_mention_from_row(r) for r in rows]

    async def find_mention_with_citations(self, mention_id: str) -> Mention:
        async with self._session() as session:
            row = await self._live_mention(session, mention_id)
            result = await session.execute(
                select(CitationRow)
                .where(CitationRow.mention_id == mention_id)
                .order_by(CitationRow.authority_score.desc())
            )
            citations = [_citation_from_row(c) for c in result.scalars().all()]
        return _mention_from_row(row, citations)

    async def sentiment_trend(self, brand_id: str, start: datetime, end: datetime) -> list[TrendPoint]:
        """Average sentiment per calendar day, oldest first."""
        day = func.date(MentionRow.mentioned_at)
        query = (
            select(day.label("day"), func.avg(MentionRow.sentiment_score).label("average_sentiment"))
            .where(
                MentionRow.brand_id == brand_id,
                MentionRow.deleted_at.is_(None),
                MentionRow.mentioned_at.between(start, end),
            )
            .group_by(day)
            .order_by(day.asc())
        )
        async with self._session() as session:
            result = await session.execute(query)
            rows = result.all()

        return [
            TrendPoint(
                date=r.day if isinstance(r.day, date) else date.fromisoformat(r.day),
                average_sentiment=float(r.average_sentiment),
            )
            for r in rows
        ]

    async def save_citation(self, citation: Citation) -> Citation:
        async with self._session() as session:
            await self._live_mention(session, citation.mention_id)
            session.add(CitationRow(
                id=citation.id,
                mention_id=citation.mention_id,
                source=citation.source,
                text=citation.text,
                authority_score=citation.authority_score,
                metadata_=citation.metadata,
                created_at=citation.created_at,
            ))
            await session.commit()
        return citation

    async def find_citations(
        self,
        mention_ids: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> list[Citation]:
        """Citations ordered by authority, highest first."""
        if mention_ids is not None and not mention_ids:
            return []

        query = select(CitationRow).order_by(CitationRow.authority_score.desc(), CitationRow.created_at.asc())
        if mention_ids is not None:
            query = query.where(CitationRow.mention_id.in_(list(mention_ids)))
        if limit is not None:
            query = query.limit(limit)

        async with self._session() as session:
            result = await session.execute(query)
            rows = result.scalars().all()
        return [_citation_from_row(r) for r in rows]

    async def delete_mention(self, mention_id: str) -> None:
        """Soft-delete a mention and drop its citations."""
        async with self._session() as session:
            row = await self._live_mention(session, mention_id)
            row.deleted_at = datetime.utcnow()
            await session.execute(delete(CitationRow).where(CitationRow.mention_id == mention_id))
            await session.commit()
        logger.info("Deleted mention %s", mention_id)
