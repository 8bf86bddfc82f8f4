"""SQLAlchemy models for local SQLite mention and citation storage.

Mentions and citations are separate tables; a citation refers to its mention
by id only. Competitor statistics and brand health are derived on demand and
never stored.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class MentionRow(Base):
    """One analyzed block of brand-relevant text."""

    __tablename__ = "mentions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    brand_id: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    sentiment_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    magnitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    context_metadata: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    mentioned_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        Index("ix_mention_brand_mentioned", "brand_id", "mentioned_at"),
    )


class CitationRow(Base):
    """A scored source attached to a mention."""

    __tablename__ = "citations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    mention_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("mentions.id", ondelete="CASCADE"), nullable=False
    )
    source: Mapped[str] = mapped_column(Text, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    authority_score: Mapped[float] = mapped_column(Float, nullable=False)
    metadata_: Mapped[dict] = mapped_column("metadata", JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_citation_mention", "mention_id"),
        Index("ix_citation_authority", "authority_score"),
    )
