"""Pydantic data models: the shared business objects.

The scorers, the citation tracker, the brand-health aggregator and every
runner exchange these models. Persistence rows live in ``sqlmodels`` and are
converted at the store boundary.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


def new_id() -> str:
    return str(uuid.uuid4())


class AspectSentiment(BaseModel):
    """Sentiment for one named aspect (performance, quality, ...)."""

    topic: str
    score: float = Field(ge=-1.0, le=1.0)


class SentimentResult(BaseModel):
    """Polarity, magnitude and per-aspect breakdown for a block of text."""

    score: float = Field(0.0, ge=-1.0, le=1.0, description="-1 = negative, 1 = positive")
    magnitude: float = Field(0.0, ge=0.0, description="Density of sentiment words, unbounded")
    aspects: list[AspectSentiment] = Field(default_factory=list)

    @classmethod
    def neutral(cls) -> SentimentResult:
        return cls(score=0.0, magnitude=0.0, aspects=[])


class Citation(BaseModel):
    """A sourced reference attached to a mention."""

    id: str = Field(default_factory=new_id)
    mention_id: str = Field(description="Foreign key of the owning mention")
    source: str
    text: str
    authority_score: float = Field(ge=0.0, le=1.0)
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Mention(BaseModel):
    """A recorded instance of brand-relevant text analyzed by the pipeline."""

    id: str = Field(default_factory=new_id)
    brand_id: str
    content: str
    sentiment_score: float = Field(0.0, ge=-1.0, le=1.0)
    magnitude: float = Field(0.0, ge=0.0)
    context_metadata: dict[str, Any] = Field(default_factory=dict)
    mentioned_at: datetime = Field(default_factory=datetime.utcnow)
    deleted_at: Optional[datetime] = None
    citations: list[Citation] = Field(
        default_factory=list,
        description="Populated only when loaded with citations",
    )


class ProminenceResult(BaseModel):
    """How strongly and how early a brand name appears in a text."""

    brand: str
    mention_count: int = Field(ge=0)
    positions: list[int] = Field(default_factory=list, description="Token indices of each match")
    total_tokens: int = Field(ge=0)
    prominence_score: float = Field(ge=0.0, le=100.0)


class CompetitorMention(BaseModel):
    """One competitor appearance in an analyzed response."""

    name: str
    position: float = Field(ge=1.0, le=10.0, description="1 = most prominent")
    sentiment: float = Field(ge=-1.0, le=1.0)


class CompetitorStat(BaseModel):
    """Per-competitor aggregate for one analysis batch. Never persisted."""

    name: str
    mention_count: int
    average_position: float
    average_sentiment: float
    share_of_voice: float = Field(ge=0.0, le=100.0)


class RankedCompetitor(BaseModel):
    name: str
    score: float


class TrendPoint(BaseModel):
    """Average sentiment for one calendar day."""

    date: date
    average_sentiment: float


class TimeWindow(BaseModel):
    """Inclusive time range used by the brand-health rollup."""

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> TimeWindow:
        if self.start > self.end:
            raise ValueError("window start must not be after window end")
        return self

    @classmethod
    def trailing_days(cls, days: int, end: Optional[datetime] = None) -> TimeWindow:
        end = end or datetime.utcnow()
        return cls(start=end - timedelta(days=days), end=end)


class BrandHealth(BaseModel):
    """Aggregated sentiment, mention and citation summary for a brand."""

    brand_id: str
    overall_sentiment: float = 0.0
    trend: list[TrendPoint] = Field(default_factory=list)
    mention_count: int = 0
    top_citations: list[Citation] = Field(default_factory=list)
    window: Optional[TimeWindow] = None
    computed_at: datetime = Field(default_factory=datetime.utcnow)


class FeatureContext(BaseModel):
    """Request context shared by every runner in one dispatch."""

    brand_id: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class RunnerErrorInfo(BaseModel):
    message: str
    code: str
    details: dict[str, Any] = Field(default_factory=dict)


class RunnerResult(BaseModel):
    """Uniform envelope every runner returns."""

    success: bool
    data: Optional[dict[str, Any]] = None
    error: Optional[RunnerErrorInfo] = None

    @classmethod
    def ok(cls, data: Optional[dict[str, Any]] = None) -> RunnerResult:
        return cls(success=True, data=data or {})

    @classmethod
    def failure(
        cls,
        message: str,
        code: str,
        details: Optional[dict[str, Any]] = None,
    ) -> RunnerResult:
        return cls(
            success=False,
            error=RunnerErrorInfo(message=message, code=code, details=details or {}),
        )
