"""Brand Intelligence MCP Server.

FastMCP server exposing brand mention analysis, brand health, competitive
position and authority scoring as tools.
Run: brand-intelligence-mcp
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from mcp.server.fastmcp import Context, FastMCP
from mcp.types import ToolAnnotations

from .bootstrap import Services, build_services
from .config import EnvConfig
from .core.errors import BrandIntelligenceError
from .core.models import FeatureContext, TimeWindow
from .db import create_engine, init_db, session_factory
from .runners.competitive_position import CompetitivePositionRunner
from .runners.mention_analysis import MentionAnalysisRunner
from .scheduler import BrandHealthScheduler

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)
WRITES = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=False, openWorldHint=False)


@dataclass
class AppState:
    services: Services
    scheduler: BrandHealthScheduler


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[AppState]:
    """Initialize database, wire services and runners, start the refresh scheduler."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    engine = create_engine()
    await init_db(engine)
    services = build_services(session_factory=session_factory(engine), config=EnvConfig())
    scheduler = BrandHealthScheduler(services.orchestrator)
    await scheduler.start()
    try:
        yield AppState(services=services, scheduler=scheduler)
    finally:
        await scheduler.stop()
        await engine.dispose()


mcp = FastMCP(
    "Brand Intelligence",
    instructions="Score language-model answers for brand presence, sentiment, competitive standing and citation authority, and roll them up into brand health.",
    lifespan=lifespan,
)


def _services(ctx: Context) -> Services:
    return ctx.request_context.lifespan_context.services


# ─── Tool 1: Analyze Mention ────────────────────────────────────────────────


@mcp.tool(annotations=WRITES)
async def analyze_mention(
    brand_id: str,
    content: str,
    ctx: Context,
    brand_name: str = "",
    citations: Optional[list[str]] = None,
) -> dict:
    """Analyze a model answer for a brand and store it as a mention.

    Args:
        brand_id: Identifier of the tracked brand.
        content: The answer text to analyze.
        brand_name: Brand name to score prominence for. Optional.
        citations: Source URLs or domains cited by the answer.
    """
    metadata = {
        "content": content,
        "brand_name": brand_name or None,
        "citations": [{"source": s} for s in citations or []],
    }
    result = await _services(ctx).orchestrator.run_one(
        MentionAnalysisRunner.name, FeatureContext(brand_id=brand_id, metadata=metadata)
    )
    return result.model_dump(mode="json")


# ─── Tool 2: Brand Health ───────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def brand_health(brand_id: str, ctx: Context, days: int = 30) -> dict:
    """Overall sentiment, daily sentiment trend and top citations for a brand.

    Args:
        brand_id: Identifier of the tracked brand.
        days: Trailing window length in days. Default 30.
    """
    try:
        health = await _services(ctx).brand_health.get(brand_id, TimeWindow.trailing_days(days))
    except BrandIntelligenceError as exc:
        logger.error("brand_health failed for %s: %s", brand_id, exc)
        return {"error": exc.to_dict()}
    return health.model_dump(mode="json")


# ─── Tool 3: Competitive Position ───────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def competitive_position(
    brand_name: str,
    ctx: Context,
    competitor_mentions: Optional[list[dict]] = None,
    total_responses: int = 1,
    content: str = "",
    competitors: Optional[list[str]] = None,
) -> dict:
    """Share of voice, composite ranking and market position among competitors.

    Args:
        brand_name: The brand whose market position is reported.
        competitor_mentions: Records of {name, position (1-10), sentiment (-1..1)}.
        total_responses: Number of analyzed responses the records came from.
        content: Answer text to extract mentions from when no records are given.
        competitors: Competitor names to look for in ``content``.
    """
    metadata = {
        "brand_name": brand_name,
        "total_responses": total_responses,
        "content": content,
        "competitors": competitors or [],
    }
    if competitor_mentions is not None:
        metadata["competitor_mentions"] = competitor_mentions
    result = await _services(ctx).orchestrator.run_one(
        CompetitivePositionRunner.name, FeatureContext(brand_id=brand_name, metadata=metadata)
    )
    return result.model_dump(mode="json")


# ─── Tool 4: Authority Score ────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def score_authority(source: str, ctx: Context) -> dict:
    """Authority score (0-1) for a citation source URL or domain.

    Args:
        source: URL or bare domain, e.g. 'https://arxiv.org/abs/1234'.
    """
    try:
        score = await _services(ctx).authority.score(source)
    except BrandIntelligenceError as exc:
        return {"source": source, "error": exc.to_dict()}
    return {"source": source, "authority_score": score}


# ─── Tool 5: Run Feature ────────────────────────────────────────────────────


@mcp.tool(annotations=WRITES)
async def run_feature(name: str, brand_id: str, ctx: Context, metadata: Optional[dict] = None) -> dict:
    """Run a single feature runner by name.

    Args:
        name: Runner name, e.g. 'mention-analysis', 'competitive-position', 'brand-health'.
        brand_id: Identifier of the tracked brand.
        metadata: Runner-specific input.
    """
    result = await _services(ctx).orchestrator.run_one(
        name, FeatureContext(brand_id=brand_id, metadata=metadata or {})
    )
    return result.model_dump(mode="json")


# ─── Tool 6: Run All Features ───────────────────────────────────────────────


@mcp.tool(annotations=WRITES)
async def run_all_features(brand_id: str, ctx: Context, metadata: Optional[dict] = None) -> dict:
    """Run every enabled feature runner concurrently against one context.

    Args:
        brand_id: Identifier of the tracked brand.
        metadata: Input shared by all runners.
    """
    results = await _services(ctx).orchestrator.run_all(
        FeatureContext(brand_id=brand_id, metadata=metadata or {})
    )
    return {
        "results": {name: r.model_dump(mode="json") for name, r in results.items()},
        "succeeded": sorted(name for name, r in results.items() if r.success),
        "failed": sorted(name for name, r in results.items() if not r.success),
    }


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
