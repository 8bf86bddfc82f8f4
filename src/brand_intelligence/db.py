"""Mention store database setup.

The SQLite file lives at ``$DATA_DIR/mentions.db`` (``~/.brand-intelligence``
when unset). Every connection runs in WAL mode with foreign keys enforced, so
deleting a mention row takes its citations with it.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .sqlmodels import Base

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "~/.brand-intelligence"
DB_FILENAME = "mentions.db"

SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA busy_timeout=5000",
    "PRAGMA foreign_keys=ON",
)


def default_db_url() -> str:
    data_dir = Path(os.path.expanduser(os.environ.get("DATA_DIR", DEFAULT_DATA_DIR)))
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{data_dir / DB_FILENAME}"


def _apply_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    for pragma in SQLITE_PRAGMAS:
        cursor.execute(pragma)
    cursor.close()


def create_engine(db_url: Optional[str] = None) -> AsyncEngine:
    """Async engine for ``db_url``, or the file under ``DATA_DIR``."""
    engine = create_async_engine(db_url or default_db_url(), echo=False)
    event.listen(engine.sync_engine, "connect", _apply_pragmas)
    return engine


def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create the mention and citation tables if missing."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Mention store ready at %s", engine.url)
