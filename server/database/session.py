"""
Connection lifecycle for the action-log store.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from server.database.models import Base
from server.settings import get_settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_sessions: async_sessionmaker[AsyncSession] | None = None


async def init_db(create_tables: bool = True) -> None:
    """Connect to the log store and, unless told otherwise, create the game and action tables."""
    global _engine, _sessions

    settings = get_settings()
    logger.info(f"Connecting to log store at {settings.database_url.split('@')[-1]}")

    _engine = create_async_engine(settings.database_url, **settings.get_engine_kwargs())
    _sessions = async_sessionmaker(bind=_engine, expire_on_commit=False)

    if create_tables:
        async with _engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"Log tables ready: {', '.join(sorted(Base.metadata.tables))}")


async def close_db() -> None:
    global _engine, _sessions

    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _sessions = None
    logger.info("Log store connection closed")


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """
    One unit of work against the log store, committed on success.

    Raises RuntimeError when init_db has not been called, which the game
    registry treats like any other storage failure.
    """
    if _sessions is None:
        raise RuntimeError("Log store is not connected")

    async with _sessions() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
