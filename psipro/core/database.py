"""Database engine and async session factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from psipro.config import get_settings
from psipro.core.models import Base

logger = logging.getLogger(__name__)


def get_database_url() -> str:
    return get_settings().database_url


@lru_cache
def _get_engine():
    url = get_database_url()
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=False)
    return create_async_engine(
        url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        echo=False,
    )


@lru_cache
def get_session_factory():
    return async_sessionmaker(_get_engine(), class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async session."""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables (dev only; production manages the schema itself)."""
    engine = _get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Record store schema ready at %s", engine.url.render_as_string(hide_password=True))


async def close_db() -> None:
    """Dispose the cached engine; the next call builds a fresh one."""
    if _get_engine.cache_info().currsize:
        await _get_engine().dispose()
    get_session_factory.cache_clear()
    _get_engine.cache_clear()
