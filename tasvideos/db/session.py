from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .base import Base
from .config import get_settings

logger = logging.getLogger(__name__)

_ENGINE: AsyncEngine | None = None
_SESSION_MAKER: async_sessionmaker[AsyncSession] | None = None


def _ensure_engine_initialized() -> None:
    """Create the process-wide engine and session factory on first use."""
    global _ENGINE, _SESSION_MAKER
    if _ENGINE is None:
        settings = get_settings()
        url = settings.async_database_url
        logger.info("Connecting to %s", make_url(url).render_as_string(hide_password=True))
        _ENGINE = create_async_engine(url, echo=settings.SQL_ECHO, pool_pre_ping=True)
    if _SESSION_MAKER is None:
        _SESSION_MAKER = async_sessionmaker(
            bind=_ENGINE, expire_on_commit=False, autoflush=False, autocommit=False
        )


# PUBLIC_INTERFACE
def get_engine() -> AsyncEngine:
    """Return the global AsyncEngine instance."""
    _ensure_engine_initialized()
    assert _ENGINE is not None
    return _ENGINE


# PUBLIC_INTERFACE
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield one AsyncSession per request (FastAPI dependency).

    Uncommitted work is rolled back if the request fails.
    """
    _ensure_engine_initialized()
    assert _SESSION_MAKER is not None
    async with _SESSION_MAKER() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# PUBLIC_INTERFACE
async def init_models(engine: AsyncEngine | None = None) -> None:
    """Create all tables known to the Base metadata that do not exist yet."""
    # Register mapped classes before touching the metadata.
    from . import models  # noqa: F401

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured (%d tables).", len(Base.metadata.tables))


# PUBLIC_INTERFACE
async def dispose_engine() -> None:
    """Dispose of the global engine, closing pooled connections."""
    global _ENGINE, _SESSION_MAKER
    if _ENGINE is not None:
        await _ENGINE.dispose()
    _ENGINE = None
    _SESSION_MAKER = None
