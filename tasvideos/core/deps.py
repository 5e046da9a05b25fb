from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tasvideos.core.cache import CacheService, MemoryCacheService, NoCacheService
from tasvideos.core.settings import get_app_settings
from tasvideos.db.session import get_async_session
from tasvideos.services.user_tasks import UserTasks

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_cache_service() -> CacheService:
    """
    Return the process-wide cache service.

    An in-memory cache is used when PERMISSION_CACHE_SECONDS is positive,
    otherwise caching is disabled.
    """
    settings = get_app_settings()
    if settings.PERMISSION_CACHE_SECONDS > 0:
        logger.info("Caching user permissions for %s seconds", settings.PERMISSION_CACHE_SECONDS)
        return MemoryCacheService(default_ttl_seconds=settings.PERMISSION_CACHE_SECONDS)
    return NoCacheService()


# PUBLIC_INTERFACE
async def get_user_tasks(
    session: AsyncSession = Depends(get_async_session),
    cache: CacheService = Depends(get_cache_service),
) -> UserTasks:
    """Provide a request-scoped UserTasks bound to the request's session."""
    return UserTasks(session, cache=cache)
