from __future__ import annotations

import logging
from typing import List, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession

from tasvideos.core.cache import CacheService, NoCacheService
from tasvideos.db.models.enums import PermissionTo
from tasvideos.repositories.security import SecurityRepository

logger = logging.getLogger(__name__)

PERMISSIONS_CACHE_KEY = "user_permissions:{user_id}"


class UserTasks:
    """
    User lookups consumed by authorization checks and display code.

    Permission sets are cached through the supplied CacheService; pass
    NoCacheService (the default) to always query the database.
    """

    def __init__(
        self,
        session: AsyncSession,
        cache: Optional[CacheService] = None,
        cache_ttl_seconds: Optional[float] = None,
    ) -> None:
        self.session = session
        self.repo = SecurityRepository(session)
        self.cache = cache if cache is not None else NoCacheService()
        self.cache_ttl_seconds = cache_ttl_seconds

    # PUBLIC_INTERFACE
    async def get_user_permissions_by_id(self, user_id: int) -> Set[PermissionTo]:
        """
        Return the distinct permissions granted to a user through all of their roles.

        Users that do not exist, have no roles, or whose roles grant nothing get an
        empty set.
        """
        key = PERMISSIONS_CACHE_KEY.format(user_id=user_id)
        cached = self.cache.get(key)
        if cached is not None:
            return set(cached)

        permissions: Set[PermissionTo] = set()
        for value in await self.repo.list_permission_ids_for_user(user_id):
            try:
                permissions.add(PermissionTo(value))
            except ValueError:
                logger.warning("Ignoring unknown permission id %s granted to user %s", value, user_id)

        self.cache.set(key, frozenset(permissions), self.cache_ttl_seconds)
        return permissions

    # PUBLIC_INTERFACE
    async def get_user_name_by_id(self, user_id: int) -> Optional[str]:
        """Return the user's name, or None when no such user exists."""
        return await self.repo.get_user_name_by_id(user_id)

    # PUBLIC_INTERFACE
    async def get_user_roles_by_id(self, user_id: int) -> List[str]:
        """Return the names of the roles assigned to a user, sorted by name."""
        return [role.name for role in await self.repo.list_roles_for_user(user_id)]

    # PUBLIC_INTERFACE
    def invalidate_user_permissions(self, user_id: int) -> None:
        """Drop any cached permission set for the user; call after role changes."""
        self.cache.remove(PERMISSIONS_CACHE_KEY.format(user_id=user_id))
