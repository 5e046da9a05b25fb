from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import select

from tasvideos.db.models.enums import PermissionTo
from tasvideos.db.models.security import Role, RolePermission, User, UserRole
from .base import BaseRepository


class SecurityRepository(BaseRepository):
    """Repository for users, roles and role permission grants."""

    # Users
    async def get_user_name_by_id(self, user_id: int) -> Optional[str]:
        stmt = select(User.user_name).where(User.id == user_id)
        return await self.scalar_one_or_none(stmt)

    async def list_roles_for_user(self, user_id: int) -> List[Role]:
        stmt = (
            select(Role)
            .join(UserRole, Role.id == UserRole.role_id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.name)
        )
        return await self.scalar_list(stmt)

    async def list_permission_ids_for_user(self, user_id: int) -> List[int]:
        """Distinct permission ids granted through any of the user's roles."""
        stmt = (
            select(RolePermission.permission_id)
            .join(UserRole, UserRole.role_id == RolePermission.role_id)
            .where(UserRole.user_id == user_id)
            .distinct()
        )
        return await self.scalar_list(stmt)

    # Roles
    async def get_role_by_name(self, name: str) -> Optional[Role]:
        stmt = select(Role).where(Role.name == name)
        return await self.scalar_one_or_none(stmt)

    async def ensure_role(
        self,
        name: str,
        permissions: Iterable[PermissionTo] = (),
        description: Optional[str] = None,
    ) -> Role:
        """Return the named role, creating it and adding any missing permission grants."""
        role = await self.get_role_by_name(name)
        if role is None:
            role = Role(name=name, description=description)
            self.add(role)
            await self.flush()
        stmt = select(RolePermission.permission_id).where(RolePermission.role_id == role.id)
        granted = set(await self.scalar_list(stmt))
        for perm in permissions:
            if int(perm) not in granted:
                self.add(RolePermission(role_id=role.id, permission_id=int(perm)))
                granted.add(int(perm))
        await self.flush()
        return role

    # Associations
    async def assign_role_to_user(self, user_id: int, role_id: int) -> None:
        stmt = select(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        if await self.scalar_one_or_none(stmt) is None:
            self.add(UserRole(user_id=user_id, role_id=role_id))
            await self.flush()
