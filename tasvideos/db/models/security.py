from __future__ import annotations

from typing import Optional

from sqlalchemy import ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tasvideos.db.base import Base, IntPkMixin, TimestampMixin


class User(IntPkMixin, TimestampMixin, Base):
    """Registered site user."""
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("user_name", name="uq_users_user_name"),
    )

    user_name: Mapped[str] = mapped_column(Text, nullable=False)

    roles: Mapped[list["Role"]] = relationship(
        "Role",
        secondary="user_roles",
        back_populates="users",
        lazy="selectin",
    )


class Role(IntPkMixin, TimestampMixin, Base):
    """Named bundle of permissions assignable to users."""
    __tablename__ = "roles"
    __table_args__ = (
        UniqueConstraint("name", name="uq_roles_name"),
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    users: Mapped[list["User"]] = relationship(
        "User",
        secondary="user_roles",
        back_populates="roles",
        lazy="selectin",
    )
    role_permissions: Mapped[list["RolePermission"]] = relationship(
        "RolePermission",
        back_populates="role",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class UserRole(Base):
    """Association of users to roles."""
    __tablename__ = "user_roles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    role_id: Mapped[int] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True
    )


class RolePermission(Base):
    """Grant of a single PermissionTo value to a role."""
    __tablename__ = "role_permissions"

    role_id: Mapped[int] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True
    )
    # Stores a tasvideos.db.models.enums.PermissionTo value.
    permission_id: Mapped[int] = mapped_column(Integer, primary_key=True)

    role: Mapped["Role"] = relationship("Role", back_populates="role_permissions")
