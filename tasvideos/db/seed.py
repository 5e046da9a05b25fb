"""
Database seeding utilities for reference data.

Seeds:
- Game systems (NES, SNES, GB, GBA, N64, GEN)
- Publication classes (Standard, Moons, Stars)
- Publication flags and game genres
- Default roles and their permission grants

Every step is idempotent; existing rows are left untouched.

Usage:
  python -m tasvideos.db.seed
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tasvideos.db.models.enums import PermissionTo
from tasvideos.db.models.publications import Flag, GameSystem, Genre, PublicationClass
from tasvideos.db.session import get_async_session, init_models
from tasvideos.repositories.security import SecurityRepository

logger = logging.getLogger(__name__)

GAME_SYSTEMS: List[Tuple[str, str]] = [
    ("NES", "Nintendo Entertainment System"),
    ("SNES", "Super Nintendo Entertainment System"),
    ("GB", "Game Boy"),
    ("GBA", "Game Boy Advance"),
    ("N64", "Nintendo 64"),
    ("GEN", "Sega Genesis"),
]

PUBLICATION_CLASSES: List[str] = ["Standard", "Moons", "Stars"]

FLAGS: List[Tuple[str, str]] = [
    ("Verified", "verified"),
    ("Commentary", "commentary"),
    ("Recommended", "recommended"),
]

GENRES: List[str] = ["Action", "Platformer", "Puzzle", "RPG", "Racing"]

DEFAULT_ROLES: Dict[str, Iterable[PermissionTo]] = {
    "Default User": [
        PermissionTo.create_forum_posts,
        PermissionTo.submit_movies,
    ],
    "Editor": [
        PermissionTo.edit_wiki_pages,
        PermissionTo.edit_game_resources,
        PermissionTo.edit_system_pages,
    ],
    "Judge": [
        PermissionTo.edit_submissions,
        PermissionTo.judge_submissions,
    ],
    "Publisher": [
        PermissionTo.publish_movies,
        PermissionTo.edit_publication_metadata,
        PermissionTo.edit_publication_files,
    ],
    "Admin": list(PermissionTo),
}


# PUBLIC_INTERFACE
async def seed_all() -> None:
    """
    Seed the database with reference data and the default roles.
    """
    async for session in get_async_session():
        await seed_session(session)
        await session.commit()


# PUBLIC_INTERFACE
async def seed_session(session: AsyncSession) -> None:
    """Run every seeding step on an existing session without committing."""
    await _seed_systems(session)
    await _seed_classes(session)
    await _seed_flags(session)
    await _seed_genres(session)
    await _seed_roles(session)
    await session.flush()


async def _seed_systems(session: AsyncSession) -> None:
    existing = set((await session.execute(select(GameSystem.code))).scalars())
    for code, display_name in GAME_SYSTEMS:
        if code not in existing:
            session.add(GameSystem(code=code, display_name=display_name))


async def _seed_classes(session: AsyncSession) -> None:
    existing = set((await session.execute(select(PublicationClass.name))).scalars())
    for name in PUBLICATION_CLASSES:
        if name not in existing:
            session.add(PublicationClass(name=name))


async def _seed_flags(session: AsyncSession) -> None:
    existing = set((await session.execute(select(Flag.token))).scalars())
    for name, token in FLAGS:
        if token not in existing:
            session.add(Flag(name=name, token=token))


async def _seed_genres(session: AsyncSession) -> None:
    existing = set((await session.execute(select(Genre.display_name))).scalars())
    for name in GENRES:
        if name not in existing:
            session.add(Genre(display_name=name))


async def _seed_roles(session: AsyncSession) -> None:
    repo = SecurityRepository(session)
    for name, permissions in DEFAULT_ROLES.items():
        await repo.ensure_role(name, permissions)
        logger.info("Ensured role %s", name)


async def _main() -> None:
    await init_models()
    await seed_all()


if __name__ == "__main__":
    from tasvideos.core.logging import configure_logging

    configure_logging()
    asyncio.run(_main())
