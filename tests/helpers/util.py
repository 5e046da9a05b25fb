from copy import deepcopy

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from tasvideos.db.models import (
    Flag,
    Game,
    GameSystem,
    Genre,
    Publication,
    PublicationClass,
    Role,
    RolePermission,
    User,
    UserRole,
    game_genres,
    publication_authors,
    publication_flags,
)

from tests.helpers.constants import (
    TEST_AUTHORS,
    TEST_CLASSES,
    TEST_FLAGS,
    TEST_GAMES,
    TEST_GENRES,
    TEST_SAVED_PUBLICATIONS,
    TEST_SYSTEMS,
)


async def add_publication_fixtures(session: AsyncSession) -> None:
    session.add_all(GameSystem(**s) for s in TEST_SYSTEMS)
    session.add_all(PublicationClass(**c) for c in TEST_CLASSES)
    session.add_all(Genre(**g) for g in TEST_GENRES)
    session.add_all(Flag(**f) for f in TEST_FLAGS)
    session.add_all(User(**a) for a in TEST_AUTHORS)
    await session.flush()

    for game in deepcopy(TEST_GAMES):
        genre_ids = game.pop("genre_ids")
        session.add(Game(**game))
        await session.flush()
        for genre_id in genre_ids:
            await session.execute(insert(game_genres).values(game_id=game["id"], genre_id=genre_id))

    for pub in deepcopy(TEST_SAVED_PUBLICATIONS):
        author_ids = pub.pop("author_ids")
        flag_ids = pub.pop("flag_ids")
        session.add(Publication(**pub))
        await session.flush()
        for user_id in author_ids:
            await session.execute(insert(publication_authors).values(publication_id=pub["id"], user_id=user_id))
        for flag_id in flag_ids:
            await session.execute(insert(publication_flags).values(publication_id=pub["id"], flag_id=flag_id))


async def add_role(session: AsyncSession, role_id: int, name: str, *permissions) -> Role:
    role = Role(id=role_id, name=name)
    session.add(role)
    await session.flush()
    for permission in permissions:
        session.add(RolePermission(role_id=role_id, permission_id=int(permission)))
    await session.flush()
    return role


async def assign_role(session: AsyncSession, user_id: int, role_id: int) -> None:
    session.add(UserRole(user_id=user_id, role_id=role_id))
    await session.flush()
