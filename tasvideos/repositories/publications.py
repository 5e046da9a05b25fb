from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from sqlalchemy import Select, extract, func, select

from tasvideos.db.models.publications import (
    Flag,
    GameSystem,
    Genre,
    Publication,
    PublicationClass,
    game_genres,
    publication_authors,
    publication_flags,
)
from tasvideos.schemas.publications import PublicationsRequest
from .base import BaseRepository
from .querying import SortField, apply_sort, paginate

logger = logging.getLogger(__name__)


# Response field name -> SQL expression. Keys must match the scalar fields of
# tasvideos.schemas.publications.PublicationRead.
SORT_COLUMNS = {
    "id": Publication.id,
    "title": Publication.title,
    "branch": Publication.branch,
    "emulator_version": Publication.emulator_version,
    "publication_class": PublicationClass.name,
    "system_code": GameSystem.code,
    "submission_id": Publication.submission_id,
    "game_id": Publication.game_id,
    "obsoleted_by_id": Publication.obsoleted_by_id,
    "frames": Publication.frames,
    "rerecords": Publication.rerecords,
    "system_frame_rate": Publication.system_frame_rate,
    "movie_file_name": Publication.movie_file_name,
    "create_timestamp": Publication.created_at,
}


def _lowered(values: Sequence[str]) -> List[str]:
    return [v.lower() for v in values]


# PUBLIC_INTERFACE
def filter_by_tokens(stmt: Select, request: PublicationsRequest) -> Select:
    """
    Restrict a publication query by the token criteria of ``request``.

    The statement must already join GameSystem and PublicationClass. Multi-valued
    criteria match any of the given values; different criteria are combined with AND.
    """
    if request.systems:
        stmt = stmt.where(func.lower(GameSystem.code).in_(_lowered(request.systems)))
    if request.class_names:
        stmt = stmt.where(func.lower(PublicationClass.name).in_(_lowered(request.class_names)))
    if request.start_year is not None:
        stmt = stmt.where(extract("year", Publication.created_at) >= request.start_year)
    if request.end_year is not None:
        stmt = stmt.where(extract("year", Publication.created_at) <= request.end_year)
    if request.genre_names:
        genre_games = (
            select(game_genres.c.game_id)
            .join(Genre, Genre.id == game_genres.c.genre_id)
            .where(func.lower(Genre.display_name).in_(_lowered(request.genre_names)))
        )
        stmt = stmt.where(Publication.game_id.in_(genre_games))
    if request.flag_names:
        flagged = (
            select(publication_flags.c.publication_id)
            .join(Flag, Flag.id == publication_flags.c.flag_id)
            .where(func.lower(Flag.token).in_(_lowered(request.flag_names)))
        )
        stmt = stmt.where(Publication.id.in_(flagged))
    if request.author_ids:
        authored = select(publication_authors.c.publication_id).where(
            publication_authors.c.user_id.in_(request.author_ids)
        )
        stmt = stmt.where(Publication.id.in_(authored))
    if request.game_ids:
        stmt = stmt.where(Publication.game_id.in_(request.game_ids))

    if request.only_obsoleted:
        stmt = stmt.where(Publication.obsoleted_by_id.is_not(None))
    elif not request.show_obsoleted:
        stmt = stmt.where(Publication.obsoleted_by_id.is_(None))
    return stmt


class PublicationRepository(BaseRepository):
    """Read-only queries over published movies."""

    @staticmethod
    def _base_query() -> Select:
        return (
            select(Publication)
            .join(GameSystem, GameSystem.id == Publication.system_id)
            .join(PublicationClass, PublicationClass.id == Publication.publication_class_id)
        )

    async def get_publication(self, publication_id: int) -> Optional[Publication]:
        stmt = select(Publication).where(Publication.id == publication_id)
        return await self.scalar_one_or_none(stmt)

    async def list_publications(
        self, request: PublicationsRequest, sort: Sequence[SortField]
    ) -> List[Publication]:
        """Filter, sort and page publications. ``sort`` must hold canonical response field names."""
        stmt = filter_by_tokens(self._base_query(), request)
        stmt = apply_sort(stmt, sort, SORT_COLUMNS)
        stmt = paginate(stmt, limit=request.limit, offset=request.offset)
        logger.debug("Listing publications: %s", request.model_dump(exclude_defaults=True))
        result = await self.scalars(stmt)
        return list(result.unique())
