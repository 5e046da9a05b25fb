from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from tasvideos.db.models.publications import Publication
from tasvideos.schemas.common import CamelModel, Pagination


class PublicationRead(CamelModel):
    """Public representation of a publication."""
    id: int = Field(..., description="Publication ID")
    title: str = Field(..., description="Display title")
    branch: Optional[str] = Field(None, description="Game branch/category, e.g. '100%'")
    emulator_version: Optional[str] = Field(None, description="Emulator used to produce the movie")
    publication_class: str = Field(..., alias="class", description="Publication class (tier) name")
    system_code: str = Field(..., description="Game system code, e.g. 'NES'")
    submission_id: Optional[int] = Field(None, description="Originating submission ID")
    game_id: int = Field(..., description="Game ID")
    obsoleted_by_id: Optional[int] = Field(None, description="ID of the publication that obsoletes this one")
    frames: int = Field(..., description="Movie length in frames")
    rerecords: int = Field(..., description="Rerecord count")
    system_frame_rate: Optional[float] = Field(None, description="Frame rate of the system region")
    movie_file_name: str = Field(..., description="Movie file name")
    create_timestamp: datetime = Field(..., description="Publication timestamp")
    authors: List[str] = Field(default_factory=list, description="Author user names")
    flags: List[str] = Field(default_factory=list, description="Flag tokens")

    @classmethod
    def from_publication(cls, pub: Publication) -> "PublicationRead":
        return cls(
            id=pub.id,
            title=pub.title,
            branch=pub.branch,
            emulator_version=pub.emulator_version,
            publication_class=pub.publication_class.name,
            system_code=pub.system.code,
            submission_id=pub.submission_id,
            game_id=pub.game_id,
            obsoleted_by_id=pub.obsoleted_by_id,
            frames=pub.frames,
            rerecords=pub.rerecords,
            system_frame_rate=pub.system_frame_rate,
            movie_file_name=pub.movie_file_name,
            create_timestamp=pub.created_at,
            authors=[a.user_name for a in pub.authors],
            flags=[f.token for f in pub.flags],
        )


class PublicationsRequest(Pagination):
    """Parsed filter, sort, paging and field-selection parameters for listing publications."""
    sort: Optional[str] = Field(None, description="Comma-separated sort fields, '-' prefix for descending")
    fields: Optional[str] = Field(None, description="Comma-separated response fields to return")
    systems: List[str] = Field(default_factory=list)
    class_names: List[str] = Field(default_factory=list)
    start_year: Optional[int] = Field(None)
    end_year: Optional[int] = Field(None)
    genre_names: List[str] = Field(default_factory=list)
    flag_names: List[str] = Field(default_factory=list)
    author_ids: List[int] = Field(default_factory=list)
    game_ids: List[int] = Field(default_factory=list)
    show_obsoleted: bool = Field(False)
    only_obsoleted: bool = Field(False)
