from __future__ import annotations

from typing import Optional

from sqlalchemy import Column, Float, ForeignKey, Integer, Table, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tasvideos.db.base import Base, IntPkMixin, TimestampMixin


game_genres = Table(
    "game_genres",
    Base.metadata,
    Column("game_id", ForeignKey("games.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True),
)

publication_authors = Table(
    "publication_authors",
    Base.metadata,
    Column("publication_id", ForeignKey("publications.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

publication_flags = Table(
    "publication_flags",
    Base.metadata,
    Column("publication_id", ForeignKey("publications.id", ondelete="CASCADE"), primary_key=True),
    Column("flag_id", ForeignKey("flags.id", ondelete="CASCADE"), primary_key=True),
)


class GameSystem(IntPkMixin, Base):
    """Console or platform a game runs on."""
    __tablename__ = "game_systems"
    __table_args__ = (UniqueConstraint("code", name="uq_game_systems_code"),)

    code: Mapped[str] = mapped_column(Text, nullable=False)
    display_name: Mapped[str] = mapped_column(Text, nullable=False)


class PublicationClass(IntPkMixin, Base):
    """Tier a publication is filed under (e.g. Moons, Stars)."""
    __tablename__ = "publication_classes"
    __table_args__ = (UniqueConstraint("name", name="uq_publication_classes_name"),)

    name: Mapped[str] = mapped_column(Text, nullable=False)


class Genre(IntPkMixin, Base):
    __tablename__ = "genres"
    __table_args__ = (UniqueConstraint("display_name", name="uq_genres_display_name"),)

    display_name: Mapped[str] = mapped_column(Text, nullable=False)


class Flag(IntPkMixin, Base):
    """Marker attached to publications (e.g. "Verified", "Commentary")."""
    __tablename__ = "flags"
    __table_args__ = (UniqueConstraint("token", name="uq_flags_token"),)

    name: Mapped[str] = mapped_column(Text, nullable=False)
    token: Mapped[str] = mapped_column(Text, nullable=False)


class Game(IntPkMixin, TimestampMixin, Base):
    __tablename__ = "games"

    system_id: Mapped[int] = mapped_column(ForeignKey("game_systems.id"), nullable=False, index=True)
    good_name: Mapped[str] = mapped_column(Text, nullable=False)

    system: Mapped["GameSystem"] = relationship("GameSystem", lazy="joined")
    genres: Mapped[list["Genre"]] = relationship("Genre", secondary=game_genres, lazy="selectin")


class Publication(IntPkMixin, TimestampMixin, Base):
    """Published, cataloged movie."""
    __tablename__ = "publications"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    branch: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    emulator_version: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    system_id: Mapped[int] = mapped_column(ForeignKey("game_systems.id"), nullable=False, index=True)
    publication_class_id: Mapped[int] = mapped_column(
        ForeignKey("publication_classes.id"), nullable=False, index=True
    )
    game_id: Mapped[int] = mapped_column(ForeignKey("games.id"), nullable=False, index=True)
    submission_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    obsoleted_by_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("publications.id", ondelete="SET NULL"), nullable=True, index=True
    )
    frames: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rerecords: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    system_frame_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    movie_file_name: Mapped[str] = mapped_column(Text, nullable=False)

    system: Mapped["GameSystem"] = relationship("GameSystem", lazy="joined")
    publication_class: Mapped["PublicationClass"] = relationship("PublicationClass", lazy="joined")
    game: Mapped["Game"] = relationship("Game", lazy="joined")
    authors: Mapped[list["User"]] = relationship(  # noqa: F821
        "User", secondary=publication_authors, lazy="selectin", order_by="User.user_name"
    )
    flags: Mapped[list["Flag"]] = relationship(
        "Flag", secondary=publication_flags, lazy="selectin", order_by="Flag.token"
    )
