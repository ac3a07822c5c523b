"""SQLAlchemy ORM models for the Tournamention database.

Tables: guild_settings, tournaments, challenges, contestants, submissions.
Tournament IDs carry their creation second (see ``core.ids``).
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from tournamention.core.ids import generate_id


def _now() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class GuildSettingsRow(Base):
    __tablename__ = "guild_settings"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=generate_id)
    guild_id: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)


class TournamentRow(Base):
    __tablename__ = "tournaments"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=generate_id)
    guild_id: Mapped[str] = mapped_column(String(30), nullable=False)
    name: Mapped[str] = mapped_column(String(100), default="")
    description: Mapped[str] = mapped_column(Text, default="")
    active: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    challenges: Mapped[list[ChallengeRow]] = relationship(back_populates="tournament")

    __table_args__ = (Index("ix_tournaments_guild_active", "guild_id", "active"),)


class ChallengeRow(Base):
    __tablename__ = "challenges"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=generate_id)
    tournament_id: Mapped[str] = mapped_column(ForeignKey("tournaments.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    points: Mapped[int] = mapped_column(Integer, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    tournament: Mapped[TournamentRow] = relationship(back_populates="challenges")

    __table_args__ = (Index("ix_challenges_tournament_id", "tournament_id"),)


class ContestantRow(Base):
    """A guild member's tournament identity."""

    __tablename__ = "contestants"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=generate_id)
    guild_id: Mapped[str] = mapped_column(String(30), nullable=False)
    user_id: Mapped[str] = mapped_column(String(30), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (UniqueConstraint("guild_id", "user_id", name="uq_contestant_guild_user"),)


class SubmissionRow(Base):
    __tablename__ = "submissions"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=generate_id)
    challenge_id: Mapped[str] = mapped_column(ForeignKey("challenges.id"), nullable=False)
    contestant_id: Mapped[str] = mapped_column(ForeignKey("contestants.id"), nullable=False)
    proof: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str] = mapped_column(String(20), default="pending")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (
        Index("ix_submissions_contestant_status", "contestant_id", "status"),
    )
