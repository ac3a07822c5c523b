"""Repository pattern for database access.

Wraps SQLAlchemy async sessions. Commands only read, apart from the
idempotent get-or-create upserts.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from tournamention.core.ids import generate_id
from tournamention.db.models import (
    ChallengeRow,
    ContestantRow,
    GuildSettingsRow,
    SubmissionRow,
    TournamentRow,
)


class Repository:
    """Async repository for all database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # --- Guild settings ---

    async def get_guild_settings(self, guild_id: str) -> GuildSettingsRow | None:
        stmt = select(GuildSettingsRow).where(GuildSettingsRow.guild_id == guild_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create_guild_settings(self, guild_id: str) -> GuildSettingsRow:
        """Find a guild's settings row, creating it on first use.

        Overlapping first-time calls for one guild resolve to the same row.
        """
        stmt = (
            sqlite_insert(GuildSettingsRow)
            .values(guild_id=guild_id)
            .on_conflict_do_nothing(index_elements=["guild_id"])
        )
        await self.session.execute(stmt)
        result = await self.session.execute(
            select(GuildSettingsRow).where(GuildSettingsRow.guild_id == guild_id)
        )
        return result.scalar_one()

    # --- Tournaments ---

    async def create_tournament(
        self,
        guild_id: str,
        name: str = "",
        active: bool = False,
        description: str = "",
        created_at: datetime | None = None,
    ) -> TournamentRow:
        """Create a tournament whose ID encodes *created_at* (default: now)."""
        moment = created_at or datetime.now(UTC)
        row = TournamentRow(
            id=generate_id(moment),
            guild_id=guild_id,
            name=name,
            active=active,
            description=description,
            created_at=moment,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_tournament(self, tournament_id: str) -> TournamentRow | None:
        return await self.session.get(TournamentRow, tournament_id)

    async def get_tournaments_for_guild(
        self,
        guild_id: str,
        active_only: bool = False,
    ) -> list[TournamentRow]:
        """Return a guild's tournaments in creation order (oldest first)."""
        stmt = select(TournamentRow).where(TournamentRow.guild_id == guild_id)
        if active_only:
            stmt = stmt.where(TournamentRow.active.is_(True))
        stmt = stmt.order_by(TournamentRow.created_at, TournamentRow.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_tournament_by_name(self, guild_id: str, name: str) -> TournamentRow | None:
        """Case-insensitive name lookup; the newest match wins."""
        stmt = (
            select(TournamentRow)
            .where(
                TournamentRow.guild_id == guild_id,
                func.lower(TournamentRow.name) == name.strip().lower(),
            )
            .order_by(TournamentRow.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_tournament_active(self, tournament_id: str, active: bool) -> None:
        row = await self.session.get(TournamentRow, tournament_id)
        if row is None:
            msg = f"Tournament {tournament_id} not found"
            raise ValueError(msg)
        row.active = active
        await self.session.flush()

    # --- Challenges ---

    async def create_challenge(self, tournament_id: str, name: str, points: int = 1) -> ChallengeRow:
        row = ChallengeRow(tournament_id=tournament_id, name=name, points=points)
        self.session.add(row)
        await self.session.flush()
        return row

    async def count_challenges(self, tournament_id: str) -> int:
        stmt = select(func.count(ChallengeRow.id)).where(
            ChallengeRow.tournament_id == tournament_id
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    # --- Contestants ---

    async def get_contestant(self, guild_id: str, user_id: str) -> ContestantRow | None:
        stmt = select(ContestantRow).where(
            ContestantRow.guild_id == guild_id,
            ContestantRow.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create_contestant(self, guild_id: str, user_id: str) -> ContestantRow:
        """Find a member's contestant record in a guild, creating it on first use."""
        stmt = (
            sqlite_insert(ContestantRow)
            .values(guild_id=guild_id, user_id=user_id)
            .on_conflict_do_nothing(index_elements=["guild_id", "user_id"])
        )
        await self.session.execute(stmt)
        result = await self.session.execute(
            select(ContestantRow).where(
                ContestantRow.guild_id == guild_id,
                ContestantRow.user_id == user_id,
            )
        )
        return result.scalar_one()

    # --- Submissions & points ---

    async def create_submission(
        self,
        challenge_id: str,
        contestant_id: str,
        proof: str = "",
        status: str = "pending",
    ) -> SubmissionRow:
        row = SubmissionRow(
            challenge_id=challenge_id,
            contestant_id=contestant_id,
            proof=proof,
            status=status,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def review_submission(self, submission_id: str, approved: bool) -> SubmissionRow:
        """Mark a pending submission approved or rejected."""
        row = await self.session.get(SubmissionRow, submission_id)
        if row is None:
            msg = f"Submission {submission_id} not found"
            raise ValueError(msg)
        row.status = "approved" if approved else "rejected"
        await self.session.flush()
        return row

    async def get_career_points(self, contestant_id: str) -> int:
        """Sum of challenge points over all approved submissions."""
        stmt = (
            select(func.coalesce(func.sum(ChallengeRow.points), 0))
            .join(SubmissionRow, SubmissionRow.challenge_id == ChallengeRow.id)
            .where(
                SubmissionRow.contestant_id == contestant_id,
                SubmissionRow.status == "approved",
            )
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def get_points_for_tournament(self, contestant_id: str, tournament_id: str) -> int:
        """Sum of challenge points over approved submissions in one tournament."""
        stmt = (
            select(func.coalesce(func.sum(ChallengeRow.points), 0))
            .join(SubmissionRow, SubmissionRow.challenge_id == ChallengeRow.id)
            .where(
                SubmissionRow.contestant_id == contestant_id,
                SubmissionRow.status == "approved",
                ChallengeRow.tournament_id == tournament_id,
            )
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
