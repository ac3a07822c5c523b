"""Discord bot helpers: DB session context and per-lookup query coroutines.

Each query helper opens its own session, so a solver can run independent
lookups concurrently without sharing an ``AsyncSession`` between tasks.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine

from tournamention.core.tournaments import get_current_tournament
from tournamention.db.engine import get_session
from tournamention.db.repository import Repository
from tournamention.models.tournament import Contestant, Tournament


@asynccontextmanager
async def db_session(
    engine: AsyncEngine,
) -> AsyncGenerator[Repository, None]:
    """Yield a Repository bound to a fresh async session."""
    async with get_session(engine) as session:
        yield Repository(session)


async def fetch_current_tournament(engine: AsyncEngine, guild_id: str) -> Tournament | None:
    """Return the guild's current tournament, or None."""
    async with db_session(engine) as repo:
        return await get_current_tournament(repo, guild_id)


async def get_or_create_contestant(engine: AsyncEngine, guild_id: str, user_id: str) -> Contestant:
    async with db_session(engine) as repo:
        row = await repo.get_or_create_contestant(guild_id, user_id)
        return Contestant.model_validate(row)


async def get_career_points(engine: AsyncEngine, contestant: Contestant) -> int:
    async with db_session(engine) as repo:
        return await repo.get_career_points(contestant.id)


async def get_points_for_tournament(
    engine: AsyncEngine,
    contestant: Contestant,
    tournament: Tournament,
) -> int:
    async with db_session(engine) as repo:
        return await repo.get_points_for_tournament(contestant.id, tournament.id)


async def get_current_points(engine: AsyncEngine, guild_id: str, contestant: Contestant) -> int:
    """Points in the guild's current tournament, or -1 when there is none."""
    tournament = await fetch_current_tournament(engine, guild_id)
    if tournament is None:
        return -1
    return await get_points_for_tournament(engine, contestant, tournament)
