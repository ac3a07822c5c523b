"""Current-tournament resolution for a guild.

Nothing stops a guild from having several tournaments flagged active at once,
so "the current tournament" is resolved here rather than stored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import reduce
from typing import TYPE_CHECKING

from tournamention.models.tournament import Tournament

if TYPE_CHECKING:
    from tournamention.db.repository import Repository

logger = logging.getLogger(__name__)


def _prefer(prev: Tournament, curr: Tournament) -> Tournament:
    # One-sided: only an unnamed *prev* that is strictly newer survives.
    # A named prev always yields to curr.
    if not prev.name and prev.created_at > curr.created_at:
        return prev
    return curr


def select_current_tournament(tournaments: Iterable[Tournament]) -> Tournament | None:
    """Select the current tournament out of a guild's tournament records.

    Filters to active records, then reduces them pairwise in the order given
    (callers pass creation order). Returns None when no record is active;
    that is a normal state, not an error.
    """
    active = [t for t in tournaments if t.active]
    if not active:
        return None
    if len(active) > 1:
        logger.warning(
            "multiple_active_tournaments guild=%s count=%d",
            active[0].guild_id,
            len(active),
        )
    return reduce(_prefer, active)


async def get_current_tournament(repo: Repository, guild_id: str) -> Tournament | None:
    """Load a guild's active tournaments and resolve the current one."""
    rows = await repo.get_tournaments_for_guild(guild_id, active_only=True)
    return select_current_tournament(Tournament.model_validate(row) for row in rows)
