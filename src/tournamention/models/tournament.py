"""Tournament domain models: tournaments, contestants, guild settings.

Read-side shapes for rows owned by the persistence layer.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from tournamention.core.ids import timestamp_of


class Tournament(BaseModel):
    """A guild tournament. Creation time is derived from the ID."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    guild_id: str
    name: str = ""
    active: bool = False

    @property
    def created_at(self) -> datetime:
        return timestamp_of(self.id)


class Contestant(BaseModel):
    """A guild member's tournament identity. One per (guild, user)."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    guild_id: str
    user_id: str


class GuildSettings(BaseModel):
    """Per-guild settings. Owns no tournament state of its own."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    guild_id: str

    def current_tournament(self, tournaments: Iterable[Tournament]) -> Tournament | None:
        """Resolve this guild's current tournament from its tournament records.

        Records belonging to other guilds are ignored.
        """
        from tournamention.core.tournaments import select_current_tournament

        return select_current_tournament(t for t in tournaments if t.guild_id == self.guild_id)
