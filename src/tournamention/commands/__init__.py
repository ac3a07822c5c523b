"""Slash command definitions. Each module exposes one ``RendezvousCommand``."""

from __future__ import annotations

from tournamention.commands.profile import ProfileCommand
from tournamention.commands.tournament import TournamentCommand

__all__ = ["ProfileCommand", "TournamentCommand"]
