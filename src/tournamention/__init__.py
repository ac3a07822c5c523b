"""Tournamention: tournament bot commands for Discord guilds."""

__version__ = "0.1.0"
