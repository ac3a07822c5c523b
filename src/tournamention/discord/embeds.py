"""Discord embed builders for Tournamention.

Each builder takes plain domain values and returns a styled embed. Builders
are pure: no I/O, no failure paths.
"""

from __future__ import annotations

from datetime import datetime

import discord

COLOR_PROFILE = 0x3498DB  # Blue: contestant profiles
COLOR_TOURNAMENT = 0xF39C12  # Gold: tournaments
COLOR_INACTIVE = 0x95A5A6  # Grey: closed tournaments

FOOTER_TEXT = "Tournamention"


def format_points(points: int) -> str:
    """Render a points total; negative means "no current tournament"."""
    return "N/A" if points < 0 else str(points)


def build_profile_embed(
    name: str,
    icon: str,
    current_points: int,
    career_points: int,
) -> discord.Embed:
    """Build an embed showing a contestant's points."""
    embed = discord.Embed(
        title=f"{name}'s Profile",
        description=(
            f"**Current Points:** {format_points(current_points)}\n"
            f"**Career Points:** {career_points}"
        ),
        color=COLOR_PROFILE,
    )
    embed.set_thumbnail(url=icon)
    embed.set_footer(text=FOOTER_TEXT)
    return embed


def build_tournament_embed(
    name: str,
    active: bool,
    created_at: datetime,
    challenge_count: int,
    is_current: bool = False,
) -> discord.Embed:
    """Build an embed summarizing one tournament."""
    title = name or "Untitled Tournament"
    if is_current:
        title = f"Current Tournament: {title}"
    embed = discord.Embed(
        title=title,
        color=COLOR_TOURNAMENT if active else COLOR_INACTIVE,
    )
    embed.add_field(name="Status", value="Active" if active else "Closed", inline=True)
    embed.add_field(name="Challenges", value=str(challenge_count), inline=True)
    embed.add_field(name="Created", value=discord.utils.format_dt(created_at, "D"), inline=True)
    embed.set_footer(text=FOOTER_TEXT)
    return embed
