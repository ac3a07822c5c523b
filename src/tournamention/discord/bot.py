"""Discord bot for Tournamention.

Registers the slash commands, turns each interaction into a
``CommandRequest``, runs it through the command's rendezvous pipeline and
sends back the described outcome.

The bot is optional: if DISCORD_BOT_TOKEN is not set, nothing starts.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import discord
from discord import Intents, app_commands
from discord.ext import commands

from tournamention.commands import ProfileCommand, TournamentCommand
from tournamention.core.rendezvous import (
    UNKNOWN_FAILURE_TEXT,
    CommandContext,
    RendezvousCommand,
)
from tournamention.models.outcome import (
    DescribedOutcome,
    EmbedDescribedOutcome,
    TextDescribedOutcome,
)
from tournamention.models.request import CommandOption, CommandRequest, OptionType

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from tournamention.config import Settings

logger = logging.getLogger(__name__)

# discord.AppCommandOptionType values → request option types
_OPTION_TYPES: dict[int, OptionType] = {
    3: "string",
    4: "integer",
    5: "boolean",
    6: "user",
    7: "channel",
    8: "role",
    10: "number",
}

DATABASE_UNAVAILABLE_TEXT = (
    "The tournament database is temporarily unavailable. "
    "Try again in a moment -- if this persists, let an admin know."
)


def request_from_interaction(interaction: discord.Interaction) -> CommandRequest:
    """Build a platform-neutral request from a slash command interaction.

    Snowflakes become strings. Subcommand groups are not used by this bot,
    so only top-level options are read.
    """
    data: dict[str, Any] = dict(interaction.data or {})
    options = tuple(
        CommandOption(
            name=str(raw["name"]),
            type=_OPTION_TYPES.get(int(raw.get("type", 3)), "string"),
            value=raw.get("value"),
        )
        for raw in data.get("options", [])
    )
    return CommandRequest(
        command_name=str(data.get("name", "")),
        guild_id=str(interaction.guild_id) if interaction.guild_id is not None else None,
        channel_id=str(interaction.channel_id) if interaction.channel_id is not None else None,
        member_id=str(interaction.user.id),
        options=options,
    )


async def send_described_outcome(
    interaction: discord.Interaction,
    described: DescribedOutcome,
) -> None:
    """Send a described outcome as the interaction's reply (or a followup)."""
    kwargs: dict[str, Any]
    if isinstance(described, EmbedDescribedOutcome):
        kwargs = {"embeds": described.embeds, "ephemeral": described.ephemeral}
    else:
        kwargs = {"content": described.text, "ephemeral": described.ephemeral}

    if interaction.response.is_done():
        await interaction.followup.send(**kwargs)
    else:
        await interaction.response.send_message(**kwargs)


class TournamentionBot(commands.Bot):
    """The Tournamention Discord bot.

    Every slash command is a ``RendezvousCommand``; the callbacks here only
    declare the options Discord should show and hand off to ``run_command``.
    """

    def __init__(
        self,
        settings: Settings,
        engine: AsyncEngine | None = None,
    ) -> None:
        intents = Intents.default()
        intents.members = True  # Member fetch for /profile

        super().__init__(
            command_prefix="!",
            intents=intents,
            description="Tournamention -- challenges, submissions, and points for your server.",
        )
        self.settings = settings
        self.engine = engine
        self.runner_task: asyncio.Task[None] | None = None
        self._setup_commands()

    def _setup_commands(self) -> None:
        """Register slash commands on the bot's command tree."""

        @self.tree.command(name=ProfileCommand.name, description=ProfileCommand.description)
        @app_commands.guild_only()
        @app_commands.describe(user="The member whose profile to view. Defaults to you.")
        async def profile_command(
            interaction: discord.Interaction,
            user: discord.Member | None = None,
        ) -> None:
            await self.run_command(ProfileCommand, interaction)

        @self.tree.command(name=TournamentCommand.name, description=TournamentCommand.description)
        @app_commands.guild_only()
        @app_commands.describe(name="The tournament to view. Defaults to the current tournament.")
        async def tournament_command(
            interaction: discord.Interaction,
            name: str | None = None,
        ) -> None:
            await self.run_command(TournamentCommand, interaction)

    async def setup_hook(self) -> None:
        """Called when the bot is ready to start. Syncs slash commands."""
        if self.settings.discord_guild_id:
            guild = discord.Object(id=int(self.settings.discord_guild_id))
            self.tree.copy_global_to(guild=guild)
            await self.tree.sync(guild=guild)
            logger.info("discord_commands_synced guild_id=%s", self.settings.discord_guild_id)
        else:
            await self.tree.sync()
            logger.info("discord_commands_synced globally")

    async def on_ready(self) -> None:
        user = self.user
        logger.info("discord_bot_ready user=%s", user.name if user else "unknown")

    async def run_command(
        self,
        command: RendezvousCommand[Any],
        interaction: discord.Interaction,
    ) -> None:
        """Run *command* for *interaction* and reply with its described outcome.

        Errors outside the outcome taxonomy (a broken validator, a solver
        returning an undeclared outcome) still get a generic reply, then
        re-raise so the command tree's error handler logs them.
        """
        if self.engine is None:
            await interaction.response.send_message(DATABASE_UNAVAILABLE_TEXT, ephemeral=True)
            return

        if command.defer_ephemeral is not None:
            await interaction.response.defer(ephemeral=command.defer_ephemeral)

        request = request_from_interaction(interaction)
        context = CommandContext(client=self, engine=self.engine, settings=self.settings)
        try:
            described = await command.run(request, context)
        except Exception:
            logger.exception(
                "discord_command_failed command=%s user=%s",
                command.name,
                request.member_id,
            )
            await send_described_outcome(
                interaction, TextDescribedOutcome(text=UNKNOWN_FAILURE_TEXT, ephemeral=True)
            )
            raise

        await send_described_outcome(interaction, described)


def is_discord_enabled(settings: Settings) -> bool:
    """Check whether the Discord bot should be started.

    Returns True only when discord_enabled is True, a token is set, AND the
    environment is not development.
    """
    if settings.tournamention_env == "development":
        logger.info("discord_bot_skipped_in_development")
        return False
    return bool(settings.discord_enabled and settings.discord_bot_token)


async def start_discord_bot(
    settings: Settings,
    engine: AsyncEngine | None = None,
) -> TournamentionBot:
    """Create and start the Discord bot in the current event loop.

    Returns the bot instance so the caller can stop it during shutdown.
    The bot runs as a background task; this function returns immediately
    after starting it.
    """
    bot = TournamentionBot(settings=settings, engine=engine)

    async def _run_bot() -> None:
        try:
            await bot.start(settings.discord_bot_token)
        except asyncio.CancelledError:
            logger.info("discord_bot_cancelled")
        except Exception:  # bot.start raises connection and auth errors
            logger.exception("discord_bot_error")
        finally:
            if not bot.is_closed():
                await bot.close()

    bot.runner_task = asyncio.create_task(_run_bot(), name="discord-bot")
    logger.info("discord_bot_started")
    return bot
