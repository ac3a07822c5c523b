"""Process entrypoint: settings, logging, schema, bot.

Run with ``python -m tournamention.main`` or the ``tournamention`` script.
"""

from __future__ import annotations

import asyncio
import logging

from tournamention.config import Settings
from tournamention.db.engine import create_engine, create_schema
from tournamention.discord.bot import is_discord_enabled, start_discord_bot

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.tournamention_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def serve(settings: Settings) -> None:
    """Create the schema and run the bot until it stops."""
    engine = create_engine(settings.database_url)
    await create_schema(engine)

    try:
        if not is_discord_enabled(settings):
            logger.warning("discord_disabled env=%s", settings.tournamention_env)
            return
        bot = await start_discord_bot(settings, engine)
        if bot.runner_task is not None:
            await bot.runner_task
    finally:
        await engine.dispose()
        logger.info("tournamention_stopped")


def main() -> None:
    settings = Settings()
    configure_logging(settings)
    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
