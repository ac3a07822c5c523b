"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

from pydantic import model_validator
from pydantic_settings import BaseSettings

# Shown when a member has no custom avatar.
DEFAULT_PROFILE_ICON = (
    "https://static.wikia.nocookie.net/minecraft_gamepedia/images/0/02/"
    "Pointer_%28texture%29_JE1_BE1.png"
)

VALID_ENVS = frozenset({"development", "production", "test"})


class Settings(BaseSettings):
    """Tournamention bot configuration.

    All values can be overridden via environment variables or .env file.
    """

    # Discord
    discord_bot_token: str = ""
    discord_enabled: bool = False
    discord_guild_id: str = ""  # Sync commands to this guild only (fast dev iteration)

    # Database
    database_url: str = "sqlite+aiosqlite:///tournamention.db"

    # Environment
    tournamention_env: str = "development"

    # Presentation
    default_profile_icon: str = DEFAULT_PROFILE_ICON

    # Logging
    tournamention_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_env(self) -> Settings:
        """Reject unknown environments and a tokenless production bot."""
        if self.tournamention_env not in VALID_ENVS:
            msg = (
                f"TOURNAMENTION_ENV must be one of {sorted(VALID_ENVS)}, "
                f"got {self.tournamention_env!r}"
            )
            raise ValueError(msg)
        if (
            self.tournamention_env == "production"
            and self.discord_enabled
            and not self.discord_bot_token
        ):
            raise ValueError("DISCORD_BOT_TOKEN must be set when Discord is enabled in production.")
        return self
