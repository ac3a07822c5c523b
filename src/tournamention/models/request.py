"""Platform-neutral command request: what the validation stage reads.

Built from a ``discord.Interaction`` by the bot; tests build them directly.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

OptionType = Literal["string", "integer", "number", "boolean", "user", "channel", "role"]


class CommandOption(BaseModel):
    """A single named option supplied with a slash command."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: OptionType = "string"
    value: Any = None


class CommandRequest(BaseModel):
    """Read-only view of a slash command invocation.

    Metadata fields (``guild_id``, ``channel_id``, ``member_id``) are plain
    attributes so constraints can be attached to them by name.
    """

    model_config = ConfigDict(frozen=True)

    command_name: str
    guild_id: str | None = None
    channel_id: str | None = None
    member_id: str
    options: tuple[CommandOption, ...] = ()

    def get_option(self, name: str) -> CommandOption | None:
        for option in self.options:
            if option.name == name:
                return option
        return None

    def option_value(self, name: str, default: Any = None) -> Any:
        option = self.get_option(name)
        if option is None or option.value is None:
            return default
        return option.value
