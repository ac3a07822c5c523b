"""Discord bot integration for Tournamention.

The bot owns the platform side of every command: it registers the slash
commands, adapts interactions into requests and sends replies. Command
semantics live in ``tournamention.commands``.

Optional: if DISCORD_BOT_TOKEN is not set, the process runs without Discord.
"""
