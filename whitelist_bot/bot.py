"""Discord bot front-end for whitelist applications."""

from __future__ import annotations

from typing import Any

import discord
from discord.ext import commands

from .adapters import embeds
from .config import Settings
from .core.engine import LifecycleEngine
from .logging_config import setup_logging


class WhitelistBot(commands.Bot):
    """Small ``discord.py`` bot that drives the lifecycle engine.

    ``engine`` and ``settings`` are reachable from any interaction through
    ``interaction.client``; the persistent review buttons rely on that.
    """

    def __init__(self, engine: LifecycleEngine, settings: Settings, **kwargs: Any) -> None:
        """Initialize the bot with the minimal intents required."""
        intents = kwargs.pop("intents", None) or discord.Intents.default()
        # Slash commands and components only; message content is not needed.
        intents.message_content = False
        super().__init__(
            command_prefix=kwargs.pop("command_prefix", "!"),
            intents=intents,
            **kwargs,
        )
        self.engine = engine
        self.settings = settings
        # on_ready fires again after every reconnect
        self._announced = False
        self.log = setup_logging(settings.log_level)

    async def setup_hook(self) -> None:
        """Register persistent buttons and sync slash commands."""
        from .ui.views import ReviewButton

        self.add_dynamic_items(ReviewButton)

        # ``discord.py`` does not push slash commands to Discord by itself.
        # Syncing to a single guild propagates immediately, global sync can
        # take up to an hour.
        if self.settings.guild_id:
            guild = discord.Object(id=int(self.settings.guild_id))
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
        else:
            synced = await self.tree.sync()
        self.log.info("Synced %d slash commands", len(synced))

        await super().setup_hook()

    async def on_ready(self) -> None:  # pragma: no cover - requires discord
        """Log a short confirmation once the bot connected successfully."""
        await self.change_presence(
            activity=discord.Game(name=f"{self.settings.server_name} whitelist")
        )
        self.log.info(
            "Logged in as %s (%s)",
            self.user,
            self.user.id if self.user else "?",
        )
        await self.announce_ready()

    async def announce_ready(self) -> None:
        """Post a start-up line to the log channel, best effort."""
        if self._announced or not self.settings.log_channel_id:
            return
        self._announced = True
        channel_id = int(self.settings.log_channel_id)
        embed = discord.Embed.from_dict(
            embeds.log_embed("Discord bot started and ready for applications!")
        )
        try:
            channel = self.get_channel(channel_id) or await self.fetch_channel(channel_id)
            await channel.send(embed=embed)
        except discord.HTTPException:
            self.log.warning("Could not post to log channel %s", channel_id, exc_info=True)


__all__ = ["WhitelistBot"]
