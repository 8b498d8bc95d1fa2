"""Registration of slash commands for the bot."""

from __future__ import annotations

import discord
from discord.ext import commands

from ..config import Settings
from ..core.engine import LifecycleEngine
from ..ui.modals import ApplicationModal
from .handlers import delete_application, show_own_status
from .utils import in_designated_channel, requester_from_interaction


def register_commands(
    bot: commands.Bot, engine: LifecycleEngine, settings: Settings
) -> None:
    """Register the whitelist slash commands on ``bot.tree``."""
    tree = bot.tree

    @tree.command(
        name="whitelist",
        description=f"Start a whitelist application for {settings.server_name}",
    )
    async def whitelist(interaction: discord.Interaction) -> None:
        if not in_designated_channel(interaction, settings.application_channel_id):
            await interaction.response.send_message(
                "This command can only be used in the designated whitelist channel.",
                ephemeral=True,
            )
            return
        await interaction.response.send_modal(
            ApplicationModal(engine, settings.admin_role_id, str(interaction.user.id))
        )

    @tree.command(
        name="application_status",
        description="Show the status of your whitelist applications",
    )
    async def application_status(interaction: discord.Interaction) -> None:
        requester = requester_from_interaction(interaction, settings.admin_role_id)
        await show_own_status(engine, interaction, requester)

    @tree.command(
        name="delete_application",
        description="Permanently delete a whitelist application (admins only)",
    )
    @discord.app_commands.describe(application_id="ID of the application to delete")
    async def delete_application_cmd(
        interaction: discord.Interaction, application_id: str
    ) -> None:
        requester = requester_from_interaction(interaction, settings.admin_role_id)
        await delete_application(engine, interaction, requester, application_id.strip())

    @delete_application_cmd.autocomplete("application_id")
    async def delete_application_id_autocomplete(
        interaction: discord.Interaction, current: str
    ) -> list[discord.app_commands.Choice[str]]:
        current_lower = current.lower()
        return [
            discord.app_commands.Choice(
                name=f"{app.character_name} ({app.status.value})"[:100],
                value=app.id,
            )
            for app in engine.list()
            if current_lower in app.id or current_lower in app.character_name.lower()
        ][:25]
