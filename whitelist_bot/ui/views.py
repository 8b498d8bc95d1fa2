from __future__ import annotations

import re
from typing import Any

import discord

from ..adapters.embeds import CUSTOM_ID_PREFIX, custom_id
from ..commands.handlers import review_application, show_details, submit_application
from ..commands.utils import requester_from_interaction
from ..core.engine import LifecycleEngine
from ..core.models import ApplicationStatus
from .modals import CharacterModal, RejectReasonModal

# How long an applicant has to finish the multi-step form.
FORM_TIMEOUT = 15 * 60


class ContinueView(discord.ui.View):
    def __init__(self, engine: LifecycleEngine, admin_role_id: str | None, draft: dict[str, Any]) -> None:
        super().__init__(timeout=FORM_TIMEOUT)
        self.engine = engine
        self.admin_role_id = admin_role_id
        self.draft = draft

    @discord.ui.button(label="Continue", style=discord.ButtonStyle.primary)
    async def next_step(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        await interaction.response.send_modal(
            CharacterModal(self.engine, self.admin_role_id, self.draft)
        )
        self.stop()


class AttestationView(discord.ui.View):
    """Final step: the two yes/no statements and the submit button."""

    def __init__(self, engine: LifecycleEngine, admin_role_id: str | None, draft: dict[str, Any]) -> None:
        super().__init__(timeout=FORM_TIMEOUT)
        self.engine = engine
        self.admin_role_id = admin_role_id
        self.draft = {**draft, "rules_read": False, "cfx_linked": False}
        self.submitted = False

    @discord.ui.select(
        placeholder="Select every statement that is true",
        min_values=0,
        max_values=2,
        options=[
            discord.SelectOption(label="I have read the server rules", value="rules_read"),
            discord.SelectOption(label="My CFX account is linked", value="cfx_linked"),
        ],
    )
    async def attestations(self, interaction: discord.Interaction, select: discord.ui.Select) -> None:
        self.draft["rules_read"] = "rules_read" in select.values
        self.draft["cfx_linked"] = "cfx_linked" in select.values
        await interaction.response.defer()

    @discord.ui.button(label="Submit application", style=discord.ButtonStyle.success)
    async def submit(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        # Claimed before the first await so a second click cannot submit again.
        if self.submitted:
            await interaction.response.send_message(
                "This application was already submitted.", ephemeral=True
            )
            return
        self.submitted = True
        button.disabled = True
        self.stop()
        requester = requester_from_interaction(interaction, self.admin_role_id)
        await submit_application(self.engine, interaction, requester, self.draft)


class ReviewButton(
    discord.ui.DynamicItem[discord.ui.Button],
    template=rf"{CUSTOM_ID_PREFIX}:(?P<action>approve|reject|details):(?P<id>[0-9a-f]+)",
):
    """Approve / reject / details buttons on a review prompt.

    Prompts may be posted by the web API through the REST notifier, so the
    buttons are matched by custom id and keep working after a restart.
    """

    _STYLES = {
        "approve": ("Approve", discord.ButtonStyle.success),
        "reject": ("Reject", discord.ButtonStyle.danger),
        "details": ("Details", discord.ButtonStyle.secondary),
    }

    def __init__(self, action: str, application_id: str) -> None:
        label, style = self._STYLES[action]
        super().__init__(
            discord.ui.Button(
                label=label, style=style, custom_id=custom_id(action, application_id)
            )
        )
        self.action = action
        self.application_id = application_id

    @classmethod
    async def from_custom_id(
        cls,
        interaction: discord.Interaction,
        item: discord.ui.Button,
        match: re.Match[str],
        /,
    ) -> ReviewButton:
        return cls(match["action"], match["id"])

    async def callback(self, interaction: discord.Interaction) -> None:
        engine: LifecycleEngine = interaction.client.engine
        admin_role_id = interaction.client.settings.admin_role_id
        if self.action == "details":
            await show_details(engine, interaction, self.application_id)
        elif self.action == "reject":
            await interaction.response.send_modal(
                RejectReasonModal(engine, admin_role_id, self.application_id)
            )
        else:
            requester = requester_from_interaction(interaction, admin_role_id)
            await review_application(
                engine,
                interaction,
                requester,
                self.application_id,
                ApplicationStatus.APPROVED,
            )

