from __future__ import annotations

from typing import Any

import discord

from ..commands.handlers import review_application
from ..commands.utils import requester_from_interaction
from ..core.engine import LifecycleEngine
from ..core.models import ApplicationStatus


def _paragraph(label: str, placeholder: str, required: bool = True) -> discord.ui.TextInput:
    return discord.ui.TextInput(
        label=label,
        style=discord.TextStyle.long,
        placeholder=placeholder,
        required=required,
        max_length=4000,
    )


def _short(label: str, default: str | None = None, required: bool = True) -> discord.ui.TextInput:
    return discord.ui.TextInput(
        label=label,
        style=discord.TextStyle.short,
        default=default,
        required=required,
        max_length=100,
    )


class ApplicationModal(discord.ui.Modal, title="Whitelist Application (1/2)"):
    """First half of the form: the applicant and their experience.

    Discord limits a modal to five inputs, so the form is split over two
    modals and an attestation step; the collected draft is the same payload
    the web form sends.
    """

    def __init__(self, engine: LifecycleEngine, admin_role_id: str | None, discord_id: str) -> None:
        super().__init__()
        self.engine = engine
        self.admin_role_id = admin_role_id
        self.about_input = _paragraph(
            "Tell us about yourself (50 words minimum)",
            "Who are you outside of the city?",
        )
        self.experience_input = _paragraph(
            "RP Experience & Motivation (50 words minimum)",
            "Where have you played and why do you want to join?",
        )
        self.discord_id_input = _short("Discord ID (Example: 781463891985669475)", default=discord_id)
        self.steam_id_input = _short("Steam Hex ID (Example: 110000146218998)")
        self.character_name_input = _short("Character Full Name")
        for item in (
            self.about_input,
            self.experience_input,
            self.discord_id_input,
            self.steam_id_input,
            self.character_name_input,
        ):
            self.add_item(item)

    def draft(self) -> dict[str, Any]:
        return {
            "about_yourself": self.about_input.value,
            "rp_experience": self.experience_input.value,
            "discord_id": self.discord_id_input.value,
            "steam_id": self.steam_id_input.value,
            "character_name": self.character_name_input.value,
        }

    async def on_submit(self, interaction: discord.Interaction) -> None:
        from .views import ContinueView

        await interaction.response.send_message(
            "Thanks! Now tell us about your character.",
            view=ContinueView(self.engine, self.admin_role_id, self.draft()),
            ephemeral=True,
        )


class CharacterModal(discord.ui.Modal, title="Whitelist Application (2/2)"):
    def __init__(self, engine: LifecycleEngine, admin_role_id: str | None, draft: dict[str, Any]) -> None:
        super().__init__()
        self.engine = engine
        self.admin_role_id = admin_role_id
        self.draft = draft
        self.age_input = _short("Character Age")
        self.nationality_input = _short("Character Nationality")
        self.backstory_input = _paragraph(
            "Character Backstory (3-4 sentences)",
            "Where does your character come from and why Los Santos?",
        )
        self.content_input = _paragraph(
            "Content creation (optional)",
            "Links to your stream or channel",
            required=False,
        )
        self.servers_input = _paragraph(
            "Previous servers (optional)",
            "Servers you played on before",
            required=False,
        )
        for item in (
            self.age_input,
            self.nationality_input,
            self.backstory_input,
            self.content_input,
            self.servers_input,
        ):
            self.add_item(item)

    async def on_submit(self, interaction: discord.Interaction) -> None:
        from .views import AttestationView

        self.draft.update(
            character_age=self.age_input.value,
            character_nationality=self.nationality_input.value,
            character_backstory=self.backstory_input.value,
            content_creation=self.content_input.value or None,
            previous_servers=self.servers_input.value or None,
        )
        await interaction.response.send_message(
            "Last step: confirm the statements that apply and submit.",
            view=AttestationView(self.engine, self.admin_role_id, self.draft),
            ephemeral=True,
        )


class RejectReasonModal(discord.ui.Modal, title="Reject Application"):
    def __init__(self, engine: LifecycleEngine, admin_role_id: str | None, application_id: str) -> None:
        super().__init__()
        self.engine = engine
        self.admin_role_id = admin_role_id
        self.application_id = application_id
        self.reason_input = _paragraph(
            "Reason for rejection",
            "Shown to the applicant",
        )
        self.add_item(self.reason_input)

    async def on_submit(self, interaction: discord.Interaction) -> None:
        requester = requester_from_interaction(interaction, self.admin_role_id)
        await review_application(
            self.engine,
            interaction,
            requester,
            self.application_id,
            ApplicationStatus.REJECTED,
            self.reason_input.value,
        )
