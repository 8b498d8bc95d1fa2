"""Discord message payloads for application events.

Everything here returns plain JSON-ready dictionaries in the shape of the
Discord HTTP API so the REST notifier can post them directly and the bot can
wrap them with :meth:`discord.Embed.from_dict`.
"""

from __future__ import annotations

import datetime
from datetime import UTC
from typing import Any

from ..core.models import Application, ApplicationStatus

CUSTOM_ID_PREFIX = "whitelist"

APPROVED_COLOR = 0xADFF2F
REJECTED_COLOR = 0xFF4444
PROMPT_COLOR = 0xFFFF00
SUBMITTED_COLOR = 0x00FF00
DETAILS_COLOR = 0x6366F1
CONFIRMATION_COLOR = 0x00D4AA
LOG_COLORS = {
    "info": 0x3498DB,
    "success": 0x2ECC71,
    "warning": 0xF39C12,
    "error": 0xE74C3C,
}

# Discord caps embed field values at 1024 characters.
FIELD_LIMIT = 1024


def custom_id(action: str, application_id: str) -> str:
    return f"{CUSTOM_ID_PREFIX}:{action}:{application_id}"


def truncate(text: str, limit: int = FIELD_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def timestamp(moment: datetime.datetime | None) -> str:
    if moment is None:
        return "n/a"
    return f"<t:{int(moment.timestamp())}:f>"


def _field(name: str, value: str, inline: bool = False) -> dict[str, Any]:
    return {"name": name, "value": truncate(value or "\u200b"), "inline": inline}


def review_prompt_embed(application: Application) -> dict[str, Any]:
    return {
        "title": "New Whitelist Application",
        "color": PROMPT_COLOR,
        "timestamp": application.created_at.isoformat(),
        "fields": [
            _field("Applicant", application.applicant_username, True),
            _field("Application ID", f"`{application.id}`", True),
            _field("Character Name", application.character_name, True),
            _field("Discord ID", f"`{application.discord_id}`", True),
            _field("Steam ID", f"`{application.steam_id}`", True),
            _field("About", application.about_yourself),
            _field("RP Experience", application.rp_experience),
        ],
    }


def review_buttons(application_id: str) -> list[dict[str, Any]]:
    """Action row with the approve / reject / details buttons."""
    return [
        {
            "type": 1,
            "components": [
                {
                    "type": 2,
                    "style": 3,
                    "label": "Approve",
                    "custom_id": custom_id("approve", application_id),
                },
                {
                    "type": 2,
                    "style": 4,
                    "label": "Reject",
                    "custom_id": custom_id("reject", application_id),
                },
                {
                    "type": 2,
                    "style": 2,
                    "label": "Details",
                    "custom_id": custom_id("details", application_id),
                },
            ],
        }
    ]


def submitted_embed(application: Application) -> dict[str, Any]:
    return {
        "title": "Application Submitted",
        "color": SUBMITTED_COLOR,
        "description": f"**{application.applicant_username}** has submitted a whitelist application.",
        "timestamp": application.created_at.isoformat(),
        "fields": [
            _field("Character", application.character_name, True),
            _field("Application ID", f"`{application.id}`", True),
            _field("Status", "Pending Review", True),
        ],
    }


def approval_embed(application: Application, reviewer: str) -> dict[str, Any]:
    return {
        "title": "WELCOME TO LOS SANTOS!",
        "description": "**YOUR VISA HAS BEEN GRANTED**",
        "color": APPROVED_COLOR,
        "fields": [
            _field("Accepted By", reviewer),
            _field("Applicant", f"<@{application.applicant_user_id}>", True),
            _field("Character", application.character_name, True),
            _field("Approval Date", timestamp(application.reviewed_at)),
        ],
    }


def rejection_embed(
    application: Application, reviewer: str, reapply_after_hours: int
) -> dict[str, Any]:
    reapply_at = None
    if application.reviewed_at is not None:
        reapply_at = application.reviewed_at + datetime.timedelta(
            hours=reapply_after_hours
        )
    return {
        "title": "SORRY BUT WE DIDN'T MAKE IT",
        "description": "**YOUR VISA HAS BEEN REJECTED**",
        "color": REJECTED_COLOR,
        "fields": [
            _field("Rejected By", reviewer),
            _field("Applicant", f"<@{application.applicant_user_id}>", True),
            _field("Reason", application.review_reason or "", True),
            _field("Rejection Date", timestamp(application.reviewed_at), True),
            _field("Reapplication Available", timestamp(reapply_at), True),
        ],
    }


def details_embed(application: Application) -> dict[str, Any]:
    fields = [
        _field(
            "Applicant Info",
            f"**Discord:** <@{application.applicant_user_id}>\n"
            f"**Username:** {application.applicant_username}\n"
            f"**Discord ID:** `{application.discord_id}`\n"
            f"**Steam ID:** `{application.steam_id}`",
        ),
        _field(
            "Character Details",
            f"**Name:** {application.character_name}\n"
            f"**Age:** {application.character_age}\n"
            f"**Nationality:** {application.character_nationality}",
            True,
        ),
        _field(
            "Application Info",
            f"**ID:** `{application.id}`\n"
            f"**Status:** {application.status.value}\n"
            f"**Submitted:** {timestamp(application.created_at)}",
            True,
        ),
        _field("About Themselves", application.about_yourself),
        _field("RP Experience", application.rp_experience),
        _field("Character Backstory", application.character_backstory),
    ]
    if application.content_creation:
        fields.append(_field("Content Creation", application.content_creation))
    if application.previous_servers:
        fields.append(_field("Previous Servers", application.previous_servers))
    if not application.is_pending:
        verdict = f"{application.status.value} by {application.reviewed_by}"
        if application.review_reason:
            verdict += f"\nReason: {application.review_reason}"
        fields.append(_field("Review", verdict))
    return {
        "title": truncate(
            f"Full Application Details - {application.character_name}", 256
        ),
        "color": DETAILS_COLOR,
        "fields": fields,
    }


def verdict_embed(application: Application) -> dict[str, Any]:
    """Footer appended to a review prompt once a decision was made."""
    approved = application.status is ApplicationStatus.APPROVED
    return {
        "color": SUBMITTED_COLOR if approved else REJECTED_COLOR,
        "description": (
            f"**{application.status.value.upper()}** by {application.reviewed_by} "
            f"at {timestamp(application.reviewed_at)}"
        ),
    }


def confirmation_embed(application: Application) -> dict[str, Any]:
    """Direct message sent to the applicant after a successful submission."""
    return {
        "title": "Application Submitted Successfully!",
        "color": CONFIRMATION_COLOR,
        "description": (
            "Your whitelist application has been received and is now under "
            "review by our admin team. You will be notified once it is reviewed; "
            "reviews may take 24-48 hours."
        ),
        "timestamp": application.created_at.isoformat(),
        "fields": [
            _field("Application ID", f"`{application.id}`", True),
            _field("Character Name", application.character_name, True),
            _field("Status", "Pending Review", True),
        ],
    }


def log_embed(message: str, level: str = "info") -> dict[str, Any]:
    """One-line entry for the log channel, coloured by ``level``."""
    return {
        "color": LOG_COLORS.get(level, LOG_COLORS["info"]),
        "description": message,
        "timestamp": datetime.datetime.now(tz=UTC).isoformat(),
    }
