"""Translate Discord interactions into lifecycle engine calls and back.

Every slash command, modal and button ends up in one of these coroutines. They
only shape replies; validation and permission checks live in the engine.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import discord

from ..adapters import embeds
from ..core.engine import LifecycleEngine, LifecycleResult
from ..core.errors import (
    AlreadyReviewedError,
    AuthorizationError,
    LifecycleError,
    NotFoundError,
    ValidationError,
)
from ..core.models import Application, ApplicationStatus, Identity

log = logging.getLogger("whitelist.bot")

GENERIC_ERROR = "There was an error processing this action. Please try again."


def describe_error(exc: LifecycleError) -> str:
    """Chat wording for a lifecycle error."""
    if isinstance(exc, ValidationError):
        lines = "\n".join(f"• **{e.field}**: {e.message}" for e in exc.errors)
        return f"Please fix the following and try again:\n{lines}"
    if isinstance(exc, AlreadyReviewedError):
        app = exc.application
        return (
            f"This application has already been **{app.status.value}** "
            f"by {app.reviewed_by}."
        )
    if isinstance(exc, AuthorizationError):
        return "You do not have permission to do that."
    if isinstance(exc, NotFoundError):
        return "Application not found."
    return str(exc)


def _warning_suffix(result: LifecycleResult) -> str:
    if not result.warnings:
        return ""
    return "\n\n_Heads up: the announcement could not be posted. The change is saved._"


async def _reply(interaction: discord.Interaction, content: str | None = None, **kwargs: Any) -> None:
    if interaction.response.is_done():
        await interaction.followup.send(content, ephemeral=True, **kwargs)
    else:
        await interaction.response.send_message(content, ephemeral=True, **kwargs)


async def submit_application(
    engine: LifecycleEngine,
    interaction: discord.Interaction,
    requester: Identity,
    payload: Mapping[str, Any],
) -> Application | None:
    try:
        result = await engine.submit(payload, requester)
    except LifecycleError as exc:
        await _reply(interaction, describe_error(exc))
        return None
    except Exception:
        log.exception("Submitting an application for %s failed", requester.id)
        await _reply(interaction, GENERIC_ERROR)
        return None

    application = result.application
    await _reply(
        interaction,
        "**Application Submitted Successfully!**\n\n"
        f"Thank you <@{requester.id}>! Your whitelist application is now under review.\n\n"
        f"**Application ID:** `{application.id}`\n"
        f"**Submitted:** {embeds.timestamp(application.created_at)}"
        + _warning_suffix(result),
    )
    await _confirm_by_dm(interaction.user, application)
    return application


async def _confirm_by_dm(user: discord.abc.User, application: Application) -> None:
    try:
        await user.send(embed=discord.Embed.from_dict(embeds.confirmation_embed(application)))
    except discord.HTTPException:
        log.info("Could not DM %s about %s, direct messages may be disabled", user.id, application.id)


async def review_application(
    engine: LifecycleEngine,
    interaction: discord.Interaction,
    requester: Identity,
    application_id: str,
    status: ApplicationStatus,
    reason: str | None = None,
) -> Application | None:
    try:
        result = await engine.review(application_id, status, requester, reason)
    except LifecycleError as exc:
        await _reply(interaction, describe_error(exc))
        return None
    except Exception:
        log.exception("Reviewing application %s failed", application_id)
        await _reply(interaction, GENERIC_ERROR)
        return None

    application = result.application
    await _reply(
        interaction,
        f"Application {application.status.value} successfully." + _warning_suffix(result),
    )
    await _close_prompt(interaction, application)
    return application


async def _close_prompt(interaction: discord.Interaction, application: Application) -> None:
    """Strip the buttons from the review prompt and stamp the verdict on it."""
    message = getattr(interaction, "message", None)
    if message is None:
        return
    try:
        await message.edit(
            embeds=[*message.embeds, discord.Embed.from_dict(embeds.verdict_embed(application))],
            view=None,
        )
    except discord.HTTPException:
        log.warning("Could not update review prompt for %s", application.id, exc_info=True)


async def delete_application(
    engine: LifecycleEngine,
    interaction: discord.Interaction,
    requester: Identity,
    application_id: str,
) -> bool:
    try:
        await engine.delete(application_id, requester)
    except LifecycleError as exc:
        await _reply(interaction, describe_error(exc))
        return False
    except Exception:
        log.exception("Deleting application %s failed", application_id)
        await _reply(interaction, GENERIC_ERROR)
        return False
    await _reply(interaction, f"Application `{application_id}` deleted.")
    return True


async def show_details(
    engine: LifecycleEngine,
    interaction: discord.Interaction,
    application_id: str,
) -> None:
    try:
        application = engine.get(application_id)
    except NotFoundError as exc:
        await _reply(interaction, describe_error(exc))
        return
    await _reply(interaction, embed=discord.Embed.from_dict(embeds.details_embed(application)))


async def show_own_status(
    engine: LifecycleEngine,
    interaction: discord.Interaction,
    requester: Identity,
) -> None:
    mine = [a for a in engine.list() if a.applicant_user_id == requester.id]
    if not mine:
        await _reply(interaction, "You have not submitted an application yet. Use `/whitelist`.")
        return
    lines = []
    for app in mine:
        line = f"`{app.id}` • {app.character_name} • **{app.status.value}**"
        if app.review_reason:
            line += f" ({app.review_reason})"
        lines.append(line)
    await _reply(interaction, "Your applications:\n" + "\n".join(lines))
