"""Discord notifier implementing :class:`~whitelist_bot.adapters.base.NotificationSink`.

It uses :mod:`httpx` to talk to Discord's HTTP API directly, so the web API can
announce decisions even when the gateway bot is not connected. Messages posted
here carry the same button ids the bot listens for.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import NotificationFailure
from ..core.models import Application, ApplicationStatus
from . import embeds as payloads
from .base import NotificationSink

log = logging.getLogger("whitelist.notify")


class DiscordNotifier(NotificationSink):
    """Sink that posts application events to Discord channels."""

    api_base = "https://discord.com/api/v10"

    def __init__(
        self,
        token: str,
        *,
        application_channel_id: str | None = None,
        log_channel_id: str | None = None,
        admin_role_id: str | None = None,
        reapply_after_hours: int = 24,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Store authentication ``token``, target channels and optional HTTP ``client``."""
        self.token = token
        self.application_channel_id = application_channel_id
        self.log_channel_id = log_channel_id
        self.admin_role_id = admin_role_id
        self.reapply_after_hours = reapply_after_hours
        self.client = client or httpx.AsyncClient(timeout=10.0)

    # ------------------------------------------------------------------
    async def send_message(
        self,
        channel_id: str,
        content: str | None = None,
        *,
        embeds: list[dict[str, Any]] | None = None,
        components: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Send a message to a channel and return the created message.

        Parameters
        ----------
        channel_id:
            Identifier of the Discord channel.
        content:
            Plain message body.
        embeds, components:
            Raw embed and component payloads.

        Raises
        ------
        NotificationFailure
            If the request fails or Discord answers with an error status.

        """
        url = f"{self.api_base}/channels/{channel_id}/messages"
        headers = {"Authorization": f"Bot {self.token}"}
        payload: dict[str, Any] = {"allowed_mentions": {"parse": ["users", "roles"]}}
        if content:
            payload["content"] = content
        if embeds:
            payload["embeds"] = embeds
        if components:
            payload["components"] = components
        try:
            response = await self.client.post(url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise NotificationFailure(
                f"Could not post to channel {channel_id}: {exc}"
            ) from exc
        return response.json()

    # ------------------------------------------------------------------
    async def notify(
        self,
        application: Application,
        reviewer_display_name: str,
        outcome: ApplicationStatus,
    ) -> None:
        applicant = f"<@{application.applicant_user_id}>"
        if outcome is ApplicationStatus.APPROVED:
            content = f"**Congratulations {applicant}!** Your whitelist application has been **APPROVED**!"
            embed = payloads.approval_embed(application, reviewer_display_name)
            audit = f"**{application.applicant_username}** approved by **{reviewer_display_name}**"
        else:
            content = f"{applicant} Your whitelist application has been **REJECTED**."
            embed = payloads.rejection_embed(
                application, reviewer_display_name, self.reapply_after_hours
            )
            audit = f"**{application.applicant_username}** rejected by **{reviewer_display_name}**"

        if self.application_channel_id:
            await self.send_message(
                self.application_channel_id, content, embeds=[embed]
            )
        if self.log_channel_id:
            await self.send_message(
                self.log_channel_id,
                f"{audit} at {payloads.timestamp(application.reviewed_at)}",
            )
        log.debug("Announced %s for application %s", outcome.value, application.id)

    async def log_event(self, message: str, level: str = "info") -> None:
        """Post a one-line entry to the log channel, if one is configured."""
        if self.log_channel_id:
            await self.send_message(
                self.log_channel_id, embeds=[payloads.log_embed(message, level)]
            )

    async def notify_submitted(self, application: Application) -> None:
        if self.log_channel_id:
            mention = f"<@&{self.admin_role_id}>" if self.admin_role_id else None
            await self.send_message(
                self.log_channel_id,
                mention,
                embeds=[payloads.review_prompt_embed(application)],
                components=payloads.review_buttons(application.id),
            )
        await self.log_event(
            f"New application submitted by {application.applicant_username} "
            f"(ID: {application.id})"
        )
        if self.application_channel_id:
            await self.send_message(
                self.application_channel_id,
                embeds=[payloads.submitted_embed(application)],
            )

    async def close(self) -> None:
        """Close the underlying :class:`httpx.AsyncClient`."""
        await self.client.aclose()
