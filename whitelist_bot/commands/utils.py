from __future__ import annotations

import discord

from ..core.models import Identity


def requester_from_interaction(
    interaction: discord.Interaction, admin_role_id: str | None
) -> Identity:
    """
    Describe the user behind ``interaction`` as an :class:`Identity`.
    ``is_admin`` is true when the member holds ``admin_role_id``; users seen
    outside a guild (no roles) are never admins.
    """

    user = interaction.user
    roles = [r for r in getattr(user, "roles", []) if r.name != "@everyone"]
    is_admin = admin_role_id is not None and any(
        str(r.id) == str(admin_role_id) for r in roles
    )
    avatar = getattr(user, "display_avatar", None)
    return Identity(
        id=str(user.id),
        username=user.name,
        display_name=getattr(user, "display_name", None) or user.name,
        is_admin=is_admin,
        avatar_url=str(avatar.url) if avatar is not None else None,
        roles=[r.name for r in roles],
    )


def in_designated_channel(
    interaction: discord.Interaction, channel_id: str | None
) -> bool:
    """``True`` when no channel is configured or the interaction happened in it."""
    if not channel_id:
        return True
    return str(interaction.channel_id) == str(channel_id)
