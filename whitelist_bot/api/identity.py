"""Requester resolution for the HTTP adapter.

Logging in happens in front of this service (an OAuth-aware proxy or the web
dashboard's backend). It forwards the signed-in Discord user in request
headers, together with a shared token proving the headers came from it. A
request without a usable identity has no capabilities at all.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Callable

from fastapi import Request

from ..core.models import Identity

log = logging.getLogger("whitelist.api")

IdentityResolver = Callable[[Request], "Identity | None"]

USER_ID_HEADER = "X-User-Id"
USER_NAME_HEADER = "X-User-Name"
DISPLAY_NAME_HEADER = "X-User-Display-Name"
ADMIN_HEADER = "X-User-Admin"
TOKEN_HEADER = "X-Identity-Token"

_TRUE = {"1", "true", "yes", "on"}


def header_identity_resolver(shared_token: str = "") -> IdentityResolver:
    """Build a resolver that trusts identity headers from the auth proxy.

    When ``shared_token`` is set, headers are ignored unless the request also
    carries it in ``X-Identity-Token``. Without a token any client could forge
    the headers, so ``X-User-Admin`` is never honoured and nobody can review
    or delete over HTTP.
    """
    if not shared_token:
        log.warning(
            "No identity token configured; %s is ignored and HTTP admin actions are disabled",
            ADMIN_HEADER,
        )

    def resolve(request: Request) -> Identity | None:
        if shared_token:
            supplied = request.headers.get(TOKEN_HEADER, "")
            if not hmac.compare_digest(supplied.encode(), shared_token.encode()):
                return None
        user_id = request.headers.get(USER_ID_HEADER, "").strip()
        if not user_id:
            return None
        username = request.headers.get(USER_NAME_HEADER, "").strip() or user_id
        display_name = request.headers.get(DISPLAY_NAME_HEADER, "").strip() or username
        is_admin = bool(shared_token) and (
            request.headers.get(ADMIN_HEADER, "").strip().lower() in _TRUE
        )
        return Identity(
            id=user_id,
            username=username,
            display_name=display_name,
            is_admin=is_admin,
        )

    return resolve
