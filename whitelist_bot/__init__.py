"""Whitelist applications for a roleplay community.

This module exposes the domain models, the storage layer and the lifecycle
engine so that consumers of the package can simply import them from
``whitelist_bot``. The HTTP API lives in :mod:`whitelist_bot.api` and the
Discord bot in :mod:`whitelist_bot.bot`.
"""

from .core.engine import LifecycleEngine, LifecycleResult
from .core.errors import (
    AlreadyReviewedError,
    AuthenticationRequired,
    AuthorizationError,
    FieldError,
    LifecycleError,
    NotFoundError,
    NotificationFailure,
    ValidationError,
)
from .core.models import Application, ApplicationStatus, Identity
from .core.storage import (
    ApplicationRepository,
    InMemoryApplicationStore,
    JSONApplicationStore,
)

__all__ = [
    "AlreadyReviewedError",
    "Application",
    "ApplicationRepository",
    "ApplicationStatus",
    "AuthenticationRequired",
    "AuthorizationError",
    "FieldError",
    "Identity",
    "InMemoryApplicationStore",
    "JSONApplicationStore",
    "LifecycleEngine",
    "LifecycleError",
    "LifecycleResult",
    "NotFoundError",
    "NotificationFailure",
    "ValidationError",
]
