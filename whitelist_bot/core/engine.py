"""Lifecycle engine: the only code allowed to create, review or delete applications.

Both entry adapters (the FastAPI routes and the Discord bot) call into a single
:class:`LifecycleEngine` so the rules below exist exactly once:

* anyone authenticated may submit; the payload must pass validation,
* only admins may review or delete,
* an application leaves ``pending`` at most once; the store's
  compare-and-swap decides which of two racing reviewers wins,
* notifications go out after the change is committed and can never undo it.
"""

from __future__ import annotations

import asyncio
import datetime
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC
from typing import Any

from ..adapters.base import NotificationSink
from .errors import (
    AlreadyReviewedError,
    AuthenticationRequired,
    AuthorizationError,
    FieldError,
    NotFoundError,
    StaleStatusError,
    ValidationError,
)
from .models import Application, ApplicationStatus, Identity
from .storage import ApplicationRepository
from .validation import validate_submission

log = logging.getLogger("whitelist.engine")

REVIEW_OUTCOMES = (ApplicationStatus.APPROVED, ApplicationStatus.REJECTED)


@dataclass
class LifecycleResult:
    """A committed application plus any non-fatal notification warnings."""

    application: Application
    warnings: list[str] = field(default_factory=list)


def _parse_status(value: Any) -> ApplicationStatus | None:
    try:
        status = ApplicationStatus(value)
    except (ValueError, TypeError):
        return None
    return status if status in REVIEW_OUTCOMES else None


class LifecycleEngine:
    """Application lifecycle shared by every adapter.

    Store writes run in a worker thread so a file-backed store never blocks the
    event loop that serves both HTTP and Discord.
    """

    def __init__(self, store: ApplicationRepository, notifier: NotificationSink) -> None:
        self.store = store
        self.notifier = notifier

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get(self, application_id: str) -> Application:
        application = self.store.get(application_id)
        if application is None:
            raise NotFoundError(application_id)
        return application

    def list(self, status: ApplicationStatus | None = None) -> list[Application]:
        if status is None:
            return self.store.list()
        return self.store.list_by_status(status)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    async def submit(
        self, payload: Mapping[str, Any], requester: Identity | None
    ) -> LifecycleResult:
        """Validate ``payload`` and store a new ``pending`` application."""
        if requester is None:
            raise AuthenticationRequired()
        submission = validate_submission(payload)
        application = await asyncio.to_thread(self.store.create, submission, requester)
        log.info(
            "Application %s submitted by %s (%s)",
            application.id,
            requester.username,
            requester.id,
        )
        result = LifecycleResult(application)
        await self._deliver(result, self.notifier.notify_submitted(application))
        return result

    async def review(
        self,
        application_id: str,
        target_status: Any,
        reviewer: Identity | None,
        reason: str | None = None,
    ) -> LifecycleResult:
        """Approve or reject a pending application.

        Raises
        ------
        AuthorizationError
            ``reviewer`` is missing or not an admin.
        ValidationError
            ``target_status`` is not a review outcome, or a rejection has no
            reason.
        NotFoundError
            No application with ``application_id``.
        AlreadyReviewedError
            The application is no longer pending, including when another
            reviewer won a race for it.

        """
        if reviewer is None or not reviewer.is_admin:
            raise AuthorizationError()
        status = _parse_status(target_status)
        if status is None:
            raise ValidationError(
                [FieldError("status", "Status must be 'approved' or 'rejected'")]
            )

        current = self.get(application_id)
        if not current.is_pending:
            raise AlreadyReviewedError(current)

        if reason is not None and not isinstance(reason, str):
            raise ValidationError([FieldError("reason", "Reason must be text")])
        if status is ApplicationStatus.REJECTED and not (reason or "").strip():
            raise ValidationError(
                [FieldError("reason", "A reason is required when rejecting an application")]
            )

        changes = {
            "status": status,
            "reviewed_by": reviewer.display_name,
            "reviewer_id": reviewer.id,
            "reviewed_at": datetime.datetime.now(tz=UTC),
            "review_reason": reason if status is ApplicationStatus.REJECTED else None,
        }
        try:
            application = await asyncio.to_thread(
                self.store.update,
                application_id,
                changes,
                expected_status=ApplicationStatus.PENDING,
            )
        except StaleStatusError as exc:
            log.info(
                "Review of %s by %s lost to an earlier decision (%s)",
                application_id,
                reviewer.display_name,
                exc.current.status.value,
            )
            raise AlreadyReviewedError(exc.current) from None
        if application is None:
            # Deleted between the lookup and the write.
            raise NotFoundError(application_id)

        log.info(
            "Application %s %s by %s (%s)",
            application.id,
            status.value,
            reviewer.display_name,
            reviewer.id,
        )
        result = LifecycleResult(application)
        await self._deliver(
            result, self.notifier.notify(application, reviewer.display_name, status)
        )
        return result

    async def delete(self, application_id: str, requester: Identity | None) -> None:
        """Remove an application for good. Admin only."""
        if requester is None or not requester.is_admin:
            raise AuthorizationError()
        if not await asyncio.to_thread(self.store.delete, application_id):
            raise NotFoundError(application_id)
        log.info("Application %s deleted by %s", application_id, requester.display_name)

    # ------------------------------------------------------------------
    async def _deliver(self, result: LifecycleResult, notification) -> None:
        """Await ``notification``; a failure becomes a warning on ``result``."""
        try:
            await notification
        except Exception as exc:  # best effort, the change is already stored
            log.warning(
                "Notification for application %s failed: %s",
                result.application.id,
                exc,
                exc_info=True,
            )
            result.warnings.append(f"Notification failed: {exc}")
