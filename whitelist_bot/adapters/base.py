"""Notification sink interface the lifecycle engine reports to."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..core.models import Application, ApplicationStatus


class NotificationSink(ABC):
    """Abstract sink telling humans about application events."""

    @abstractmethod
    async def notify(
        self,
        application: Application,
        reviewer_display_name: str,
        outcome: ApplicationStatus,
    ) -> None:
        """Announce that ``application`` was approved or rejected."""

    @abstractmethod
    async def notify_submitted(self, application: Application) -> None:
        """Ask reviewers to look at a freshly submitted ``application``."""


class LoggingNotifier(NotificationSink):
    """Sink used when no Discord token is configured."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.log = logger or logging.getLogger("whitelist.notify")

    async def notify(
        self,
        application: Application,
        reviewer_display_name: str,
        outcome: ApplicationStatus,
    ) -> None:
        self.log.info(
            "Application %s (%s) %s by %s",
            application.id,
            application.applicant_username,
            outcome.value,
            reviewer_display_name,
        )

    async def notify_submitted(self, application: Application) -> None:
        self.log.info(
            "Application %s submitted by %s",
            application.id,
            application.applicant_username,
        )
