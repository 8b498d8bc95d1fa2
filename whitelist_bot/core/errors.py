"""Error taxonomy shared by the lifecycle engine and both entry adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .models import Application


@dataclass(frozen=True)
class FieldError:
    """A single violated constraint on a submitted field."""

    field: str
    message: str


class LifecycleError(Exception):
    """Base class for every request-scoped error raised by the core."""


class ValidationError(LifecycleError):
    """One or more fields failed validation.

    ``errors`` always lists every problem found so a caller can present them
    all at once.
    """

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        summary = "; ".join(f"{e.field}: {e.message}" for e in self.errors)
        super().__init__(summary or "Invalid input")

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]


class AuthorizationError(LifecycleError):
    """The requester lacks the capability needed for the operation."""

    def __init__(self, message: str = "Admin access required") -> None:
        super().__init__(message)


class AuthenticationRequired(AuthorizationError):
    """No requester identity was supplied at all."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class NotFoundError(LifecycleError):
    def __init__(self, application_id: str) -> None:
        self.application_id = application_id
        super().__init__("Application not found")


class AlreadyReviewedError(LifecycleError):
    """The application left ``pending`` before this transition was attempted."""

    def __init__(self, application: Application) -> None:
        self.application = application
        reviewer = application.reviewed_by or "another reviewer"
        super().__init__(
            f"Application already {application.status.value} by {reviewer}"
        )


class NotificationFailure(LifecycleError):
    """A notification could not be delivered. Never fatal to a transition."""


class StaleStatusError(Exception):
    """Raised by a store when a compare-and-swap sees an unexpected status."""

    def __init__(self, current: Application) -> None:
        self.current = current
        super().__init__(
            f"Application {current.id} is {current.status.value}"
        )
