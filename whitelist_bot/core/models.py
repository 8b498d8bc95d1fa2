"""Data models for whitelist applications and the people handling them.

The models are implemented using :mod:`pydantic` so that they provide
runtime validation and convenient serialisation to and from dictionaries.
Field names are snake_case in Python and camelCase on the wire, matching the
JSON the web dashboard has always spoken.
"""

from __future__ import annotations

import datetime
import uuid
from datetime import UTC
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


#: Fields a review is allowed to write. Everything else is fixed at creation.
REVIEW_FIELDS = frozenset(
    {"status", "reviewed_by", "reviewer_id", "review_reason", "reviewed_at"}
)


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(tz=UTC)


class Identity(BaseModel):
    """The person behind a request, as reported by the identity provider.

    Attributes
    ----------
    id:
        Opaque, globally unique user id (the Discord snowflake in practice).
    display_name:
        Name shown to other people, e.g. the guild nickname.
    username:
        Raw account username.
    is_admin:
        Capability claim attached at the adapter boundary. The engine trusts it
        and never looks it up again.
    avatar_url, roles:
        Optional profile metadata echoed back to the dashboard.

    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    display_name: str
    username: str
    is_admin: bool = False
    avatar_url: str | None = None
    roles: list[str] = Field(default_factory=list)


class ApplicationSubmission(BaseModel):
    """Applicant supplied fields, already validated.

    Built by :func:`whitelist_bot.core.validation.validate_submission`, which
    owns the semantic minimums.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    discord_id: str
    steam_id: str
    about_yourself: str
    rp_experience: str
    character_name: str
    character_age: str
    character_nationality: str
    character_backstory: str
    content_creation: str | None = None
    previous_servers: str | None = None
    rules_read: bool = False
    cfx_linked: bool = False


class Application(BaseModel):
    """A whitelist application and its review state."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    applicant_user_id: str
    applicant_username: str
    discord_id: str
    steam_id: str
    about_yourself: str
    rp_experience: str
    character_name: str
    character_age: str
    character_nationality: str
    character_backstory: str
    content_creation: str | None = None
    previous_servers: str | None = None
    rules_read: bool = False
    cfx_linked: bool = False
    status: ApplicationStatus = ApplicationStatus.PENDING
    reviewed_by: str | None = None
    reviewer_id: str | None = None
    review_reason: str | None = None
    created_at: datetime.datetime = Field(default_factory=_utcnow)
    reviewed_at: datetime.datetime | None = None

    @model_validator(mode="after")
    def _check_review_state(self) -> Application:
        reviewed = self.reviewed_by is not None and self.reviewed_at is not None
        unreviewed = self.reviewed_by is None and self.reviewed_at is None
        if self.status is ApplicationStatus.PENDING and not unreviewed:
            raise ValueError("pending applications cannot carry review details")
        if self.status is not ApplicationStatus.PENDING and not reviewed:
            raise ValueError("reviewed applications need a reviewer and a review time")
        if self.status is ApplicationStatus.REJECTED and not (
            self.review_reason and self.review_reason.strip()
        ):
            raise ValueError("rejected applications need a reason")
        return self

    @property
    def is_pending(self) -> bool:
        return self.status is ApplicationStatus.PENDING

    @classmethod
    def from_submission(
        cls, submission: ApplicationSubmission, applicant: Identity
    ) -> Application:
        return cls(
            applicant_user_id=applicant.id,
            applicant_username=applicant.username,
            **submission.model_dump(),
        )
