"""Field and semantic checks applied to a raw submission payload."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .errors import FieldError, ValidationError
from .models import ApplicationSubmission

MIN_WORDS = 50
MIN_BACKSTORY_CHARS = 100

_REQUIRED_MESSAGES = {
    "character_age": "Character age is required",
    "discord_id": "Discord ID is required",
    "steam_id": "Steam Hex ID is required",
    "character_name": "Character name is required",
    "character_nationality": "Character nationality is required",
}


def word_count(text: str) -> int:
    """Number of whitespace separated tokens in ``text``."""
    return len(text.split())


class _SubmissionForm(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )

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

    @field_validator("about_yourself")
    @classmethod
    def _about_length(cls, value: str) -> str:
        if word_count(value) < MIN_WORDS:
            raise ValueError(f"Please provide at least {MIN_WORDS} words about yourself")
        return value

    @field_validator("rp_experience")
    @classmethod
    def _experience_length(cls, value: str) -> str:
        if word_count(value) < MIN_WORDS:
            raise ValueError(
                f"Please provide at least {MIN_WORDS} words about your RP experience"
            )
        return value

    @field_validator("character_backstory")
    @classmethod
    def _backstory_length(cls, value: str) -> str:
        if len(value) < MIN_BACKSTORY_CHARS:
            raise ValueError(
                "Please provide a detailed character backstory (minimum 3-4 sentences)"
            )
        return value

    @field_validator(*_REQUIRED_MESSAGES)
    @classmethod
    def _not_blank(cls, value: str, info) -> str:
        if not value.strip():
            raise ValueError(_REQUIRED_MESSAGES[info.field_name])
        return value

    @field_validator("content_creation", "previous_servers", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("rules_read", "cfx_linked", mode="before")
    @classmethod
    def _none_to_false(cls, value: Any) -> Any:
        return False if value is None else value


_ALIASES = {
    (field.alias or name): name for name, field in _SubmissionForm.model_fields.items()
}


def _field_name(loc: tuple[Any, ...]) -> str:
    if not loc:
        return "__root__"
    head = str(loc[0])
    return _ALIASES.get(head, head)


def _message(error: dict[str, Any]) -> str:
    if error["type"] == "missing":
        name = _field_name(error["loc"])
        return _REQUIRED_MESSAGES.get(name, "This field is required")
    message = str(error["msg"])
    # pydantic prefixes messages raised from validators
    return message.removeprefix("Value error, ")


def validate_submission(payload: Mapping[str, Any]) -> ApplicationSubmission:
    """Validate ``payload`` and return the canonical submission.

    Raises
    ------
    ValidationError
        Listing every violated field, in field order.

    """
    if not isinstance(payload, Mapping):
        raise ValidationError([FieldError("__root__", "Submission must be an object")])
    try:
        form = _SubmissionForm.model_validate(dict(payload))
    except PydanticValidationError as exc:
        errors = [FieldError(_field_name(e["loc"]), _message(e)) for e in exc.errors()]
        raise ValidationError(errors) from None
    return ApplicationSubmission(**form.model_dump())
