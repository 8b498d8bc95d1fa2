"""Test configuration: package imports and shared fixtures."""

from __future__ import annotations

import os
import sys

import pytest

# Add the repository root (the directory containing this file) to ``sys.path``
# so ``whitelist_bot`` imports without an editable install.
ROOT_DIR = os.path.abspath(os.path.dirname(__file__))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from whitelist_bot.adapters.base import NotificationSink  # noqa: E402
from whitelist_bot.core.engine import LifecycleEngine  # noqa: E402
from whitelist_bot.core.models import Identity  # noqa: E402
from whitelist_bot.core.storage import InMemoryApplicationStore  # noqa: E402


def _words(count: int, word: str = "roleplay") -> str:
    return " ".join([word] * count)


def _make_payload(**overrides) -> dict:
    payload = {
        "discordId": "781463891985669475",
        "steamId": "110000146218998",
        "aboutYourself": _words(60, "about"),
        "rpExperience": _words(55, "experience"),
        "characterName": "Tommy Vercetti",
        "characterAge": "34",
        "characterNationality": "American",
        "characterBackstory": "x" * 120,
    }
    payload.update(overrides)
    return payload


class RecordingNotifier(NotificationSink):
    """Notification sink that remembers every call and can be told to fail."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.reviews: list[tuple] = []
        self.submissions: list = []

    async def notify(self, application, reviewer_display_name, outcome) -> None:
        self.reviews.append((application, reviewer_display_name, outcome))
        if self.fail:
            raise RuntimeError("discord is down")

    async def notify_submitted(self, application) -> None:
        self.submissions.append(application)
        if self.fail:
            raise RuntimeError("discord is down")


@pytest.fixture()
def words():
    return _words


@pytest.fixture()
def make_payload():
    return _make_payload


@pytest.fixture()
def payload() -> dict:
    return _make_payload()


@pytest.fixture()
def applicant() -> Identity:
    return Identity(id="1001", username="tommy", display_name="Tommy")


@pytest.fixture()
def admin() -> Identity:
    return Identity(id="9001", username="ken", display_name="Ken Rosenberg", is_admin=True)


@pytest.fixture()
def other_admin() -> Identity:
    return Identity(id="9002", username="lance", display_name="Lance Vance", is_admin=True)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def failing_notifier() -> RecordingNotifier:
    return RecordingNotifier(fail=True)


@pytest.fixture()
def store() -> InMemoryApplicationStore:
    return InMemoryApplicationStore()


@pytest.fixture()
def engine(store, notifier) -> LifecycleEngine:
    return LifecycleEngine(store, notifier)
