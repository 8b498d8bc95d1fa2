"""Application repositories: an in-memory store and a JSON-file backed one."""

from __future__ import annotations

import datetime
import json
import os
import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import UTC
from pathlib import Path
from typing import Any

from .errors import StaleStatusError
from .models import (
    REVIEW_FIELDS,
    Application,
    ApplicationStatus,
    ApplicationSubmission,
    Identity,
)


class ApplicationRepository(ABC):
    """Storage contract the lifecycle engine depends on."""

    @abstractmethod
    def create(
        self, submission: ApplicationSubmission, applicant: Identity
    ) -> Application:
        """Store a new ``pending`` application and return it."""

    @abstractmethod
    def get(self, application_id: str) -> Application | None:
        """Return the application with ``application_id`` if it exists."""

    @abstractmethod
    def list(self) -> list[Application]:
        """Return all applications in insertion order."""

    @abstractmethod
    def list_by_status(self, status: ApplicationStatus) -> list[Application]:
        """Return applications whose status equals ``status``."""

    @abstractmethod
    def update(
        self,
        application_id: str,
        changes: Mapping[str, Any],
        *,
        expected_status: ApplicationStatus | None = None,
    ) -> Application | None:
        """Merge review ``changes`` into a stored application.

        When ``expected_status`` is given the write only happens if the stored
        status still equals it; otherwise :class:`StaleStatusError` is raised
        with the current record. Returns ``None`` for unknown ids.
        """

    @abstractmethod
    def delete(self, application_id: str) -> bool:
        """Remove an application. ``True`` if something was removed."""


class InMemoryApplicationStore(ApplicationRepository):
    """Volatile store keyed by application id.

    A single re-entrant lock guards every read and write so the compare-and-swap
    in :meth:`update` is atomic for callers on any thread.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._applications: dict[str, Application] = {}

    # ------------------------------------------------------------------
    # Hooks for subclasses
    def _persist(self, applications: dict[str, Application]) -> None:
        """Called with the lock held before a mutation takes effect.

        ``applications`` is the complete next state. If this raises, the
        mutation is abandoned and the current state stays as it was.
        """

    def _commit(self, applications: dict[str, Application]) -> None:
        self._persist(applications)
        self._applications = applications

    # ------------------------------------------------------------------
    def create(
        self, submission: ApplicationSubmission, applicant: Identity
    ) -> Application:
        application = Application.from_submission(submission, applicant)
        with self._lock:
            self._commit({**self._applications, application.id: application})
        return application

    def get(self, application_id: str) -> Application | None:
        with self._lock:
            return self._applications.get(application_id)

    def list(self) -> list[Application]:
        with self._lock:
            return list(self._applications.values())

    def list_by_status(self, status: ApplicationStatus) -> list[Application]:
        with self._lock:
            return [a for a in self._applications.values() if a.status == status]

    def update(
        self,
        application_id: str,
        changes: Mapping[str, Any],
        *,
        expected_status: ApplicationStatus | None = None,
    ) -> Application | None:
        illegal = set(changes) - REVIEW_FIELDS
        if illegal:
            raise ValueError(f"Immutable fields cannot be updated: {sorted(illegal)}")
        with self._lock:
            current = self._applications.get(application_id)
            if current is None:
                return None
            if expected_status is not None and current.status != expected_status:
                raise StaleStatusError(current)
            # Re-validate so the model invariants hold for the merged record.
            updated = Application.model_validate(
                {**current.model_dump(), **changes}
            )
            self._commit({**self._applications, application_id: updated})
            return updated

    def delete(self, application_id: str) -> bool:
        with self._lock:
            if application_id not in self._applications:
                return False
            self._commit(
                {k: v for k, v in self._applications.items() if k != application_id}
            )
            return True


class JSONApplicationStore(InMemoryApplicationStore):
    """Persist applications to a single JSON file.

    The file is rewritten on every mutation and replaced atomically, which
    keeps the implementation simple while providing durability across process
    restarts.
    """

    def __init__(self, path: Path | str) -> None:
        super().__init__()
        self.path = Path(path)
        if self.path.exists():
            self._load()
        else:
            self._persist(self._applications)

    def _load(self) -> None:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        self._applications = {
            item["id"]: Application.model_validate(item)
            for item in data.get("applications", [])
        }

    def _persist(self, applications: dict[str, Application]) -> None:
        data = {
            "saved_at": datetime.datetime.now(tz=UTC).isoformat(),
            "applications": [a.model_dump(mode="json") for a in applications.values()],
        }
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, self.path)
