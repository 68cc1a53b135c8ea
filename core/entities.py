"""Client-side entity collections: API first, local store as fallback.

Each collection keeps an in-memory list of one entity type. Every
operation first tries the REST API (when a client and user are set) and
falls back to the local store when the request fails. Whichever path
succeeds, the resulting list is mirrored to the local store, so the store
always holds the last known state. The API is the source of truth when
reachable; there is no conflict resolution between the two.

Payloads use the camelCase wire format (``subjectId``, ``dueDate``...).
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, ClassVar, Generic, TypeVar

import httpx

from core.errors import NotFoundError, StudyDeskError, ValidationError
from core.local_store import LocalStore
from core.models import StudySession, StudyTimeRecord, Subject, Task, User
from core.pomodoro import Notifier, logging_notifier
from core.validation import (
    validate_study_session,
    validate_study_time_record,
    validate_subject,
    validate_task,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", Subject, Task, StudySession, StudyTimeRecord)

DEFAULT_USER = User(
    id=1,
    username="john_student",
    password="password123",
    first_name="John",
    last_name="Student",
    email="john@example.com",
)


def load_user(store: LocalStore) -> User:
    """Current user from the local store, seeding the demo user on first run."""
    data = store.get("user")
    if data is None:
        store.save("user", DEFAULT_USER.to_dict())
        return User.from_dict(DEFAULT_USER.to_dict())
    return User.from_dict(data)


class EntityCollection(Generic[E]):
    entity_name: ClassVar[str] = "item"
    api_path: ClassVar[str] = ""
    storage_key: ClassVar[str] = ""
    append_only: ClassVar[bool] = False
    model: Callable[[dict[str, Any]], E]
    validator: Callable[..., list[str]]

    def __init__(
        self,
        store: LocalStore,
        client: httpx.Client | None = None,
        user_id: int | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.store = store
        self.client = client
        self.user_id = user_id
        self.notifier: Notifier = notifier or logging_notifier
        self.items: list[E] = []
        self.is_loading = True

    def initial_items(self) -> list[E]:
        return []

    # ── Helpers ───────────────────────────────────────────────

    def _from_dict(self, d: dict[str, Any]) -> E:
        return type(self).model(d)

    def _validate(self, payload: dict[str, Any], partial: bool = False) -> list[str]:
        return type(self).validator(payload, partial=partial)

    @property
    def api_available(self) -> bool:
        return self.client is not None and bool(self.user_id)

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if self.client is None:
            raise StudyDeskError(f"No API client configured for {self.entity_name} requests")
        response = self.client.request(method, url, **kwargs)
        response.raise_for_status()
        return response

    def _persist(self) -> None:
        self.store.save(self.storage_key, [item.to_dict() for item in self.items])

    def _index_of(self, item_id: int) -> int | None:
        for i, item in enumerate(self.items):
            if item.id == item_id:
                return i
        return None

    def get(self, item_id: int) -> E | None:
        idx = self._index_of(item_id)
        return None if idx is None else self.items[idx]

    def _fail(self, action: str) -> None:
        self.notifier("Error", f"Failed to {action} {self.entity_name}")

    # ── Operations ────────────────────────────────────────────

    def load(self) -> list[E]:
        """Fetch the list from the API, else from the local store."""
        self.is_loading = True
        try:
            if self.api_available:
                try:
                    response = self._request("GET", self.api_path, params={"userId": self.user_id})
                    self.items = [self._from_dict(d) for d in response.json()]
                    self._persist()
                    return self.items
                except (httpx.HTTPError, ValueError) as e:
                    logger.error("Failed to fetch %s from API: %s", self.storage_key, e)

            stored = self.store.get(self.storage_key)
            if stored is None:
                self.items = self.initial_items()
                self._persist()
            else:
                try:
                    self.items = [self._from_dict(d) for d in stored]
                except (TypeError, ValueError, AttributeError) as e:
                    logger.error("Error loading %s: %s", self.storage_key, e)
                    self.notifier("Error", f"Failed to load {self.entity_name} data")
                    self.items = []
        finally:
            self.is_loading = False
        return self.items

    def add(self, data: dict[str, Any]) -> E:
        """Create an item. Raises ValidationError on a bad payload."""
        payload = dict(data)
        if self.user_id and "userId" not in payload:
            payload["userId"] = self.user_id
        errors = self._validate(payload)
        if errors:
            self._fail("add new")
            raise ValidationError(errors)

        if self.api_available:
            try:
                created = self._from_dict(self._request("POST", self.api_path, json=payload).json())
                self.items.append(created)
                self._persist()
                return created
            except (httpx.HTTPError, ValueError) as e:
                logger.error("Failed to add %s via API: %s", self.entity_name, e)

        new_id = max((item.id for item in self.items), default=0) + 1
        created = self._from_dict({**payload, "id": new_id})
        self.items.append(created)
        self._persist()
        return created

    def update(self, item_id: int, changes: dict[str, Any]) -> E:
        """Merge *changes* into an item. Raises NotFoundError / ValidationError."""
        if self.append_only:
            raise StudyDeskError(f"{self.entity_name} entries cannot be updated")
        errors = self._validate(changes, partial=True)
        if errors:
            self._fail("update")
            raise ValidationError(errors)

        if self.api_available:
            try:
                response = self._request("PUT", f"{self.api_path}/{item_id}", json=changes)
                updated = self._from_dict(response.json())
                idx = self._index_of(item_id)
                if idx is not None:
                    self.items[idx] = updated
                    self._persist()
                return updated
            except (httpx.HTTPError, ValueError) as e:
                logger.error("Failed to update %s via API: %s", self.entity_name, e)

        idx = self._index_of(item_id)
        if idx is None:
            self._fail("update")
            raise NotFoundError(self.entity_name.capitalize(), item_id)
        updated = self._from_dict({**self.items[idx].to_dict(), **changes, "id": item_id})
        self.items[idx] = updated
        self._persist()
        return updated

    def delete(self, item_id: int) -> bool:
        """Remove an item; unknown ids are ignored."""
        if self.append_only:
            raise StudyDeskError(f"{self.entity_name} entries cannot be deleted")
        if self.api_available:
            try:
                self._request("DELETE", f"{self.api_path}/{item_id}")
            except httpx.HTTPError as e:
                logger.error("Failed to delete %s via API: %s", self.entity_name, e)

        self.items = [item for item in self.items if item.id != item_id]
        self._persist()
        return True


class SubjectCollection(EntityCollection[Subject]):
    entity_name = "subject"
    api_path = "/api/subjects"
    storage_key = "subjects"
    model = Subject.from_dict
    validator = validate_subject

    def initial_items(self) -> list[Subject]:
        return [
            Subject(1, 1, "Calculus", "blue", "Calculus and advanced mathematics"),
            Subject(2, 1, "Physics", "purple", "Physics and mechanics"),
            Subject(3, 1, "Biology", "green", "Biology and life sciences"),
        ]


class TaskCollection(EntityCollection[Task]):
    entity_name = "task"
    api_path = "/api/tasks"
    storage_key = "tasks"
    model = Task.from_dict
    validator = validate_task

    def get_subject_for_task(self, task_id: int, subjects: list[Subject]) -> Subject:
        """Subject of a task, or an 'Unknown' placeholder."""
        unknown = Subject(id=0, user_id=self.user_id or 0, name="Unknown", color="gray", description="")
        task = self.get(task_id)
        if task is None:
            return unknown
        for subject in subjects:
            if subject.id == task.subject_id:
                return subject
        return unknown


class ScheduleCollection(EntityCollection[StudySession]):
    entity_name = "study session"
    api_path = "/api/study-sessions"
    storage_key = "studySessions"
    model = StudySession.from_dict
    validator = validate_study_session

    def sessions_by_date(self, day: str) -> list[StudySession]:
        return [s for s in self.items if s.date == day]

    def today_sessions(self, today: date) -> list[StudySession]:
        return self.sessions_by_date(today.isoformat())

    @staticmethod
    def upcoming_deadlines(tasks: list[Task], limit: int = 3) -> list[Task]:
        """The *limit* open tasks with the closest due dates."""
        pending = [t for t in tasks if not t.completed]
        return sorted(pending, key=lambda t: t.due_date)[:limit]

    def start_study_session(self) -> None:
        self.notifier("Study Session Started", "Timer is ready for your focus session")


class StudyRecordCollection(EntityCollection[StudyTimeRecord]):
    entity_name = "study time record"
    api_path = "/api/study-time-records"
    storage_key = "studyTimeRecords"
    append_only = True
    model = StudyTimeRecord.from_dict
    validator = validate_study_time_record

    def records_in_range(self, start: str, end: str) -> list[StudyTimeRecord]:
        return [r for r in self.items if start <= r.date <= end]
