"""In-memory entity store behind the REST API.

One dict per entity type, keyed by auto-incrementing integer ids that are
never reused. Updates are shallow merges of the given fields.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

from core.models import StudySession, StudyTimeRecord, Subject, Task, User

T = TypeVar("T", Subject, Task, StudySession, StudyTimeRecord, User)


class _Table(Generic[T]):
    def __init__(self, factory: Callable[[dict[str, Any]], T]) -> None:
        self._factory = factory
        self._rows: dict[int, T] = {}
        self._next_id = 1

    def all(self) -> list[T]:
        return list(self._rows.values())

    def get(self, row_id: int) -> T | None:
        return self._rows.get(row_id)

    def create(self, data: dict[str, Any]) -> T:
        row_id = self._next_id
        self._next_id += 1
        row = self._factory({**data, "id": row_id})
        self._rows[row_id] = row
        return row

    def update(self, row_id: int, changes: dict[str, Any]) -> T | None:
        existing = self._rows.get(row_id)
        if existing is None:
            return None
        merged = {**existing.to_dict(), **changes, "id": row_id}
        updated = self._factory(merged)
        self._rows[row_id] = updated
        return updated

    def delete(self, row_id: int) -> bool:
        return self._rows.pop(row_id, None) is not None


class MemStorage:
    def __init__(self) -> None:
        self.users: _Table[User] = _Table(User.from_dict)
        self.subjects: _Table[Subject] = _Table(Subject.from_dict)
        self.tasks: _Table[Task] = _Table(Task.from_dict)
        self.study_sessions: _Table[StudySession] = _Table(StudySession.from_dict)
        self.study_time_records: _Table[StudyTimeRecord] = _Table(StudyTimeRecord.from_dict)

    # ── Users ─────────────────────────────────────────────────

    def get_user(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        for user in self.users.all():
            if user.username == username:
                return user
        return None

    def create_user(self, data: dict[str, Any]) -> User:
        return self.users.create(data)

    # ── Subjects ──────────────────────────────────────────────

    def get_subjects(self, user_id: int) -> list[Subject]:
        return [s for s in self.subjects.all() if s.user_id == user_id]

    def get_subject(self, subject_id: int) -> Subject | None:
        return self.subjects.get(subject_id)

    def create_subject(self, data: dict[str, Any]) -> Subject:
        return self.subjects.create(data)

    def update_subject(self, subject_id: int, changes: dict[str, Any]) -> Subject | None:
        return self.subjects.update(subject_id, changes)

    def delete_subject(self, subject_id: int) -> bool:
        return self.subjects.delete(subject_id)

    # ── Tasks ─────────────────────────────────────────────────

    def get_tasks(self, user_id: int) -> list[Task]:
        return [t for t in self.tasks.all() if t.user_id == user_id]

    def get_task(self, task_id: int) -> Task | None:
        return self.tasks.get(task_id)

    def create_task(self, data: dict[str, Any]) -> Task:
        return self.tasks.create(data)

    def update_task(self, task_id: int, changes: dict[str, Any]) -> Task | None:
        return self.tasks.update(task_id, changes)

    def delete_task(self, task_id: int) -> bool:
        return self.tasks.delete(task_id)

    # ── Study sessions ────────────────────────────────────────

    def get_study_sessions(self, user_id: int) -> list[StudySession]:
        return [s for s in self.study_sessions.all() if s.user_id == user_id]

    def get_study_session(self, session_id: int) -> StudySession | None:
        return self.study_sessions.get(session_id)

    def create_study_session(self, data: dict[str, Any]) -> StudySession:
        return self.study_sessions.create(data)

    def update_study_session(self, session_id: int, changes: dict[str, Any]) -> StudySession | None:
        return self.study_sessions.update(session_id, changes)

    def delete_study_session(self, session_id: int) -> bool:
        return self.study_sessions.delete(session_id)

    # ── Study time records ────────────────────────────────────

    def get_study_time_records(self, user_id: int) -> list[StudyTimeRecord]:
        return [r for r in self.study_time_records.all() if r.user_id == user_id]

    def create_study_time_record(self, data: dict[str, Any]) -> StudyTimeRecord:
        return self.study_time_records.create(data)

    def get_study_time_records_by_date_range(
        self, user_id: int, start_date: str, end_date: str
    ) -> list[StudyTimeRecord]:
        """Records for *user_id* with start_date <= date <= end_date (ISO strings)."""
        return [
            r
            for r in self.study_time_records.all()
            if r.user_id == user_id and start_date <= r.date <= end_date
        ]
