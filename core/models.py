"""Typed dataclasses for the StudyDesk data model.

All models use from_dict/to_dict for JSON serialization.
camelCase in JSON is mapped to snake_case in Python; from_dict accepts
either spelling. Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def _get(d: dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    return d.get(camel, d.get(snake, default))


def _opt_int(value: Any) -> int | None:
    return None if value is None else int(value)


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)


# ── Pomodoro ──────────────────────────────────────────────────


class TimerMode(str, Enum):
    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"

    @property
    def label(self) -> str:
        return {
            TimerMode.FOCUS: "Focus",
            TimerMode.SHORT_BREAK: "Short Break",
            TimerMode.LONG_BREAK: "Long Break",
        }[self]


@dataclass
class TimerSettings:
    """Durations in minutes plus the long-break threshold."""

    focus_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    sessions_before_long_break: int = 4

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TimerSettings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            focus_minutes=int(_get(d, "focusDuration", "focus_minutes", 25)),
            short_break_minutes=int(_get(d, "shortBreakDuration", "short_break_minutes", 5)),
            long_break_minutes=int(_get(d, "longBreakDuration", "long_break_minutes", 15)),
            sessions_before_long_break=int(
                _get(d, "sessionsBeforeLongBreak", "sessions_before_long_break", 4)
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "focusDuration": self.focus_minutes,
            "shortBreakDuration": self.short_break_minutes,
            "longBreakDuration": self.long_break_minutes,
            "sessionsBeforeLongBreak": self.sessions_before_long_break,
        }

    def merged(self, changes: dict[str, Any]) -> TimerSettings:
        """Return a copy with *changes* (camelCase or snake_case) applied."""
        d = self.to_dict()
        for key, value in (changes or {}).items():
            d[_SETTINGS_KEYS.get(key, key)] = value
        return TimerSettings.from_dict(d)

    def duration_seconds(self, mode: TimerMode) -> int:
        minutes = {
            TimerMode.FOCUS: self.focus_minutes,
            TimerMode.SHORT_BREAK: self.short_break_minutes,
            TimerMode.LONG_BREAK: self.long_break_minutes,
        }[mode]
        return minutes * 60


_SETTINGS_KEYS = {
    "focus_minutes": "focusDuration",
    "short_break_minutes": "shortBreakDuration",
    "long_break_minutes": "longBreakDuration",
    "sessions_before_long_break": "sessionsBeforeLongBreak",
}


@dataclass
class TimerSession:
    mode: TimerMode = TimerMode.FOCUS
    seconds_remaining: int = 25 * 60
    is_running: bool = False
    completed_focus_count: int = 0
    total_focus_minutes: int = 0
    progress: float = 100.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "secondsRemaining": self.seconds_remaining,
            "isRunning": self.is_running,
            "completedFocusCount": self.completed_focus_count,
            "totalFocusMinutes": self.total_focus_minutes,
            "progress": round(self.progress, 2),
        }


# ── Study entities ────────────────────────────────────────────


@dataclass
class User:
    id: int = 0
    username: str = ""
    password: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> User:
        return cls(
            id=int(d.get("id", 0)),
            username=str(d.get("username", "")),
            password=str(d.get("password", "")),
            first_name=str(_get(d, "firstName", "first_name", "")),
            last_name=str(_get(d, "lastName", "last_name", "")),
            email=str(d.get("email", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "password": self.password,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
        }


@dataclass
class Subject:
    id: int = 0
    user_id: int = 0
    name: str = ""
    color: str = ""
    description: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Subject:
        return cls(
            id=int(d.get("id", 0)),
            user_id=int(_get(d, "userId", "user_id", 0)),
            name=str(d.get("name", "")),
            color=str(d.get("color", "")),
            description=_opt_str(d.get("description")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "color": self.color,
            "description": self.description,
        }


@dataclass
class Task:
    id: int = 0
    user_id: int = 0
    subject_id: int = 0
    title: str = ""
    description: str | None = None
    priority: str = "medium"  # high, medium, low
    due_date: str = ""  # ISO date
    estimated_time: int | None = None  # minutes
    completed: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Task:
        return cls(
            id=int(d.get("id", 0)),
            user_id=int(_get(d, "userId", "user_id", 0)),
            subject_id=int(_get(d, "subjectId", "subject_id", 0)),
            title=str(d.get("title", "")),
            description=_opt_str(d.get("description")),
            priority=str(d.get("priority", "medium")),
            due_date=str(_get(d, "dueDate", "due_date", "")),
            estimated_time=_opt_int(_get(d, "estimatedTime", "estimated_time")),
            completed=bool(d.get("completed", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "subjectId": self.subject_id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "dueDate": self.due_date,
            "estimatedTime": self.estimated_time,
            "completed": self.completed,
        }


@dataclass
class StudySession:
    id: int = 0
    user_id: int = 0
    subject_id: int = 0
    title: str = ""
    description: str | None = None
    location: str | None = None
    start_time: str = ""  # HH:MM
    end_time: str = ""  # HH:MM
    date: str = ""  # ISO date
    completed: bool = False
    participants: int | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> StudySession:
        return cls(
            id=int(d.get("id", 0)),
            user_id=int(_get(d, "userId", "user_id", 0)),
            subject_id=int(_get(d, "subjectId", "subject_id", 0)),
            title=str(d.get("title", "")),
            description=_opt_str(d.get("description")),
            location=_opt_str(d.get("location")),
            start_time=str(_get(d, "startTime", "start_time", "")),
            end_time=str(_get(d, "endTime", "end_time", "")),
            date=str(d.get("date", "")),
            completed=bool(d.get("completed", False)),
            participants=_opt_int(d.get("participants")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "subjectId": self.subject_id,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "date": self.date,
            "completed": self.completed,
            "participants": self.participants,
        }


@dataclass
class StudyTimeRecord:
    id: int = 0
    user_id: int = 0
    subject_id: int = 0
    task_id: int | None = None
    date: str = ""  # ISO date
    duration: int = 0  # minutes
    focus_score: int | None = None  # 0-100

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> StudyTimeRecord:
        return cls(
            id=int(d.get("id", 0)),
            user_id=int(_get(d, "userId", "user_id", 0)),
            subject_id=int(_get(d, "subjectId", "subject_id", 0)),
            task_id=_opt_int(_get(d, "taskId", "task_id")),
            date=str(d.get("date", "")),
            duration=int(d.get("duration", 0)),
            focus_score=_opt_int(_get(d, "focusScore", "focus_score")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "subjectId": self.subject_id,
            "taskId": self.task_id,
            "date": self.date,
            "duration": self.duration,
            "focusScore": self.focus_score,
        }


# ── Stats ─────────────────────────────────────────────────────


@dataclass
class StatsSummary:
    today_study_time: str = "0m"
    tasks_completed: str = "0/0"
    streak: int = 0
    focus_score: str = "N/A"
    weekly_task_completion: dict[str, int] = field(default_factory=dict)
    subject_distribution: dict[int, int] = field(default_factory=dict)
    week_start: str = ""
    week_end: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "todayStudyTime": self.today_study_time,
            "tasksCompleted": self.tasks_completed,
            "streak": self.streak,
            "focusScore": self.focus_score,
            "weeklyTaskCompletion": self.weekly_task_completion,
            "subjectDistribution": {str(k): v for k, v in self.subject_distribution.items()},
            "weekStartDate": self.week_start,
            "weekEndDate": self.week_end,
        }
