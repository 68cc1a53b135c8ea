"""Payload validation for StudyDesk entities and timer settings.

Each validator returns a list of errors (empty if valid). With
``partial=True`` only the keys present in the payload are checked, which
is what update endpoints need.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any

VALID_PRIORITIES = {"high", "medium", "low"}
SETTINGS_FIELDS = {
    "focusDuration",
    "shortBreakDuration",
    "longBreakDuration",
    "sessionsBeforeLongBreak",
    "focus_minutes",
    "short_break_minutes",
    "long_break_minutes",
    "sessions_before_long_break",
}

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_required(payload: dict[str, Any], fields: tuple[str, ...], partial: bool) -> list[str]:
    if partial:
        return []
    return [f"Missing required field: {f}" for f in fields if payload.get(f) in (None, "")]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_ints(payload: dict[str, Any], fields: tuple[str, ...]) -> list[str]:
    errors = []
    for f in fields:
        if f in payload and payload[f] is not None and not _is_int(payload[f]):
            errors.append(f"{f} must be an integer")
    return errors


def _check_iso_date(payload: dict[str, Any], field: str) -> list[str]:
    value = payload.get(field)
    if value in (None, ""):
        return []
    try:
        date.fromisoformat(str(value))
    except ValueError:
        return [f"{field} must be an ISO date (YYYY-MM-DD)"]
    return []


def validate_user(payload: dict[str, Any], partial: bool = False) -> list[str]:
    errors = _check_required(
        payload, ("username", "password", "firstName", "lastName", "email"), partial
    )
    email = payload.get("email")
    if email and "@" not in str(email):
        errors.append("email must be a valid address")
    return errors


def validate_subject(payload: dict[str, Any], partial: bool = False) -> list[str]:
    errors = _check_required(payload, ("userId", "name", "color"), partial)
    errors += _check_ints(payload, ("userId",))
    return errors


def validate_task(payload: dict[str, Any], partial: bool = False) -> list[str]:
    errors = _check_required(payload, ("userId", "subjectId", "title", "priority", "dueDate"), partial)
    errors += _check_ints(payload, ("userId", "subjectId", "estimatedTime"))
    if "priority" in payload and payload["priority"] is not None:
        if payload["priority"] not in VALID_PRIORITIES:
            errors.append(f"Invalid priority: {payload['priority']}")
    errors += _check_iso_date(payload, "dueDate")
    if "completed" in payload and not isinstance(payload["completed"], bool):
        errors.append("completed must be a boolean")
    return errors


def validate_study_session(payload: dict[str, Any], partial: bool = False) -> list[str]:
    errors = _check_required(
        payload, ("userId", "subjectId", "title", "startTime", "endTime", "date"), partial
    )
    errors += _check_ints(payload, ("userId", "subjectId", "participants"))
    for f in ("startTime", "endTime"):
        value = payload.get(f)
        if value not in (None, "") and not _TIME_RE.match(str(value)):
            errors.append(f"{f} must be HH:MM")
    errors += _check_iso_date(payload, "date")
    if "completed" in payload and not isinstance(payload["completed"], bool):
        errors.append("completed must be a boolean")
    return errors


def validate_study_time_record(payload: dict[str, Any], partial: bool = False) -> list[str]:
    errors = _check_required(payload, ("userId", "subjectId", "date", "duration"), partial)
    errors += _check_ints(payload, ("userId", "subjectId", "taskId", "duration", "focusScore"))
    errors += _check_iso_date(payload, "date")
    score = payload.get("focusScore")
    if _is_int(score) and not 0 <= score <= 100:
        errors.append("focusScore must be between 0 and 100")
    duration = payload.get("duration")
    if _is_int(duration) and duration < 0:
        errors.append("duration must not be negative")
    return errors


def validate_timer_settings(payload: dict[str, Any]) -> list[str]:
    """Check a (partial) settings payload: every given value a positive integer."""
    errors = []
    for key, value in payload.items():
        if key not in SETTINGS_FIELDS:
            errors.append(f"Unknown setting: {key}")
        elif not _is_int(value) or value <= 0:
            errors.append(f"{key} must be a positive integer")
    return errors
