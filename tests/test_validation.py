"""Tests for core/validation.py — payload checks."""

from core.validation import (
    validate_study_session,
    validate_study_time_record,
    validate_subject,
    validate_task,
    validate_timer_settings,
    validate_user,
)


def _task(**overrides):
    payload = {"userId": 1, "subjectId": 1, "title": "Essay", "priority": "high", "dueDate": "2026-10-25"}
    payload.update(overrides)
    return payload


def test_validate_user_missing_fields():
    errors = validate_user({"username": "amy"})
    assert any("password" in e for e in errors)
    assert any("email" in e for e in errors)


def test_validate_user_bad_email():
    errors = validate_user(
        {"username": "a", "password": "p", "firstName": "A", "lastName": "B", "email": "nope"}
    )
    assert errors == ["email must be a valid address"]


def test_validate_subject():
    assert validate_subject({"userId": 1, "name": "Math", "color": "blue"}) == []
    assert any("name" in e for e in validate_subject({"userId": 1, "color": "blue"}))
    assert any("userId" in e for e in validate_subject({"userId": "one", "name": "x", "color": "y"}))


def test_validate_task_valid():
    assert validate_task(_task()) == []


def test_validate_task_invalid_priority():
    assert any("priority" in e for e in validate_task(_task(priority="urgent")))


def test_validate_task_bad_due_date():
    assert any("dueDate" in e for e in validate_task(_task(dueDate="next week")))


def test_validate_task_partial_update():
    assert validate_task({"completed": True}, partial=True) == []
    assert validate_task({"completed": "yes"}, partial=True) == ["completed must be a boolean"]


def test_validate_study_session_times():
    payload = {"userId": 1, "subjectId": 1, "title": "Lab", "startTime": "9:00", "endTime": "24:00", "date": "2026-10-19"}
    errors = validate_study_session(payload)
    assert "startTime must be HH:MM" in errors
    assert "endTime must be HH:MM" in errors


def test_validate_study_time_record():
    ok = {"userId": 1, "subjectId": 1, "date": "2026-10-19", "duration": 25, "focusScore": 90}
    assert validate_study_time_record(ok) == []
    assert any("focusScore" in e for e in validate_study_time_record({**ok, "focusScore": 120}))
    assert any("duration" in e for e in validate_study_time_record({**ok, "duration": -1}))
    assert any("duration" in e for e in validate_study_time_record({**ok, "duration": True}))


def test_validate_timer_settings():
    assert validate_timer_settings({"focusDuration": 30, "short_break_minutes": 5}) == []
    assert validate_timer_settings({"focusDuration": 0}) == ["focusDuration must be a positive integer"]
    assert validate_timer_settings({"focusDuration": 2.5}) == ["focusDuration must be a positive integer"]
    assert validate_timer_settings({"snooze": 5}) == ["Unknown setting: snooze"]
