"""Tests for ui/app.py — REST API over MemStorage."""

import pytest
from fastapi.testclient import TestClient

from core.storage import MemStorage
from ui.app import app, get_storage


@pytest.fixture
def storage():
    return MemStorage()


@pytest.fixture
def client(storage):
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


USER = {
    "username": "john_student",
    "password": "password123",
    "firstName": "John",
    "lastName": "Student",
    "email": "john@example.com",
}


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": "true"}


def test_create_and_get_user(client):
    r = client.post("/api/users", json=USER)
    assert r.status_code == 201
    user = r.json()
    assert user["id"] == 1
    r = client.get("/api/users/1")
    assert r.status_code == 200
    assert r.json()["username"] == "john_student"


def test_duplicate_username(client):
    client.post("/api/users", json=USER)
    r = client.post("/api/users", json=USER)
    assert r.status_code == 409
    assert r.json() == {"message": "Username already exists"}


def test_invalid_user_payload(client):
    r = client.post("/api/users", json={"username": "x"})
    assert r.status_code == 400
    assert "password" in r.json()["message"]


def test_user_not_found(client):
    r = client.get("/api/users/99")
    assert r.status_code == 404
    assert r.json() == {"message": "User not found"}


def test_non_numeric_path_id(client):
    r = client.get("/api/users/abc")
    assert r.status_code == 400
    assert "message" in r.json()


def test_list_requires_numeric_user_id(client):
    assert client.get("/api/subjects").json() == {"message": "Invalid user ID"}
    r = client.get("/api/tasks", params={"userId": "abc"})
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid user ID"}


def test_user_id_leading_digits_accepted(client):
    client.post("/api/subjects", json={"userId": 12, "name": "Calculus", "color": "blue"})
    r = client.get("/api/subjects", params={"userId": "12abc"})
    assert r.status_code == 200
    assert [s["name"] for s in r.json()] == ["Calculus"]


def test_subject_crud(client):
    r = client.post("/api/subjects", json={"userId": 1, "name": "Calculus", "color": "blue"})
    assert r.status_code == 201
    subject_id = r.json()["id"]
    client.post("/api/subjects", json={"userId": 2, "name": "Art", "color": "red"})

    listed = client.get("/api/subjects", params={"userId": 1}).json()
    assert [s["name"] for s in listed] == ["Calculus"]

    r = client.put(f"/api/subjects/{subject_id}", json={"color": "green"})
    assert r.status_code == 200
    assert r.json()["color"] == "green"
    assert r.json()["name"] == "Calculus"

    assert client.delete(f"/api/subjects/{subject_id}").status_code == 204
    r = client.delete(f"/api/subjects/{subject_id}")
    assert r.status_code == 404
    assert r.json() == {"message": "Subject not found"}


def test_update_missing_subject(client):
    r = client.put("/api/subjects/42", json={"name": "x"})
    assert r.status_code == 404


def test_task_validation_and_update(client):
    bad = {"userId": 1, "subjectId": 1, "title": "Essay", "priority": "urgent", "dueDate": "2026-10-25"}
    r = client.post("/api/tasks", json=bad)
    assert r.status_code == 400
    assert "priority" in r.json()["message"]

    r = client.post("/api/tasks", json={**bad, "priority": "high"})
    assert r.status_code == 201
    r = client.put(f"/api/tasks/{r.json()['id']}", json={"completed": True})
    assert r.json()["completed"] is True
    assert client.put("/api/tasks/99", json={"completed": True}).json() == {"message": "Task not found"}


def test_study_session_crud(client):
    payload = {
        "userId": 1,
        "subjectId": 1,
        "title": "Group study",
        "startTime": "14:00",
        "endTime": "15:30",
        "date": "2026-10-19",
    }
    r = client.post("/api/study-sessions", json=payload)
    assert r.status_code == 201
    session_id = r.json()["id"]
    assert client.put(f"/api/study-sessions/{session_id}", json={"startTime": "25:00"}).status_code == 400
    assert client.delete(f"/api/study-sessions/{session_id}").status_code == 204
    r = client.delete(f"/api/study-sessions/{session_id}")
    assert r.json() == {"message": "Study session not found"}


def test_study_time_records_date_range(client):
    for day in ("2026-10-10", "2026-10-19", "2026-10-30"):
        r = client.post("/api/study-time-records", json={"userId": 1, "subjectId": 1, "date": day, "duration": 25})
        assert r.status_code == 201
    all_records = client.get("/api/study-time-records", params={"userId": 1}).json()
    assert len(all_records) == 3
    ranged = client.get(
        "/api/study-time-records",
        params={"userId": 1, "startDate": "2026-10-15", "endDate": "2026-10-20"},
    ).json()
    assert [r["date"] for r in ranged] == ["2026-10-19"]
    only_start = client.get("/api/study-time-records", params={"userId": 1, "startDate": "2026-10-15"}).json()
    assert len(only_start) == 3


def test_stats(client, storage):
    storage.create_task({"userId": 1, "subjectId": 1, "title": "T", "dueDate": "2026-10-20", "completed": True})
    storage.create_task({"userId": 1, "subjectId": 1, "title": "U", "dueDate": "2026-10-21"})
    r = client.get("/api/stats", params={"userId": 1})
    assert r.status_code == 200
    body = r.json()
    assert body["tasksCompleted"] == "1/2"
    assert body["focusScore"] == "N/A"
    assert body["streak"] == 0
