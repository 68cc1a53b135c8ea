from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import Body, Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import load_config
from core.logger import setup_logging
from core.stats import compile_stats
from core.storage import MemStorage
from core.validation import (
    validate_study_session,
    validate_study_time_record,
    validate_subject,
    validate_task,
    validate_user,
)
from core.workspace import today_local

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    config = load_config()
    setup_logging(config.log_level, config.log_dir or None)
    logger.info("StudyDesk API starting")
    yield


app = FastAPI(title="StudyDesk API", version="0.1.0", lifespan=lifespan)

_storage = MemStorage()


def get_storage() -> MemStorage:
    return _storage


# ── Error format ──────────────────────────────────────────────
# Clients expect {"message": ...} bodies rather than FastAPI's {"detail": ...}.


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"message": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
    return JSONResponse({"message": "; ".join(messages)}, status_code=status.HTTP_400_BAD_REQUEST)


def _parse_user_id(user_id: str | None) -> int:
    """Leading integer of the query value, so "12abc" reads as 12."""
    match = _LEADING_INT.match(user_id or "")
    if match is None:
        raise HTTPException(status_code=400, detail="Invalid user ID")
    return int(match.group(1))


def _check(errors: list[str]) -> None:
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


# ── Users ─────────────────────────────────────────────────────


@app.post("/api/users", status_code=201)
def api_create_user(payload: dict[str, Any] = Body(...), storage: MemStorage = Depends(get_storage)) -> dict[str, Any]:
    _check(validate_user(payload))
    if storage.get_user_by_username(payload["username"]):
        raise HTTPException(status_code=409, detail="Username already exists")
    user = storage.create_user(payload)
    logger.info("Created user %s (%d)", user.username, user.id)
    return user.to_dict()


@app.get("/api/users/{user_id}")
def api_get_user(user_id: int, storage: MemStorage = Depends(get_storage)) -> dict[str, Any]:
    user = storage.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user.to_dict()


# ── Subjects ──────────────────────────────────────────────────


@app.get("/api/subjects")
def api_list_subjects(userId: str | None = None, storage: MemStorage = Depends(get_storage)) -> list[dict[str, Any]]:
    return [s.to_dict() for s in storage.get_subjects(_parse_user_id(userId))]


@app.post("/api/subjects", status_code=201)
def api_create_subject(payload: dict[str, Any] = Body(...), storage: MemStorage = Depends(get_storage)) -> dict[str, Any]:
    _check(validate_subject(payload))
    return storage.create_subject(payload).to_dict()


@app.put("/api/subjects/{subject_id}")
def api_update_subject(
    subject_id: int, payload: dict[str, Any] = Body(...), storage: MemStorage = Depends(get_storage)
) -> dict[str, Any]:
    _check(validate_subject(payload, partial=True))
    updated = storage.update_subject(subject_id, payload)
    if updated is None:
        raise HTTPException(status_code=404, detail="Subject not found")
    return updated.to_dict()


@app.delete("/api/subjects/{subject_id}", status_code=204)
def api_delete_subject(subject_id: int, storage: MemStorage = Depends(get_storage)) -> Response:
    if not storage.delete_subject(subject_id):
        raise HTTPException(status_code=404, detail="Subject not found")
    return Response(status_code=204)


# ── Tasks ─────────────────────────────────────────────────────


@app.get("/api/tasks")
def api_list_tasks(userId: str | None = None, storage: MemStorage = Depends(get_storage)) -> list[dict[str, Any]]:
    return [t.to_dict() for t in storage.get_tasks(_parse_user_id(userId))]


@app.post("/api/tasks", status_code=201)
def api_create_task(payload: dict[str, Any] = Body(...), storage: MemStorage = Depends(get_storage)) -> dict[str, Any]:
    _check(validate_task(payload))
    return storage.create_task(payload).to_dict()


@app.put("/api/tasks/{task_id}")
def api_update_task(
    task_id: int, payload: dict[str, Any] = Body(...), storage: MemStorage = Depends(get_storage)
) -> dict[str, Any]:
    _check(validate_task(payload, partial=True))
    updated = storage.update_task(task_id, payload)
    if updated is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return updated.to_dict()


@app.delete("/api/tasks/{task_id}", status_code=204)
def api_delete_task(task_id: int, storage: MemStorage = Depends(get_storage)) -> Response:
    if not storage.delete_task(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return Response(status_code=204)


# ── Study sessions ────────────────────────────────────────────


@app.get("/api/study-sessions")
def api_list_study_sessions(userId: str | None = None, storage: MemStorage = Depends(get_storage)) -> list[dict[str, Any]]:
    return [s.to_dict() for s in storage.get_study_sessions(_parse_user_id(userId))]


@app.post("/api/study-sessions", status_code=201)
def api_create_study_session(payload: dict[str, Any] = Body(...), storage: MemStorage = Depends(get_storage)) -> dict[str, Any]:
    _check(validate_study_session(payload))
    return storage.create_study_session(payload).to_dict()


@app.put("/api/study-sessions/{session_id}")
def api_update_study_session(
    session_id: int, payload: dict[str, Any] = Body(...), storage: MemStorage = Depends(get_storage)
) -> dict[str, Any]:
    _check(validate_study_session(payload, partial=True))
    updated = storage.update_study_session(session_id, payload)
    if updated is None:
        raise HTTPException(status_code=404, detail="Study session not found")
    return updated.to_dict()


@app.delete("/api/study-sessions/{session_id}", status_code=204)
def api_delete_study_session(session_id: int, storage: MemStorage = Depends(get_storage)) -> Response:
    if not storage.delete_study_session(session_id):
        raise HTTPException(status_code=404, detail="Study session not found")
    return Response(status_code=204)


# ── Study time records ────────────────────────────────────────


@app.get("/api/study-time-records")
def api_list_study_time_records(
    userId: str | None = None,
    startDate: str | None = None,
    endDate: str | None = None,
    storage: MemStorage = Depends(get_storage),
) -> list[dict[str, Any]]:
    user_id = _parse_user_id(userId)
    if startDate and endDate:
        records = storage.get_study_time_records_by_date_range(user_id, startDate, endDate)
    else:
        records = storage.get_study_time_records(user_id)
    return [r.to_dict() for r in records]


@app.post("/api/study-time-records", status_code=201)
def api_create_study_time_record(payload: dict[str, Any] = Body(...), storage: MemStorage = Depends(get_storage)) -> dict[str, Any]:
    _check(validate_study_time_record(payload))
    return storage.create_study_time_record(payload).to_dict()


# ── Stats ─────────────────────────────────────────────────────


@app.get("/api/stats")
def api_stats(userId: str | None = None, storage: MemStorage = Depends(get_storage)) -> dict[str, Any]:
    """Dashboard numbers for one user: today's time, streak, focus score..."""
    user_id = _parse_user_id(userId)
    summary = compile_stats(
        storage.get_study_time_records(user_id),
        storage.get_tasks(user_id),
        today_local(),
    )
    return summary.to_dict()
