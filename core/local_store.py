"""Local key-value persistence used as the offline fallback.

All keys live in one JSON document under the workspace. Reads return the
default on any problem and writes never raise; both log what went wrong.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from core.fileio import exclusive_lock, read_json, write_json_atomic
from core.models import TimerSettings
from core.workspace import local_store_path

logger = logging.getLogger(__name__)

STORAGE_KEYS = (
    "user",
    "subjects",
    "tasks",
    "studySessions",
    "studyTimeRecords",
    "pomodoroSettings",
)


def _check_key(key: str) -> None:
    if key not in STORAGE_KEYS:
        raise KeyError(f"Unknown storage key: {key}")


class LocalStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path if path is not None else local_store_path()

    def _read_all(self) -> dict[str, Any]:
        return read_json(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for *key*, or *default*."""
        _check_key(key)
        try:
            data = self._read_all()
        except (OSError, ValueError) as e:
            logger.error("Error retrieving %s from local storage: %s", key, e)
            return default
        return data[key] if data.get(key) is not None else default

    def save(self, key: str, value: Any) -> None:
        """Store *value* under *key* (best-effort)."""
        _check_key(key)
        try:
            with exclusive_lock(self.path):
                try:
                    data = self._read_all()
                except ValueError as e:
                    logger.warning("Local storage unreadable, rewriting it: %s", e)
                    data = {}
                data[key] = value
                write_json_atomic(self.path, data)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error saving %s to local storage: %s", key, e)

    def clear(self, key: str) -> None:
        _check_key(key)
        try:
            with exclusive_lock(self.path):
                data = self._read_all()
                if key in data:
                    del data[key]
                    write_json_atomic(self.path, data)
        except (OSError, ValueError) as e:
            logger.error("Error removing %s from local storage: %s", key, e)

    def clear_all(self) -> None:
        for key in STORAGE_KEYS:
            self.clear(key)

    def is_initialized(self) -> bool:
        """True once a user has been stored."""
        return self.get("user") is not None

    # ── Timer settings ────────────────────────────────────────

    def load_settings(self) -> TimerSettings:
        return TimerSettings.from_dict(self.get("pomodoroSettings", {}))

    def save_settings(self, settings: TimerSettings) -> None:
        self.save("pomodoroSettings", settings.to_dict())
