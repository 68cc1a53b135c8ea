"""Shared test fixtures for StudyDesk tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml

from core.local_store import LocalStore
from core.scheduling import ManualScheduler


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with config.yaml and an empty data dir."""
    root = tmp_path / "workspace"
    (root / "data").mkdir(parents=True)

    config = {
        "user_id": 1,
        "timezone": "UTC",
        "log_level": "DEBUG",
    }
    (root / "config.yaml").write_text(
        yaml.dump(config, default_flow_style=False), encoding="utf-8"
    )

    # Set env vars
    os.environ["STUDYDESK_ROOT"] = str(root)
    os.environ["STUDYDESK_LOG_DIR"] = str(tmp_path / "logs")
    os.environ.pop("STUDYDESK_API_URL", None)
    yield root
    # Cleanup
    for key in ("STUDYDESK_ROOT", "STUDYDESK_LOG_DIR", "STUDYDESK_API_URL"):
        if key in os.environ:
            del os.environ[key]


@pytest.fixture
def store(workspace: Path) -> LocalStore:
    return LocalStore(workspace / "data" / "local_store.json")


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


class RecordingNotifier:
    """Collects (title, description) pairs."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def __call__(self, title: str, description: str) -> None:
        self.calls.append((title, description))

    @property
    def titles(self) -> list[str]:
        return [t for t, _ in self.calls]


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
