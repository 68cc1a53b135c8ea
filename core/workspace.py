"""Workspace root, timezone, path helpers for StudyDesk."""

from __future__ import annotations

import os
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.fileio import read_yaml


def workspace_root() -> Path:
    """Get the workspace root directory (contains config.yaml and data/)."""
    return Path(
        os.environ.get("STUDYDESK_ROOT", str(Path.home() / "studydesk"))
    ).expanduser().resolve()


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get user's timezone from config.yaml, defaulting to UTC."""
    if root is None:
        root = workspace_root()
    config = read_yaml(config_path(root))
    try:
        return ZoneInfo(str(config.get("timezone", "UTC")))
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def today_local(root: Path | None = None) -> date:
    """Get today's date in user's timezone."""
    return datetime.now(get_user_timezone(root)).date()


def today_str(root: Path | None = None) -> str:
    """Get today's date string (YYYY-MM-DD) in user's timezone."""
    return today_local(root).isoformat()


# ── Path helpers ──────────────────────────────────────────────

def config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "config.yaml"


def local_store_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "data" / "local_store.json"
