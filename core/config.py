"""Runtime configuration loaded from config.yaml and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.fileio import read_yaml, write_yaml_atomic
from core.workspace import config_path, workspace_root


@dataclass
class Config:
    api_url: str = ""
    user_id: int = 1
    timezone: str = "UTC"
    log_level: str = "INFO"
    log_dir: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Config:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            api_url=str(d.get("api_url", "") or ""),
            user_id=int(d.get("user_id", 1)),
            timezone=str(d.get("timezone", "UTC")),
            log_level=str(d.get("log_level", "INFO")).upper(),
            log_dir=str(d.get("log_dir", "") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "user_id": self.user_id,
            "timezone": self.timezone,
            "log_level": self.log_level,
        }
        if self.api_url:
            d["api_url"] = self.api_url
        if self.log_dir:
            d["log_dir"] = self.log_dir
        return d


def load_config(root: Path | None = None) -> Config:
    """Load config.yaml, then apply STUDYDESK_API_URL / STUDYDESK_LOG_DIR."""
    if root is None:
        root = workspace_root()
    config = Config.from_dict(read_yaml(config_path(root)))
    api_url = os.environ.get("STUDYDESK_API_URL")
    if api_url is not None:
        config.api_url = api_url
    log_dir = os.environ.get("STUDYDESK_LOG_DIR")
    if log_dir:
        config.log_dir = log_dir
    return config


def save_config(config: Config, root: Path | None = None) -> None:
    write_yaml_atomic(config_path(root), config.to_dict())
