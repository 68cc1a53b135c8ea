"""Tests for core/config.py and core/logger.py."""

import logging

import yaml

from core.config import Config, load_config, save_config
from core.logger import setup_logging
from core.workspace import get_user_timezone


def test_load_config_from_workspace(workspace):
    config = load_config(workspace)
    assert config.user_id == 1
    assert config.log_level == "DEBUG"
    assert config.api_url == ""


def test_env_overrides(workspace, monkeypatch):
    monkeypatch.setenv("STUDYDESK_API_URL", "http://localhost:5000")
    config = load_config(workspace)
    assert config.api_url == "http://localhost:5000"
    assert config.log_dir.endswith("logs")


def test_missing_config_uses_defaults(tmp_path):
    assert Config.from_dict({}) == Config()
    assert load_config(tmp_path).timezone == "UTC"


def test_save_config(workspace):
    save_config(Config(api_url="http://api", user_id=7, timezone="Europe/Paris"), workspace)
    data = yaml.safe_load((workspace / "config.yaml").read_text(encoding="utf-8"))
    assert data["user_id"] == 7
    assert data["api_url"] == "http://api"
    assert data["timezone"] == "Europe/Paris"
    assert load_config(workspace).user_id == 7


def test_bad_timezone_falls_back_to_utc(workspace):
    (workspace / "config.yaml").write_text("timezone: Mars/Olympus\n", encoding="utf-8")
    assert str(get_user_timezone(workspace)) == "UTC"


def test_setup_logging_adds_one_file_handler(tmp_path):
    root_logger = logging.getLogger()
    for h in [h for h in root_logger.handlers if getattr(h, "_studydesk", False)]:
        root_logger.removeHandler(h)
    before = list(root_logger.handlers)
    try:
        setup_logging("debug", tmp_path)
        setup_logging("debug", tmp_path)
        added = [h for h in root_logger.handlers if getattr(h, "_studydesk", False)]
        assert len(added) == 1
        assert logging.getLogger("core").level == logging.DEBUG
        logging.getLogger("core.test").debug("hello log")
        added[0].flush()
        assert "hello log" in (tmp_path / "studydesk.log").read_text(encoding="utf-8")
    finally:
        for h in list(root_logger.handlers):
            if h not in before:
                root_logger.removeHandler(h)
                h.close()
        logging.getLogger("core").setLevel(logging.NOTSET)
