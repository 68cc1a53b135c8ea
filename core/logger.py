"""Application-wide logging setup writing to platformdirs user_log_dir."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "studydesk"
_LOG_FILE = "studydesk.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO", log_dir: str | Path | None = None) -> logging.Logger:
    """Attach a rotating file handler to the package loggers.

    Safe to call more than once; handlers are only added the first time.
    """
    directory = Path(log_dir) if log_dir else Path(user_log_dir(_APP_NAME))
    directory.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    if not any(getattr(h, "_studydesk", False) for h in root_logger.handlers):
        handler = logging.handlers.RotatingFileHandler(
            directory / _LOG_FILE,
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
        handler._studydesk = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)

    for name in ("core", "ui", "cli"):
        logging.getLogger(name).setLevel(level.upper())
    return logging.getLogger(_APP_NAME)
