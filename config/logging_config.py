from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from config.dashboard_config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def configure_logging(level: str, file_config: LoggingConfig | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    if file_config is None or not file_config.filename:
        return

    path = Path(file_config.filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, RotatingFileHandler) and Path(handler.baseFilename).resolve() == path.resolve():
            return

    handler = RotatingFileHandler(
        path,
        maxBytes=max(file_config.max_size_mb, 1) * 1024 * 1024,
        backupCount=max(file_config.max_backups, 0),
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(getattr(logging, file_config.level.upper(), logging.INFO))
    root.addHandler(handler)
