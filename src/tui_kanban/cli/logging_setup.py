"""Log file setup for the interactive UI, which owns the terminal."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "tui_kanban"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
MAX_BYTES = 2_000_000
BACKUP_COUNT = 2


def configure_logging(log_path: Path, level: str = "INFO") -> Optional[logging.Handler]:
    """
    Send package logs to a rotating file.

    Returns the installed handler, or None if the log directory cannot be
    created (the UI still runs, just without a log).
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8",
        )
    except OSError as e:
        logging.getLogger(__name__).warning("Logging disabled, cannot open %s: %s", log_path, e)
        return None

    handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(handler.level)
    # Nothing may reach the terminal while the board is drawn
    logger.propagate = False
    return handler
