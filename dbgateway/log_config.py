"""Logging configuration for the gateway command line."""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "dbgateway"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


def _configured(handler: logging.Handler, level) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    return handler


def setup_logging(level=logging.INFO, log_dir: Optional[str] = None):
    """Send gateway logs to stderr, and to a rotating file under `log_dir` if given.

    Does nothing when the root logger already has handlers, so an embedding
    application's own setup wins.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(level)
    root.addHandler(_configured(logging.StreamHandler(), level))

    if not log_dir:
        return
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, f"{PACKAGE_LOGGER}.log")
    logging.getLogger(PACKAGE_LOGGER).addHandler(
        _configured(RotatingFileHandler(log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS), level)
    )


def level_from_env(default: str = "INFO") -> int:
    """Resolve DB_LOG_LEVEL to a logging level, falling back to `default`."""
    name = (os.environ.get("DB_LOG_LEVEL") or default).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO
