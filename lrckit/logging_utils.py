"""
Centralized logging configuration for LrcKit.
Every module logs through `get_logger`, so the CLI, the dashboard and the
batch engines share one console stream and one rotating log file.
"""

import logging
import os
import sys
from collections import deque
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def get_log_dir() -> Path:
    return Path(os.getenv("LRCKIT_LOG_DIR") or "logs")


def get_log_file() -> Path:
    return get_log_dir() / "app.log"


def get_logger(name: str = "app") -> logging.Logger:
    """
    Configure and return a logger with structured formatting.

    The logger outputs to:
    - stdout
    - <log dir>/app.log (with rotation); the directory is `logs` unless
      LRCKIT_LOG_DIR is set

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers if logger already configured
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)

    # Format: timestamp | level | logger_name | message
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler with rotation (10MB max, keep 5 backups)
    log_dir = get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_dir / "app.log", maxBytes=10_485_760, backupCount=5, encoding="utf-8"
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


def read_log_tail(lines: int = 200) -> list[str]:
    """Return the last `lines` lines of the current log file (empty if there is none)."""
    log_file = get_log_file()
    if not log_file.exists():
        return []
    with open(log_file, "r", encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\n") for line in deque(f, maxlen=lines)]
