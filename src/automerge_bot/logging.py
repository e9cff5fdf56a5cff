"""Centralized logging configuration for automerge-bot.

Provides rotating file logs with consistent formatting across all components,
plus the framed failure block written for every failed GitHub call.
"""

from __future__ import annotations

import logging
import os
import re
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Default configuration
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "automerge-bot.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

ROOT_LOGGER = "automerge_bot"

# Log format
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SENSITIVE_PATTERNS = [
    (re.compile(r"ghp_[a-zA-Z0-9]{36}"), "[GITHUB_TOKEN]"),  # GitHub PAT
    (re.compile(r"gho_[a-zA-Z0-9]{36}"), "[GITHUB_TOKEN]"),  # GitHub OAuth
    (re.compile(r"ghs_[a-zA-Z0-9]{36}"), "[GITHUB_TOKEN]"),  # GitHub App installation
    (re.compile(r"github_pat_[a-zA-Z0-9_]{82}"), "[GITHUB_TOKEN]"),  # Fine-grained PAT
    (re.compile(r"Bearer [a-zA-Z0-9._-]+"), "Bearer [REDACTED]"),
    (re.compile(r"token=[a-zA-Z0-9._-]+"), "token=[REDACTED]"),
]


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
    file: bool = True,
) -> logging.Logger:
    """Configure the automerge_bot logger hierarchy.

    Args:
        log_dir: Where the rotating file goes; AUTOMERGE_LOG_DIR or ./logs when omitted.
        log_file: File name inside log_dir.
        max_bytes: Rotate once the file reaches this size.
        backup_count: Rotated files kept.
        level: DEBUG, INFO, WARNING or ERROR; AUTOMERGE_LOG_LEVEL or INFO when omitted.
        console: Also log to stderr.
        file: Write the rotating log file at all.

    Returns:
        The root automerge_bot logger.
    """
    if level is None:
        level = os.environ.get("AUTOMERGE_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    log_path: Path | None = None
    if file:
        if log_dir is None:
            log_dir = os.environ.get("AUTOMERGE_LOG_DIR", DEFAULT_LOG_DIR)
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        log_path = log_dir / log_file
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    logger.info("automerge-bot logging initialized (level=%s, file=%s)", level, log_path)

    return logger


def sanitize_for_log(text: str) -> str:
    """Remove credentials from text before it is logged.

    Args:
        text: Text that may contain sensitive data.

    Returns:
        Sanitized text safe for logging.
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def log_failure(
    logger: logging.Logger,
    error: BaseException,
    message: str = "Something went wrong!",
) -> None:
    """Log a framed block describing a failed remote operation.

    Args:
        logger: Logger to write to.
        error: The exception raised by the failed operation.
        message: Headline shown above the frame.
    """
    timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
    logger.error(
        "%s\n======================\n Time: %s\n\n Exception:\n %s\n======================",
        message,
        timestamp,
        sanitize_for_log(str(error)),
    )
