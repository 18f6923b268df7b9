"""
================================================================================
HRM Test Tools Common Utilities
================================================================================

This module provides shared logging setup and small helpers for the
reporting and test data tools.

Exports:
    - init_logger: Function to initialize loguru logger with standard settings
    - ensure_directory: Create a directory if missing
    - safe_json_serialize: ``default=`` hook for json.dumps

Usage:
    from hrm_test_tools.common import init_logger

    init_logger(level="DEBUG", log_file="logs/hrm_tests.log")

================================================================================
"""

import os
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from loguru import logger


DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# ============================================================
# Logging Setup
# ============================================================

_logger_initialized = False


def init_logger(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    force: bool = False,
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL
            env var or INFO.
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to.
        rotation: Rotation policy of the file sink
        retention: Retention policy of the file sink
        force: Re-initialize even if already configured

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="logs/hrm_tests.log")
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    # Remove default handler
    logger.remove()

    level = level or os.getenv("LOG_LEVEL", "INFO")
    format_string = format_string or DEFAULT_FORMAT

    # Add console handler
    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    # Add file handler if specified
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
        )

    _logger_initialized = True
    logger.debug("Logger initialized successfully")


# ============================================================
# Common Utilities
# ============================================================

def ensure_directory(path: Any) -> Path:
    """
    Ensures a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The path (for chaining)
    """
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def safe_json_serialize(obj: Any) -> Any:
    """
    Safely serializes an object to JSON-compatible format.

    Handles common non-serializable types like datetime, bytes, paths.
    """
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    elif isinstance(obj, bytes):
        return obj.decode("utf-8", errors="replace")
    elif isinstance(obj, Path):
        return str(obj)
    elif isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    elif hasattr(obj, "__dict__"):
        return obj.__dict__
    else:
        return str(obj)


# Export public API
__all__ = [
    "init_logger",
    "ensure_directory",
    "safe_json_serialize",
]
