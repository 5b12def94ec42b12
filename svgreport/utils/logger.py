"""
Logging setup for svgreport.

The library only creates module loggers; handlers are installed by the
application through :func:`configure_logging` or :func:`setup_rich_logging`.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(level: str) -> int:
    if level.upper() not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {level}")
    return getattr(logging, level.upper())


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance for module.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    if not name or not isinstance(name, str):
        raise ValueError("Logger name must be a non-empty string")
    return logging.getLogger(name)


def add_file_handler(
    logger: logging.Logger,
    file_path: str,
    level: str = "INFO",
    formatter: Optional[logging.Formatter] = None,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> RotatingFileHandler:
    """
    Add a rotating file handler to logger.

    Args:
        logger: Logger instance
        file_path: Log file path
        level: Log level for this handler
        formatter: Log formatter
        max_file_size: Maximum log file size in bytes
        backup_count: Number of backup files to keep
    """
    if not file_path or not isinstance(file_path, str):
        raise ValueError("File path must be a non-empty string")

    log_dir = os.path.dirname(file_path)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)

    handler = RotatingFileHandler(file_path, maxBytes=max_file_size, backupCount=backup_count)
    handler.setLevel(_level(level))
    handler.setFormatter(formatter or logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
    logger.addHandler(handler)
    return handler


def configure_logging(level: str = "INFO", log_file: Optional[str] = None, format_string: Optional[str] = None) -> None:
    """
    Configure plain console logging (and optionally a rotating log file) on the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Log file path
        format_string: Custom format string
    """
    numeric = _level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric)
    root_logger.handlers.clear()

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        add_file_handler(root_logger, log_file, level, formatter)


def setup_rich_logging(level: str = "INFO", console: Optional[Console] = None) -> RichHandler:
    """
    Route the root logger through rich's colour handler.

    Args:
        level: Log level
        console: Console to write to (stderr by default)
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=True,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))

    root_logger = logging.getLogger()
    root_logger.setLevel(_level(level))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    return handler
