"""
Logging Configuration Module.

One application logger ("receipt_ocr") owns the handlers; every module
logs through a child of it obtained with get_logger(__name__).

    - console: colorized with colorama, written to stderr so that JSON
      results on stdout stay clean
    - file: optional, size-rotated

Usage:
    from receipt_ocr.utils.logger import setup_logger, get_logger

    setup_logger(level="DEBUG")          # once, at startup
    logger = get_logger(__name__)
    logger.debug("date matched by 'month_name'")
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Union

import colorama
from colorama import Fore, Style

colorama.init()

# Namespace shared by every logger in the application
APP_LOGGER_NAME = "receipt_ocr"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


class ColoredFormatter(logging.Formatter):
    """Console formatter that wraps each record in its level color."""

    LEVEL_COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, '')
        return f"{color}{super().format(record)}{Style.RESET_ALL}"


def _to_level(level: Union[str, int]) -> int:
    """Resolve 'debug', 'INFO' or 10 to a logging level number."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _file_handler(
    log_file: Union[str, Path],
    level: int,
    formatter: logging.Formatter,
    max_bytes: int,
    backup_count: int
) -> logging.Handler:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logger(
    level: Union[str, int] = "INFO",
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = 5,
    colorize: bool = True
) -> logging.Logger:
    """
    Configure the application logger.

    Calling it again replaces the previous handlers, so repeated setup
    (tests, CLI re-runs) never duplicates output.

    Args:
        level: Logging level name or number.
        log_format: Record format. Defaults to DEFAULT_FORMAT.
        date_format: asctime format. Defaults to DEFAULT_DATE_FORMAT.
        log_file: Path of the rotating log file, or None for console only.
        max_bytes: Size at which the log file is rotated.
        backup_count: Rotated files to keep.
        colorize: Color console records by level.

    Returns:
        The configured application logger.

    Raises:
        ValueError: If the level name is unknown.
    """
    numeric_level = _to_level(level)
    log_format = log_format or DEFAULT_FORMAT
    date_format = date_format or DEFAULT_DATE_FORMAT

    formatter_cls = ColoredFormatter if colorize else logging.Formatter

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(numeric_level)

    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    app_logger.addHandler(
        _console_handler(numeric_level, formatter_cls(log_format, datefmt=date_format))
    )

    if log_file:
        app_logger.addHandler(
            _file_handler(
                log_file,
                numeric_level,
                logging.Formatter(log_format, datefmt=date_format),
                max_bytes,
                backup_count
            )
        )

    app_logger.propagate = False

    app_logger.debug(f"Logging initialized (level={logging.getLevelName(numeric_level)})")
    return app_logger


def set_log_level(level: Union[str, int]) -> None:
    """Change the level of the application logger and all its handlers."""
    numeric_level = _to_level(level)
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(numeric_level)
    for handler in app_logger.handlers:
        handler.setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the application namespace.

    Example:
        >>> get_logger("receipt_ocr.pipeline").name
        'receipt_ocr.pipeline'
        >>> get_logger("scripts.batch").name
        'receipt_ocr.scripts.batch'
    """
    if name == APP_LOGGER_NAME or name.startswith(f"{APP_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


def setup_logger_from_config() -> logging.Logger:
    """
    Configure logging from the logging.* settings.

    A broken logging section (unknown level, unwritable log file) falls
    back to console-only defaults instead of aborting startup.
    """
    from config import get_config

    log_file = get_config("logging.file.path") if get_config("logging.file.enabled", False) else None

    try:
        return setup_logger(
            level=get_config("logging.level", "INFO"),
            log_format=get_config("logging.format"),
            date_format=get_config("logging.date_format"),
            log_file=log_file,
            max_bytes=get_config("logging.file.max_bytes", DEFAULT_MAX_BYTES),
            backup_count=get_config("logging.file.backup_count", 5),
            colorize=get_config("logging.console.colorize", True)
        )
    except (OSError, ValueError) as e:
        print(f"Warning: Could not apply logging config, using defaults: {e}", file=sys.stderr)
        return setup_logger()
