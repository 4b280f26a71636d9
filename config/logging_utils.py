"""
Logging Utilities

Configures application logging and provides conditional debug helpers
based on the DEBUG setting.
"""

import logging
from pathlib import Path
from typing import Optional

from config.settings import settings


LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

_debug_logger = logging.getLogger("debug")
_debug_handler = logging.StreamHandler()
_debug_handler.setFormatter(
    logging.Formatter('[%(asctime)s] [DEBUG] %(message)s', datefmt='%H:%M:%S')
)
_debug_logger.addHandler(_debug_handler)
_debug_logger.setLevel(logging.DEBUG if settings.DEBUG else logging.WARNING)
_debug_logger.propagate = False


def setup_logging(log_dir: Optional[str] = None, debug: Optional[bool] = None) -> None:
    """
    Configure the root logger for the application.

    A console handler is always installed. When a log directory is given,
    errors are also written to ``error.log`` and everything from INFO up to
    ``combined.log``.

    Args:
        log_dir: Directory for log files; falls back to settings.LOG_DIR, empty disables files
        debug: Console verbosity override; falls back to settings.DEBUG
    """
    if log_dir is None:
        log_dir = settings.LOG_DIR
    if debug is None:
        debug = settings.DEBUG

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_tasktracker", False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = []

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if debug else logging.INFO)
    handlers.append(console)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)

        error_file = logging.FileHandler(path / "error.log", encoding="utf-8")
        error_file.setLevel(logging.ERROR)
        handlers.append(error_file)

        combined_file = logging.FileHandler(path / "combined.log", encoding="utf-8")
        combined_file.setLevel(logging.INFO)
        handlers.append(combined_file)

    for handler in handlers:
        handler.setFormatter(formatter)
        handler._tasktracker = True
        root.addHandler(handler)

    root.setLevel(logging.DEBUG if debug else logging.INFO)
    _debug_logger.setLevel(logging.DEBUG if debug else logging.WARNING)


def log_debug(message: str, *args, prefix: str = "") -> None:
    """
    Log a debug message only if DEBUG is set to True in settings.

    Args:
        message: The message to log
        *args: Additional arguments to format into the message
        prefix: Optional prefix for categorizing logs (e.g., "AUTH", "TASKS")
    """
    if not settings.DEBUG:
        return

    if prefix:
        formatted_message = f"[{prefix}] {message}"
    else:
        formatted_message = message

    if args:
        formatted_message = formatted_message % args

    _debug_logger.debug(formatted_message)


def log_success(message: str, prefix: str = "") -> None:
    """
    Log a success message with a checkmark.

    Args:
        message: The success message
        prefix: Optional prefix for categorizing logs
    """
    if not settings.DEBUG:
        return

    prefix_str = f"[{prefix}] " if prefix else ""
    _debug_logger.debug(f"{prefix_str}✓ {message}")


def log_error(message: str, prefix: str = "") -> None:
    """
    Log an error message with an X mark.

    Args:
        message: The error message
        prefix: Optional prefix for categorizing logs
    """
    if not settings.DEBUG:
        return

    prefix_str = f"[{prefix}] " if prefix else ""
    _debug_logger.debug(f"{prefix_str}✗ {message}")
