"""
Centralized logging configuration.

Operator-facing messages go through UserDisplay; logging carries technical
detail. By default only warnings reach the console, ``--verbose`` switches to
a technical DEBUG stream, and an optional file handler records INFO and above.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import Optional, Union

_config_lock = threading.Lock()
_MODULE_LOGGER = logging.getLogger(__name__)

TECHNICAL_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TECHNICAL_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
USER_FORMAT = "%(message)s"


def _close_handlers(logger: logging.Logger) -> None:
    """Close all handlers for a logger, logging any errors."""
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as e:
            _MODULE_LOGGER.debug("Handler close failed: %s", e)
    logger.handlers = []


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def _build_console_handler(level: int) -> logging.Handler:
    if level <= logging.DEBUG:
        formatter = logging.Formatter(TECHNICAL_FORMAT, TECHNICAL_DATE_FORMAT)
    else:
        formatter = logging.Formatter(USER_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    return console_handler


def _build_file_handler(log_file: Union[str, Path]) -> logging.Handler:
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(path, mode="a")
    file_handler.setFormatter(logging.Formatter(TECHNICAL_FORMAT, TECHNICAL_DATE_FORMAT))
    file_handler.setLevel(logging.INFO)
    return file_handler


def _suppress_noisy_third_parties() -> None:
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("prompt_toolkit").setLevel(logging.WARNING)


def setup_logging(level: Union[int, str] = logging.WARNING, log_file: Optional[Union[str, Path]] = None) -> None:
    """Configure the root logger for a kill-dev run."""

    with _config_lock:
        console_level = _resolve_level(level)
        root_logger = logging.getLogger()
        _close_handlers(root_logger)

        root_logger.addHandler(_build_console_handler(console_level))
        root_level = console_level
        if log_file:
            root_logger.addHandler(_build_file_handler(log_file))
            root_level = min(root_level, logging.INFO)

        root_logger.setLevel(root_level)
        _suppress_noisy_third_parties()
