"""Logging setup for boxshell.

User-facing messages go through rich consoles; this module only configures
the `boxshell` logger tree used for diagnostics. Debug output is enabled by
BOXSHELL_DEBUG=1 or the --debug flag.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_ROOT = "boxshell"
_initialized = False


def _get_log_level() -> int:
    """Determine log level from environment."""
    if os.environ.get("BOXSHELL_DEBUG", "").lower() in ("1", "true", "yes"):
        return logging.DEBUG
    return logging.WARNING


def _init_logging() -> None:
    """Attach a stderr handler to the boxshell logger once."""
    global _initialized
    if _initialized:
        return
    root_logger = logging.getLogger(_ROOT)
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(handler)
    root_logger.setLevel(_get_log_level())
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, inside the boxshell namespace."""
    _init_logging()
    if not name.startswith(_ROOT):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)


def set_debug(enabled: bool = True) -> None:
    """Switch the boxshell logger between DEBUG and WARNING."""
    logging.getLogger(_ROOT).setLevel(logging.DEBUG if enabled else logging.WARNING)
