"""Logging setup for dumpviewer.

Everything logs under the ``dumpviewer`` logger. Records go to the file named
by config (or DUMPVIEWER_LOG), otherwise to stderr when it is a terminal or
when the caller asks for it. Lines read ``10:00:01 info refresh: message``,
with the package prefix trimmed from logger names.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dumpviewer.config.schema import LoggingConfig

TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

LOGGER_NAME = "dumpviewer"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"

logger = logging.getLogger(LOGGER_NAME)

# Index is the ``verbose`` setting; larger values clamp to the last entry
VERBOSITY_LEVELS = (logging.ERROR, logging.WARNING, logging.INFO, VERBOSE, TRACE)

_installed: list[logging.Handler] = []
_initialized = False


class DumpViewerFormatter(logging.Formatter):
    """Lowercase level names and package-relative logger names.

    Works on a copy of the record so other handlers see it unchanged.
    """

    def format(self, record: logging.LogRecord) -> str:
        shown = logging.makeLogRecord(record.__dict__)
        shown.levelname = record.levelname.lower()
        prefix = f"{LOGGER_NAME}."
        if record.name.startswith(prefix):
            shown.name = record.name[len(prefix):]
        return super().format(shown)


def resolve_level(config: LoggingConfig | None) -> int:
    """Log level from config; ``verbose`` wins over ``level``."""
    if config is None:
        return logging.INFO
    if config.verbose is not None:
        index = max(0, min(config.verbose, len(VERBOSITY_LEVELS) - 1))
        return VERBOSITY_LEVELS[index]
    if config.level:
        name = config.level.upper()
        if name == "WARN":
            name = "WARNING"
        level = logging.getLevelName(name)
        if isinstance(level, int):
            return level
    return logging.INFO


def _open_handler(log_path: str | None, force_stderr: bool) -> logging.Handler | None:
    if log_path:
        try:
            return logging.FileHandler(os.path.expanduser(log_path), mode="a", encoding="utf-8")
        except OSError as e:
            print(f"[dumpviewer] Failed to open log file: {e}", file=sys.stderr)
            return logging.StreamHandler(sys.stderr)
    if force_stderr or sys.stderr.isatty():
        return logging.StreamHandler(sys.stderr)
    return None


def setup_logging(config: LoggingConfig | None = None, force_stderr: bool = False) -> None:
    """Configure the ``dumpviewer`` logger once; later calls are no-ops.

    Args:
        config: Level, verbosity and log file settings.
        force_stderr: Log to stderr even when it is not a terminal
            (the ``serve`` command, whose output is the log).
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    level = resolve_level(config)
    logger.setLevel(level)

    log_path = config.file if config and config.file else os.environ.get("DUMPVIEWER_LOG")
    handler = _open_handler(log_path, force_stderr)
    if handler is None:
        return
    handler.setLevel(level)
    handler.setFormatter(DumpViewerFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    _installed.append(handler)


def reset_logging() -> None:
    """Remove handlers added by ``setup_logging`` so it can run again."""
    global _initialized
    while _installed:
        handler = _installed.pop()
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    _initialized = False


def get_logger(name: str | None = None) -> logging.Logger:
    """Get the ``dumpviewer`` logger, or a child of it such as ``"dashboard"``."""
    if name:
        return logger.getChild(name)
    return logger
