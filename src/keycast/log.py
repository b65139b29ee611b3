"""Logging configuration using structlog.

Lines are short and aligned so they stay readable next to a screencast:
    12:30:45 INF session activated width=40 height=3
    12:30:46 DBG key translated raw=<C-a> symbols=[Ctrl+a]
    12:30:47 DBG key translated raw=" " symbols=[␣]
    12:30:48 ERR overlay creation failed err="no display"

Key notation is printed as typed; only values that would blur the
key=value layout (blanks, '=', quotes, empty strings) are quoted.
"""

import logging
import sys
from typing import Any, TextIO

import structlog

LEVEL_NAMES = {
    "debug": "DBG",
    "info": "INF",
    "warning": "WRN",
    "error": "ERR",
    "critical": "CRT",
}


def _needs_quotes(text: str) -> bool:
    return not text or any(c.isspace() or c in '="' for c in text)


def _format_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        # Symbol lists: [⏎ Ctrl+a j..x4]
        return "[" + " ".join(_format_value(item) for item in value) + "]"
    if isinstance(value, str):
        if _needs_quotes(value):
            escaped = value.replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        return value
    return str(value)


def _render_line(logger, method_name, event_dict) -> str:
    """Render 'HH:MM:SS LVL message key=value ...'."""
    timestamp = event_dict.pop("timestamp", "")
    level = event_dict.pop("level", method_name)
    event = event_dict.pop("event", "")

    parts = [timestamp, LEVEL_NAMES.get(level, level.upper()[:3]), str(event)]
    parts.extend(f"{key}={_format_value(value)}" for key, value in event_dict.items() if not key.startswith("_"))
    return " ".join(parts)


def configure(level: str = "INFO", debug: bool = False, stream: TextIO | None = None) -> None:
    """Configure structlog for console output.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        debug: Shortcut for level="DEBUG".
        stream: Where lines are printed. Defaults to stdout.
    """
    if debug:
        level = "DEBUG"

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False),
            _render_line,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )


def get_logger() -> structlog.BoundLogger:
    return structlog.get_logger()
