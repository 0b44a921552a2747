"""Centralized logging helpers.

Provides the handler setup used by the CLI plus small utilities for
structured DEBUG traces: ``extra_context`` for the ``extra=`` mapping,
``Timer`` for durations and ``safe_url`` for redacting credentials.
"""
from __future__ import annotations

import logging
import os
import sys
import time
import urllib.parse
from typing import Any, Dict, Optional

from constants import Constants

_SENSITIVE_PARAMS = {"token", "access_token", "auth", "apikey", "api_key", "key", "password"}

# Attribute names owned by LogRecord; passing them through ``extra`` raises KeyError.
_RESERVED = {
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
    "created", "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "message", "asctime", "taskName",
}


def configure_logging(level: Optional[str] = None, logfile: Optional[str] = None, quiet: bool = False) -> None:
    """Configure the root logger for CLI use.

    Level precedence: explicit argument, then ``DEPADD_LOG_LEVEL``, then INFO.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(Constants.LOG_FORMAT)
    if logfile:
        file_handler = logging.FileHandler(logfile, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    if not quiet:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        root.addHandler(stream_handler)
    if not root.handlers:
        root.addHandler(logging.NullHandler())
    root.setLevel(level_value)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    None values are dropped and names that collide with LogRecord
    attributes are prefixed with ``ctx_``.
    """
    out: Dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        out[f"ctx_{key}" if key in _RESERVED else key] = value
    return out


def safe_url(url: str) -> str:
    """Return ``url`` with userinfo and sensitive query values redacted."""
    try:
        parts = urllib.parse.urlsplit(url)
    except ValueError:
        return url
    netloc = parts.netloc
    if "@" in netloc:
        netloc = "[REDACTED]@" + netloc.rsplit("@", 1)[1]
    query = parts.query
    if query:
        pairs = urllib.parse.parse_qsl(query, keep_blank_values=True)
        query = "&".join(
            f"{k}={'[REDACTED]' if k.lower() in _SENSITIVE_PARAMS else v}" for k, v in pairs
        )
    return urllib.parse.urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


class Timer:
    """Context manager measuring wall-clock duration."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds, measured up to now while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
