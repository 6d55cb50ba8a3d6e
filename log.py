"""
Logging setup for Decree.

Library modules only ever call `get_logger(__name__)` and log at DEBUG; they
never install handlers. Applications (or the demo in main.py) call
`configure()` once at start-up to pick a text or JSON formatter. Input bytes
and challenge values are never logged, only labels and lengths.

Usage:
    import log

    log.configure(level="DEBUG")
    logger = log.get_logger(__name__)
    logger.debug("flushed inputs", extra={"labels": ["base", "modulus"]})
"""

from __future__ import annotations

import datetime as _dt
import json as _json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from settings import get_settings

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RECORD_ATTRS = frozenset(
    (
        "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
        "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
        "created", "msecs", "relativeCreated", "thread", "threadName",
        "processName", "process", "taskName", "message", "asctime",
    )
)


def _coerce_value(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return v.hex()
    if isinstance(v, (list, tuple)):
        return [_coerce_value(x) for x in v]
    if isinstance(v, dict):
        return {str(k): _coerce_value(x) for k, x in v.items()}
    return str(v)


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        k: _coerce_value(v)
        for k, v in record.__dict__.items()
        if k not in _RECORD_ATTRS and not k.startswith("_")
    }


def _utcnow_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="milliseconds")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utcnow_iso(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k, v in _extras(record).items():
            payload.setdefault(k, v)
        if record.exc_info:
            payload["err"] = self.formatException(record.exc_info)
        return _json.dumps(payload, separators=(",", ":"), sort_keys=True)


class TextFormatter(logging.Formatter):
    """
    One line per record:
      2026-01-05T12:34:56.789+00:00 | DEBUG | decree | stage=0 labels=['u'] | flushed inputs
    """

    def format(self, record: logging.LogRecord) -> str:
        line = f"{_utcnow_iso()} | {record.levelname:<5} | {record.name}"
        extras = " ".join(f"{k}={v}" for k, v in sorted(_extras(record).items()))
        if extras:
            line += f" | {extras}"
        line += f" | {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure(
    *,
    level: Optional[str | int] = None,
    json: Optional[bool] = None,
    stream: TextIO = sys.stderr,
) -> None:
    """
    Configure the root logger with a single console handler.

    Args:
        level: Minimum level (defaults to settings.log_level)
        json: Emit JSON lines instead of text (defaults to settings.log_json)
        stream: Destination stream
    """
    settings = get_settings()
    chosen_level = settings.log_level if level is None else level
    chosen_json = settings.log_json if json is None else json

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter() if chosen_json else TextFormatter())
    root.addHandler(handler)
    root.setLevel(chosen_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["configure", "get_logger", "JSONFormatter", "TextFormatter"]
