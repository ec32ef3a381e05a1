"""
Log formatters.

Each sink can use a different formatter.
  - json:    {"severity":"INFO","timestamp":"...","target":"test","message":"..."}
  - console: "[INFO] test 2026-02-12T14:32:05.123Z - message"
"""

import json
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from loggers.records import LogRecord


class LogFormatter(ABC):
    """Base formatter. Transforms LogRecord → string."""

    @abstractmethod
    def format(self, record: LogRecord) -> str: ...


class JsonFormatter(LogFormatter):
    """
    Structured JSON for files and machine parsing.
    One JSON object per line.
    """

    def format(self, record: LogRecord) -> str:
        obj: dict[str, Any] = {
            "severity": record.level_name,
            "timestamp": rfc3339_millis(record.timestamp),
            "target": record.target_name,
            "message": record.message,
        }
        if record.context:
            obj["context"] = {
                k: _serialize_value(v) for k, v in record.context.items()
            }
        return json.dumps(obj, default=str)


class ConsoleFormatter(LogFormatter):
    """
    Single-line format for terminal display.
    Example: [INFO] test 2026-02-12T14:32:05.123Z - Hello, world!
    """

    def format(self, record: LogRecord) -> str:
        ts = rfc3339_millis(record.timestamp)
        line = f"[{record.level_name}] {record.target_name} {ts} - {record.message}"
        if record.context:
            extras = " ".join(f"{k}={v}" for k, v in record.context.items())
            line = f"{line} | {extras}"
        return line


FORMATTERS: dict[str, type[LogFormatter]] = {
    "json": JsonFormatter,
    "console": ConsoleFormatter,
}


def build_formatter(name: str) -> LogFormatter:
    """Look up a formatter by config name."""
    cls = FORMATTERS.get(name)
    if cls is None:
        raise ValueError(
            f"Unknown formatter '{name}'. Available: {', '.join(FORMATTERS)}"
        )
    return cls()


def rfc3339_millis(ts: datetime) -> str:
    """UTC RFC 3339 timestamp with millisecond precision and a Z suffix."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    utc = ts.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _serialize_value(v: Any) -> Any:
    """Make a value JSON-serializable."""
    if isinstance(v, (str, int, float, bool, type(None))):
        return v
    if isinstance(v, (list, tuple)):
        return [_serialize_value(i) for i in v]
    if isinstance(v, dict):
        return {str(k): _serialize_value(val) for k, val in v.items()}
    return str(v)
