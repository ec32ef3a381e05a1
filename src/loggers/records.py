"""
Log records and level definitions.

Levels are ordered TRACE < DEBUG < INFO < WARN < ERROR and carry
stdlib-compatible numeric values, so they compare directly against
logging.DEBUG and friends.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any


DEFAULT_TARGET = "default"


class LogLevel(IntEnum):
    """Record severities, stdlib-compatible numeric values."""
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Resolve level from string name, case-insensitive."""
        name_upper = name.upper()
        name_upper = _ALIASES.get(name_upper, name_upper)
        try:
            return cls[name_upper]
        except KeyError:
            raise ValueError(
                f"Unknown log level '{name}'. "
                f"Valid levels: {', '.join(m.name for m in cls)}"
            )

    @classmethod
    def from_value(cls, value: int | str) -> "LogLevel":
        """Resolve level from int or string."""
        if isinstance(value, str):
            return cls.from_name(value)
        if isinstance(value, int):
            for member in cls:
                if member.value == value:
                    return member
            raise ValueError(
                f"No log level with value {value}. "
                f"Valid values: {', '.join(f'{m.name}={m.value}' for m in cls)}"
            )
        raise TypeError(f"Expected int or str, got {type(value).__name__}")


_ALIASES = {"WARNING": "WARN", "CRITICAL": "ERROR"}

# Threshold above every level: nothing passes the filter.
LEVEL_OFF = 100

LEVEL_NAMES: dict[int, str] = {member.value: member.name for member in LogLevel}
LEVEL_NAMES[LEVEL_OFF] = "OFF"


def level_name(level: int) -> str:
    """Get display name for a level value. Falls back to numeric string."""
    return LEVEL_NAMES.get(level, str(level))


def resolve_threshold(value: int | str) -> int:
    """
    Convert a filter threshold to its numeric value.

    Accepts a LogLevel, a standard level value, a level name, or "off".
    """
    if isinstance(value, str) and value.strip().upper() == "OFF":
        return LEVEL_OFF
    if isinstance(value, int) and value == LEVEL_OFF:
        return LEVEL_OFF
    return LogLevel.from_value(value).value


def nearest_level(value: int | str) -> LogLevel:
    """
    Resolve a call-site level. Names must match a level; numbers map to
    the nearest LogLevel at or below them, anything under TRACE is TRACE.
    """
    if isinstance(value, str):
        return LogLevel.from_name(value)
    if isinstance(value, int):
        for member in reversed(LogLevel):
            if value >= member:
                return member
        return LogLevel.TRACE
    raise TypeError(f"Expected int or str, got {type(value).__name__}")


@dataclass(frozen=True)
class LogRecord:
    """
    Immutable log record. Created at the call site, consumed synchronously
    by the Dispatcher, never persisted by it.

    A target of None means the record was logged without one; it routes
    like any other unregistered target.
    """
    timestamp: datetime
    level: LogLevel
    message: str
    target: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        level: int | str,
        message: str,
        target: str | None = None,
        **context: Any,
    ) -> "LogRecord":
        """Factory method with auto-timestamp and level resolution."""
        return cls(
            timestamp=datetime.now(timezone.utc),
            level=LogLevel.from_value(level),
            message=message,
            target=target,
            context=context,
        )

    @property
    def level_name(self) -> str:
        return self.level.name

    @property
    def target_name(self) -> str:
        """Target for display; records without one show as 'default'."""
        return self.target if self.target is not None else DEFAULT_TARGET
