"""
Log records and level definitions.

Levels use Python-compatible numeric values so records coming from the
stdlib ``logging`` module compare correctly against them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Standard log levels, Python-compatible numeric values."""
    TRACE = 5        # Below DEBUG, extreme detail
    DEBUG = 10
    VERBOSE = 15
    INFO = 20
    NOTICE = 25
    WARNING = 30     # Elevated from here on
    ERROR = 40
    ALERT = 45
    CRITICAL = 50

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Resolve level from string name, case-insensitive."""
        name_upper = name.upper()
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
                f"No standard level with value {value}. "
                f"Valid values: {', '.join(f'{m.name}={m.value}' for m in cls)}"
            )
        raise TypeError(f"Expected int or str, got {type(value).__name__}")


LEVEL_NAMES: dict[int, str] = {member.value: member.name for member in LogLevel}


def level_name(level: int) -> str:
    """Get display name for a level value. Falls back to numeric string."""
    return LEVEL_NAMES.get(level, str(level))


@dataclass(frozen=True)
class LogRecord:
    """
    Immutable log record, as handed over by the host logging framework.

    ``context`` may carry an ``exception`` entry holding a stack-trace
    source (see ``logmark.stacktrace``). Formatters read the record but
    never write to it.
    """
    level: int
    level_name: str
    message: str
    context: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(cls, level: int, message: str, **context: Any) -> "LogRecord":
        """Factory method with auto-timestamp and level name resolution."""
        return cls(
            level=level,
            level_name=level_name(level),
            message=message,
            context=context,
        )
