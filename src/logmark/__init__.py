"""
logmark: markdown rendering of structured log records.

One formatter, plugged into a host logging framework, that renders a
record as a markdown headline plus, for WARNING and above, a stack
trace table and a fenced JSON context block.
"""

from logmark.records import LogRecord, LogLevel, level_name
from logmark.stacktrace import (
    Frame,
    StackTraceSource,
    CapturedTrace,
    frames_from_exception,
    resolve_frames,
)
from logmark.formatters import LogFormatter, MarkdownFormatter, DEFAULT_LEVEL_SYMBOLS
from logmark.config import FormatterConfig
from logmark.bridge import MarkdownLoggingFormatter

__all__ = [
    "LogRecord",
    "LogLevel",
    "level_name",
    "Frame",
    "StackTraceSource",
    "CapturedTrace",
    "frames_from_exception",
    "resolve_frames",
    "LogFormatter",
    "MarkdownFormatter",
    "DEFAULT_LEVEL_SYMBOLS",
    "FormatterConfig",
    "MarkdownLoggingFormatter",
]
