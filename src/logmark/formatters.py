"""
Log formatters.

MarkdownFormatter turns a record into markdown for chat and issue
tracker surfaces:

    ## :exclamation: Payment for order 42 failed

    | Function              | Location              |
    |-----------------------|-----------------------|
    | Gateway.charge()      | shop/gateway.py:88    |
    | checkout()            | shop/views.py:31      |

    **Context:**
    ```json
    {
        "customer": "bob"
    }
    ```

Records below the elevated level render as the headline alone.
"""

import json
import os
import pprint
from abc import ABC, abstractmethod
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence, TYPE_CHECKING

from logmark.records import LogRecord, LogLevel
from logmark.stacktrace import Frame, resolve_frames

if TYPE_CHECKING:
    from logmark.config import FormatterConfig


EXCEPTION_KEY = "exception"

DEFAULT_LEVEL_SYMBOLS: Mapping[str, str] = MappingProxyType({
    "INFO": ":information_source:",
    "DEBUG": ":information_source:",
    "WARNING": "### :warning:",
    "ERROR": "## :exclamation:",
    "CRITICAL": "# :rotating_light:",
})
FALLBACK_SYMBOL = ":question:"

DEFAULT_MAX_CONTEXT_LENGTH = 1000
DEFAULT_ELLIPSIS = "..."
DEFAULT_CONTEXT_LABEL = "**Context:**"
MAX_CONTEXT_DEPTH = 20

NO_FUNCTION = "<no-function>"
SEPARATORS = ("/", "\\")
TABLE_HEADER = ("Function", "Location")

# src/logmark/formatters.py -> project root
INSTALL_ROOT = str(Path(__file__).resolve().parents[2])


class LogFormatter(ABC):
    """Base formatter. Transforms LogRecord → string."""

    @abstractmethod
    def format(self, record: LogRecord) -> str: ...

    def format_batch(self, records: Iterable[LogRecord]) -> str:
        """Format each record in order, separated by a blank line."""
        return "\n\n".join(self.format(record) for record in records)


class MarkdownFormatter(LogFormatter):
    """
    Markdown rendering for incident channels and issue trackers.

    Configuration is fixed at construction. ``level_symbols`` replaces
    the default symbol table entirely. ``project_root`` is stripped from
    file paths in stack tables. Its default, the directory above ``src/``,
    only makes sense for a source checkout; installed copies should pass
    the host project's root explicitly.
    """

    def __init__(
        self,
        project_root: str | os.PathLike | None = None,
        level_symbols: Mapping[str, str] | None = None,
        *,
        fallback_symbol: str = FALLBACK_SYMBOL,
        elevated_level: int = LogLevel.WARNING,
        max_context_length: int = DEFAULT_MAX_CONTEXT_LENGTH,
        ellipsis: str = DEFAULT_ELLIPSIS,
        context_label: Optional[str] = DEFAULT_CONTEXT_LABEL,
        json_indent: int = 4,
    ):
        if max_context_length < 0:
            raise ValueError(f"max_context_length must be >= 0, got {max_context_length}")
        root = os.fspath(project_root) if project_root is not None else INSTALL_ROOT
        self._project_root = root.rstrip("/\\") or root
        symbols = DEFAULT_LEVEL_SYMBOLS if level_symbols is None else level_symbols
        self._level_symbols = MappingProxyType(dict(symbols))
        self.fallback_symbol = fallback_symbol
        self.elevated_level = int(elevated_level)
        self.max_context_length = max_context_length
        self.ellipsis = ellipsis
        self.context_label = context_label
        self.json_indent = json_indent

    @classmethod
    def from_config(cls, config: "FormatterConfig") -> "MarkdownFormatter":
        """Build a formatter from a validated FormatterConfig."""
        return cls(**config.formatter_kwargs())

    @property
    def project_root(self) -> str:
        return self._project_root

    @property
    def level_symbols(self) -> Mapping[str, str]:
        """Read-only view of the symbol table."""
        return self._level_symbols

    # ── Record ────────────────────────────────────────────────────

    def format(self, record: LogRecord) -> str:
        symbol = self.symbol_for(record.level_name)
        message, context = self.substitute(record.message, record.context)
        headline = f"{symbol} {message}"

        if record.level < self.elevated_level:
            return headline

        sections = [headline]
        if EXCEPTION_KEY in context:
            sections.append(self.format_stack_trace(context[EXCEPTION_KEY]))

        fenced = f"```json\n{self.format_context(context)}\n```"
        if self.context_label:
            fenced = f"{self.context_label}\n{fenced}"
        sections.append(fenced)

        return "\n\n".join(sections)

    def symbol_for(self, level_name: str) -> str:
        """Markdown prefix for a level name, or the fallback symbol."""
        return self._level_symbols.get(level_name, self.fallback_symbol)

    @staticmethod
    def substitute(message: str, context: Mapping[str, Any]) -> tuple[str, dict[str, Any]]:
        """
        Replace ``{key}`` tokens with context values.

        Returns the new message and a copy of the context without the
        keys that were substituted. Tokens without a matching key are
        left untouched.
        """
        remaining = dict(context)
        for key, value in context.items():
            token = f"{{{key}}}"
            if token in message:
                message = message.replace(token, str(value))
                del remaining[key]
        return message, remaining

    # ── Context ───────────────────────────────────────────────────

    def format_context(self, context: Mapping[str, Any]) -> str:
        """
        Pretty JSON of the context without the exception entry.

        Values JSON cannot represent (including NaN and infinities) fall back
        to a pprint dump, cut off below MAX_CONTEXT_DEPTH levels. The result
        is capped at max_context_length characters plus the ellipsis.
        """
        context = {k: v for k, v in context.items() if k != EXCEPTION_KEY}
        if not context:
            return ""

        try:
            text = json.dumps(
                context, indent=self.json_indent, ensure_ascii=False, allow_nan=False
            )
        except (TypeError, ValueError, RecursionError):
            text = pprint.pformat(context, sort_dicts=False, depth=MAX_CONTEXT_DEPTH)

        return _truncate(text, self.max_context_length, self.ellipsis)

    # ── Stack trace ───────────────────────────────────────────────

    def format_stack_trace(self, exception: Any) -> str:
        """Render the frames of an exception as a two-column markdown table."""
        rows = [
            (self._function_cell(frame), self._location_cell(frame))
            for frame in resolve_frames(exception)
        ]
        return _render_table(TABLE_HEADER, rows)

    def shorten_path(self, path: str) -> str:
        """Make a path relative to the project root if it lies inside it."""
        root = self._project_root
        if not path.startswith(root):
            return path
        if root.endswith(SEPARATORS):
            return path[len(root):]
        if path[len(root):len(root) + 1] in SEPARATORS:
            return path[len(root) + 1:]
        return path

    @staticmethod
    def _function_cell(frame: Frame) -> str:
        if not frame.function:
            return NO_FUNCTION
        return f"{frame.class_name or ''}{frame.call_type or ''}{frame.function}()"

    def _location_cell(self, frame: Frame) -> str:
        if not frame.file:
            return ""
        line = "" if frame.line is None else frame.line
        return f"{self.shorten_path(frame.file)}:{line}"


# ── Helpers ───────────────────────────────────────────────────────────

def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|")


def _truncate(text: str, limit: int, ellipsis: str) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + ellipsis


def _render_table(header: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Markdown table with every column padded to its widest cell."""
    header = [_escape_cell(c) for c in header]
    rows = [[_escape_cell(c) for c in row] for row in rows]
    widths = [
        max(len(row[i]) for row in (header, *rows))
        for i in range(len(header))
    ]

    def line(cells: Sequence[str]) -> str:
        return "| " + " | ".join(c.ljust(w) for c, w in zip(cells, widths)) + " |"

    separator = "|" + "|".join("-" * (w + 2) for w in widths) + "|"
    return "\n".join([line(header), separator, *(line(row) for row in rows)])
