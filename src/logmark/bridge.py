"""
Adapter for the standard library ``logging`` module.

    handler = logging.StreamHandler()
    handler.setFormatter(MarkdownLoggingFormatter())
    log = logging.getLogger("shop")
    log.addHandler(handler)
    log.error("Order {order_id} failed", extra={"context": {"order_id": 42}})

Context is read from the ``context`` attribute set through ``extra``;
``logger.exception()`` contributes the active exception.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from logmark.formatters import EXCEPTION_KEY, MarkdownFormatter
from logmark.records import LogRecord


class MarkdownLoggingFormatter(logging.Formatter):
    """logging.Formatter that delegates rendering to a MarkdownFormatter."""

    def __init__(
        self,
        formatter: Optional[MarkdownFormatter] = None,
        context_attr: str = "context",
    ) -> None:
        super().__init__()
        self.markdown = formatter or MarkdownFormatter()
        self.context_attr = context_attr

    def to_record(self, record: logging.LogRecord) -> LogRecord:
        """Convert a stdlib record to a LogRecord."""
        context = dict(getattr(record, self.context_attr, None) or {})
        if record.exc_info and record.exc_info[1] is not None:
            context.setdefault(EXCEPTION_KEY, record.exc_info[1])
        return LogRecord(
            level=record.levelno,
            level_name=record.levelname,
            message=record.getMessage(),
            context=context,
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc),
        )

    def format(self, record: logging.LogRecord) -> str:
        return self.markdown.format(self.to_record(record))

    def format_batch(self, records: Iterable[logging.LogRecord]) -> str:
        return self.markdown.format_batch(self.to_record(r) for r in records)
