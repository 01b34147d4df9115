"""
Pydantic configuration schema for the markdown formatter.

Every field is optional; an empty YAML document yields the defaults.

Usage:
    config = FormatterConfig.from_yaml("logmark.yaml")
    formatter = MarkdownFormatter.from_config(config)

Example YAML:
    project_root: /srv/shop
    elevated_level: warning
    max_context_length: 2000
    level_symbols:
      INFO: ":information_source:"
      WARNING: ":warning:"
      ERROR: ":x:"
      CRITICAL: ":fire:"
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from logmark.formatters import (
    DEFAULT_CONTEXT_LABEL,
    DEFAULT_ELLIPSIS,
    DEFAULT_MAX_CONTEXT_LENGTH,
    FALLBACK_SYMBOL,
)
from logmark.records import LogLevel

logger = logging.getLogger(__name__)


class FormatterConfig(BaseModel):
    project_root: Optional[str] = None
    level_symbols: Optional[dict[str, str]] = None   # replaces the defaults
    fallback_symbol: str = FALLBACK_SYMBOL
    elevated_level: int | str = LogLevel.WARNING.value
    max_context_length: int = Field(DEFAULT_MAX_CONTEXT_LENGTH, ge=0)
    ellipsis: str = DEFAULT_ELLIPSIS
    context_label: Optional[str] = DEFAULT_CONTEXT_LABEL
    json_indent: int = Field(4, ge=0)

    @field_validator("elevated_level")
    @classmethod
    def validate_level(cls, value: int | str) -> int:
        return resolve_level(value)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "FormatterConfig":
        """Load and validate from a YAML file."""
        path = Path(path)
        config = cls.from_yaml_string(path.read_text(encoding="utf-8"))
        logger.debug("Loaded formatter config from %s", path)
        return config

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "FormatterConfig":
        """Load and validate from a YAML string."""
        data = yaml.safe_load(yaml_string)
        return cls.model_validate(data or {})

    @classmethod
    def from_dict(cls, data: dict) -> "FormatterConfig":
        """Load and validate from a dict."""
        return cls.model_validate(data)

    def to_dict(self, exclude_none: bool = True) -> dict:
        return self.model_dump(exclude_none=exclude_none)

    def formatter_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for MarkdownFormatter."""
        return self.model_dump()


def resolve_level(value: int | str) -> int:
    """Convert level name or int to numeric level."""
    if isinstance(value, bool):
        raise TypeError("Expected int or str for level, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        if value.strip().isdigit():
            return int(value)
        return LogLevel.from_name(value).value
    raise TypeError(f"Expected int or str for level, got {type(value).__name__}")
