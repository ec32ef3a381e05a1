"""
Pydantic configuration schemas for the Dispatcher.

A config names the sink for each target, an optional fallback sink, and
the process-wide level filter:

    max_level: trace
    loggers:
      test:
        type: file
        path: tests/output/system.log
        echo: true
    fallback:
      type: file
      path: tests/output/system.log
      truncate: false

Usage:
    config = DispatcherConfig.from_yaml("logging.yaml")
    dispatcher = Dispatcher.from_config(config)
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from loggers.formatters import FORMATTERS
from loggers.records import resolve_threshold


class SinkType(str, Enum):
    FILE = "file"
    CONSOLE = "console"
    MEMORY = "memory"


class SinkConfig(BaseModel):
    type: SinkType
    path: Optional[str] = None            # file
    echo: bool = False                    # file
    truncate: bool = True                 # file
    capacity: Optional[int] = Field(None, gt=0)  # memory
    formatter: Optional[str] = None       # any

    @field_validator("formatter")
    @classmethod
    def known_formatter(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in FORMATTERS:
            raise ValueError(
                f"Unknown formatter '{v}'. Available: {', '.join(FORMATTERS)}"
            )
        return v

    @model_validator(mode="after")
    def file_needs_path(self) -> "SinkConfig":
        if self.type == SinkType.FILE and not self.path:
            raise ValueError("file sink requires 'path'")
        return self


class DispatcherConfig(BaseModel):
    """Top-level logging configuration."""

    max_level: int | str = "trace"
    loggers: dict[str, SinkConfig] = Field(default_factory=dict)
    fallback: Optional[SinkConfig] = None

    @field_validator("max_level")
    @classmethod
    def known_level(cls, v: int | str) -> int | str:
        resolve_threshold(v)  # raises ValueError on unknown names/values
        return v

    @property
    def threshold(self) -> int:
        """Numeric level filter."""
        return resolve_threshold(self.max_level)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "DispatcherConfig":
        """Load and validate from a YAML file."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.from_yaml_string(raw)

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "DispatcherConfig":
        """Load and validate from a YAML string."""
        data = yaml.safe_load(yaml_string) or {}
        return cls.model_validate(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DispatcherConfig":
        """Load and validate from a dict."""
        return cls.model_validate(data)

    def to_dict(self, exclude_none: bool = True) -> dict:
        return self.model_dump(mode="json", exclude_none=exclude_none)
