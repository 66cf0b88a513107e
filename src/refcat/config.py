# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model for the refcat catalog editor."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .supersession.replacer import DEFAULT_BIOS_CATEGORY

DEFAULT_CACHE_ROOT: Final[Path] = Path.home() / ".cache" / "refcat"


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class EditorConfig(BaseModel):
    """Settings that shape how catalogs are located, edited, and reported."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    cache_root: Path = Field(default_factory=lambda: DEFAULT_CACHE_ROOT)
    bios_category: str = DEFAULT_BIOS_CATEGORY
    backup: bool = True
    emoji: bool = True
    color: bool = True

    @field_validator("bios_category")
    @classmethod
    def _require_category(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("bios_category must not be empty")
        return trimmed

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as a plain mapping."""

        return self.model_dump(mode="python")


__all__ = ["DEFAULT_BIOS_CATEGORY", "DEFAULT_CACHE_ROOT", "ConfigError", "EditorConfig"]
