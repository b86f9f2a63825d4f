"""Metadata preservation operation."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Flag
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PreserveOptions(Flag):
    """Metadata that can be copied from the source image."""

    NONE = 0
    COPYRIGHT = 1
    CREATION = 2
    LOCATION = 4


# Wire order is fixed regardless of how the flags were combined.
_OPTION_NAMES: tuple[tuple[PreserveOptions, str], ...] = (
    (PreserveOptions.COPYRIGHT, "copyright"),
    (PreserveOptions.CREATION, "creation"),
    (PreserveOptions.LOCATION, "location"),
)
_VALID_NAMES = frozenset(name for _, name in _OPTION_NAMES)


class PreserveOperation(BaseModel):
    """Preserve copyright, creation date and/or GPS location metadata.

    Example:
        >>> PreserveOperation(options=PreserveOptions.COPYRIGHT | PreserveOptions.CREATION)
        >>> PreserveOperation(options=["location"])
    """

    model_config = ConfigDict(frozen=True)

    options: tuple[str, ...] = Field(description="Metadata names to preserve")

    @field_validator("options", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, PreserveOptions):
            return tuple(name for flag, name in _OPTION_NAMES if flag in value)

        if isinstance(value, str) or not isinstance(value, Iterable):
            raise ValueError("options must be PreserveOptions flags or a list of names")

        names = {str(v).lower() for v in value}
        unknown = names - _VALID_NAMES
        if unknown:
            raise ValueError(f"Unknown preserve options: {sorted(unknown)}")
        return tuple(name for _, name in _OPTION_NAMES if name in names)
