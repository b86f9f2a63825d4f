"""Format conversion operation."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ImageFormat(str, Enum):
    """Target formats for conversion."""

    JPEG = "image/jpeg"
    PNG = "image/png"
    WEBP = "image/webp"


class ConvertOperation(BaseModel):
    """Convert the image to one of several formats.

    When more than one format is given the API picks the smallest result.
    ``background`` fills transparent areas, which is required when
    converting a transparent image to JPEG. It accepts any value the API
    understands (``"#RRGGBB"``, ``"white"``, ``"black"``) or an
    ``(r, g, b)`` tuple rendered as hex.

    Example:
        >>> ConvertOperation(formats=[ImageFormat.WEBP, ImageFormat.PNG])
        >>> ConvertOperation(formats=ImageFormat.JPEG, background=(255, 255, 255))
    """

    model_config = ConfigDict(frozen=True)

    formats: tuple[ImageFormat, ...] = Field(description="Candidate output formats")
    background: str | None = Field(default=None, description="Background fill color")

    @field_validator("formats", mode="before")
    @classmethod
    def _dedupe_formats(cls, value: Any) -> tuple[ImageFormat, ...]:
        if isinstance(value, (ImageFormat, str)):
            value = [value]
        if not isinstance(value, Iterable):
            raise ValueError("formats must be an ImageFormat or a list of them")

        formats = tuple(dict.fromkeys(ImageFormat(v) for v in value))
        if not formats:
            raise ValueError("At least one format is required")
        return formats

    @field_validator("background", mode="before")
    @classmethod
    def _to_html_color(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        if isinstance(value, str):
            return value
        if isinstance(value, (tuple, list)) and len(value) >= 3:
            r, g, b = (int(c) for c in value[:3])
            for channel in (r, g, b):
                if not 0 <= channel <= 255:
                    raise ValueError(f"Color channel out of range: {channel}")
            return f"#{r:02X}{g:02X}{b:02X}"
        raise ValueError("background must be a color string or an (r, g, b) tuple")

    @property
    def type_list(self) -> list[str]:
        """MIME types as sent in the ``convert`` section."""
        return [f.value for f in self.formats]
