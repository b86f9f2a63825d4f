"""Resize operation."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ResizeMethod(str, Enum):
    """Resize methods supported by the API."""

    SCALE = "scale"
    """Scale down proportionally; exactly one of width/height."""

    FIT = "fit"
    """Scale down to fit within width x height."""

    COVER = "cover"
    """Scale and crop to exactly width x height."""

    THUMB = "thumb"
    """Like cover, with intelligent background detection."""


class ResizeOperation(BaseModel):
    """Server-side resize.

    Example:
        >>> ResizeOperation(method=ResizeMethod.FIT, width=150, height=100)
        >>> ResizeOperation(method=ResizeMethod.SCALE, width=300)
    """

    model_config = ConfigDict(frozen=True)

    method: ResizeMethod = Field(description="Resize method")
    width: int | None = Field(default=None, gt=0, description="Target width in pixels")
    height: int | None = Field(default=None, gt=0, description="Target height in pixels")

    @model_validator(mode="after")
    def _check_dimensions(self) -> ResizeOperation:
        has_width = self.width is not None
        has_height = self.height is not None
        if self.method is ResizeMethod.SCALE:
            if has_width == has_height:
                raise ValueError(
                    "Resize method 'scale' requires either a width or a height but not both"
                )
        elif not (has_width and has_height):
            raise ValueError(
                f"Resize method '{self.method.value}' requires both width and height"
            )
        return self
