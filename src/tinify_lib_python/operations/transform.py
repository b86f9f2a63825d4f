"""Combined transform request sent to an image location."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tinify_lib_python.operations.convert import ConvertOperation
from tinify_lib_python.operations.preserve import PreserveOperation
from tinify_lib_python.operations.resize import ResizeOperation
from tinify_lib_python.operations.store import (
    AwsCloudStoreOperation,
    CloudStoreOperation,
    GoogleCloudStoreOperation,
)


class TransformOperations(BaseModel):
    """One or more transforms applied server-side in a single request.

    Only sections that are set are serialized. Constructing an instance
    without any section fails before any request is made.

    Example:
        >>> ops = TransformOperations(
        ...     resize=ResizeOperation(method=ResizeMethod.FIT, width=50, height=20)
        ... )
        >>> ops.to_dict()
        {'resize': {'method': 'fit', 'width': 50, 'height': 20}}
    """

    model_config = ConfigDict(frozen=True)

    resize: ResizeOperation | None = Field(default=None)
    preserve: PreserveOperation | None = Field(default=None)
    convert: ConvertOperation | None = Field(default=None)
    store: AwsCloudStoreOperation | GoogleCloudStoreOperation | CloudStoreOperation | None = Field(
        default=None
    )

    @model_validator(mode="after")
    def _require_operation(self) -> TransformOperations:
        if (
            self.resize is None
            and self.preserve is None
            and self.convert is None
            and self.store is None
        ):
            raise ValueError("At least one transform operation must be specified")
        return self

    def to_dict(self) -> dict[str, Any]:
        """Build the JSON request body."""
        body: dict[str, Any] = {}
        if self.resize is not None:
            body["resize"] = self.resize.model_dump(mode="json", exclude_none=True)
        if self.preserve is not None:
            body["preserve"] = list(self.preserve.options)
        if self.convert is not None:
            body["convert"] = {"type": self.convert.type_list}
            if self.convert.background is not None:
                body["transform"] = {"background": self.convert.background}
        if self.store is not None:
            body["store"] = self.store.to_dict()
        return body

    def to_json(self) -> str:
        """Serialize the request body."""
        return json.dumps(self.to_dict(), separators=(",", ":"))
