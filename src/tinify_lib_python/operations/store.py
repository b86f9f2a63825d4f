"""Cloud storage operations.

Ask the API to upload the result straight to Amazon S3 or Google Cloud
Storage instead of returning the bytes. The response ``Location`` then
points at the stored object.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class CloudStoreHeaders(BaseModel):
    """HTTP headers applied to the stored object."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    cache_control: str = Field(alias="Cache-Control", description="Cache-Control header")


class CloudStoreOperation(BaseModel):
    """Base class for cloud storage targets."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    service: str
    path: str = Field(description="Bucket and object path, e.g. 'bucket/images/out.png'")
    headers: CloudStoreHeaders | None = Field(default=None)

    def to_dict(self) -> dict[str, Any]:
        """Wire representation of the ``store`` section."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AwsCloudStoreOperation(CloudStoreOperation):
    """Store the result in Amazon S3.

    Example:
        >>> AwsCloudStoreOperation(
        ...     aws_access_key_id="AKIA...",
        ...     aws_secret_access_key="...",
        ...     region="us-east-1",
        ...     path="my-bucket/images/out.jpg",
        ... )
    """

    service: Literal["s3"] = "s3"
    aws_access_key_id: str
    aws_secret_access_key: str = Field(repr=False)
    region: str


class GoogleCloudStoreOperation(CloudStoreOperation):
    """Store the result in Google Cloud Storage."""

    service: Literal["gcs"] = "gcs"
    gcp_access_token: str = Field(repr=False)
