#!/usr/bin/env python3
"""
Server-side transform example.

This example demonstrates:
- Using an explicit connection registry
- Resizing and converting a remote image
- Storing the result directly in Amazon S3
- Tuning the retry policy with the builder

Usage:
    export TINIFY_API_KEY="your-api-key"
    export S3_BUCKET="my-bucket" AWS_ACCESS_KEY_ID="..." AWS_SECRET_ACCESS_KEY="..."
    python examples/transform.py https://tinypng.com/images/panda-happy.png
"""

import asyncio
import os
import sys

from tinify_lib_python import (
    AwsCloudStoreOperation,
    ConnectionRegistry,
    ConvertOperation,
    ImageFormat,
    ResizeMethod,
    ResizeOperation,
    TinifyClient,
    TransformOperations,
)
from tinify_lib_python.telemetry import LogLevel, TinifyLogger


async def main(url: str) -> None:
    """Run transform example."""
    # Show retries and request failures
    TinifyLogger.configure(level=LogLevel.DEBUG)

    async with ConnectionRegistry() as registry:
        client = await (
            TinifyClient.builder()
            .registry(registry)
            .max_retries(2)
            .retry_delay_ms(1000)
            .timeout(60.0)
            .build()
        )

        async with await client.shrink_from_url(url) as image:
            thumbnail = await image.transform(
                TransformOperations(
                    resize=ResizeOperation(method=ResizeMethod.COVER, width=150, height=100),
                    convert=ConvertOperation(
                        formats=[ImageFormat.WEBP, ImageFormat.PNG],
                        background=(255, 255, 255),
                    ),
                )
            )
            with thumbnail:
                print(f"Thumbnail: {thumbnail.width}x{thumbnail.height} {thumbnail.content_type}")
                await thumbnail.to_file("thumbnail.webp")

            bucket = os.getenv("S3_BUCKET")
            if bucket and os.getenv("AWS_ACCESS_KEY_ID"):
                stored = await image.transform(
                    TransformOperations(
                        store=AwsCloudStoreOperation(
                            aws_access_key_id=os.environ["AWS_ACCESS_KEY_ID"],
                            aws_secret_access_key=os.environ["AWS_SECRET_ACCESS_KEY"],
                            region=os.getenv("AWS_REGION", "us-east-1"),
                            path=f"{bucket}/panda.png",
                        )
                    )
                )
                print(f"Stored at: {stored.location}")

        print(f"Compressions this month: {client.compression_count}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)
    asyncio.run(main(sys.argv[1]))
