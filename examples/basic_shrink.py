#!/usr/bin/env python3
"""
Basic compression example.

This example demonstrates the simplest way to use tinify-lib-python
to compress an image and save the result.

Usage:
    export TINIFY_API_KEY="your-api-key"
    python examples/basic_shrink.py input.png output.png
"""

import asyncio
import sys

from tinify_lib_python import TinifyClient, TinifyError
from tinify_lib_python.transport import close_global_registry


async def main(source: str, destination: str) -> None:
    """Run basic compression example."""
    # API key is read from TINIFY_API_KEY
    client = await TinifyClient.create()

    try:
        if not await client.validate():
            print("Unexpected response while validating the key")
            return

        async with await client.shrink_from_file(source) as image:
            print(f"Uploaded: {image.location}")
            print(f"Compressed size: {image.image_size} bytes ({image.image_type})")
            await image.to_file(destination)

        print(f"Saved to {destination}")
        print(f"Compressions this month: {client.compression_count}")

    except TinifyError as e:
        print(f"Compression failed [{e.kind.value}]: {e}")

    finally:
        await close_global_registry()


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(1)
    asyncio.run(main(sys.argv[1], sys.argv[2]))
