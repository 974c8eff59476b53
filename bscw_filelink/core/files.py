"""Streaming of local files as upload payloads."""

from collections.abc import AsyncGenerator
from pathlib import Path

import aiofiles

DEFAULT_CHUNK_SIZE = 64 * 1024


async def read_file_chunks(
    path: Path | str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> AsyncGenerator[bytes, None]:
    """
    Read a file in chunks without blocking the event loop.

    Args:
        path: Local file path.
        chunk_size: Maximum size of each chunk.

    Yields:
        File content in chunks.
    """
    async with aiofiles.open(path, "rb") as f:
        while True:
            chunk = await f.read(chunk_size)
            if not chunk:
                break
            yield chunk
