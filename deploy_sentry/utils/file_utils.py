"""File operation utilities"""

import gzip
import logging
import zlib
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, Iterable

import aiofiles

from ..api.exceptions import DiscoveryError
from ..constants import GZIP_MAGIC

logger = logging.getLogger(__name__)


def is_gzip(data: bytes) -> bool:
    """Check for the gzip magic number"""
    return data[:2] == GZIP_MAGIC


async def read_bytes(file_path: Path) -> bytes:
    """Read a whole file without blocking the event loop"""
    async with aiofiles.open(file_path, 'rb') as f:
        return await f.read()


async def write_bytes(file_path: Path, data: bytes) -> None:
    """Write a whole file without blocking the event loop"""
    async with aiofiles.open(file_path, 'wb') as f:
        await f.write(data)


@asynccontextmanager
async def gunzipped(files: Iterable[Path]) -> AsyncIterator[Dict[Path, bytes]]:
    """
    Temporarily decompress pre-gzipped files in place

    Build pipelines often gzip assets before upload steps run. The release
    API needs the plain content, so every gzip-compressed file is inflated
    for the duration of the block and its original bytes are written back
    on exit, also when the block raises.

    Args:
        files: Absolute paths of candidate files

    Yields:
        Mapping of inflated file paths to their original compressed bytes

    Raises:
        DiscoveryError: If a file cannot be read, inflated or rewritten
    """
    originals: Dict[Path, bytes] = {}
    try:
        for file_path in files:
            try:
                data = await read_bytes(file_path)
            except OSError as e:
                raise DiscoveryError(f"Cannot read {file_path}: {e}", path=str(file_path)) from e
            if not is_gzip(data):
                continue

            logger.info(f"un-gzipping {file_path}")
            try:
                plain = gzip.decompress(data)
            except (OSError, EOFError, zlib.error) as e:
                raise DiscoveryError(f"Cannot un-gzip {file_path}: {e}", path=str(file_path)) from e

            originals[file_path] = data
            try:
                await write_bytes(file_path, plain)
            except OSError as e:
                raise DiscoveryError(f"Cannot write {file_path}: {e}", path=str(file_path)) from e
            logger.info(f"✔ un-gzipped {file_path}")

        yield originals

    finally:
        for file_path, data in originals.items():
            logger.info(f"restoring original {file_path} contents")
            await write_bytes(file_path, data)
            logger.info(f"✔ restored {file_path}")
