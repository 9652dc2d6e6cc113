"""Library for writing the files of generated assets to disk."""

from collections.abc import Iterable
import logging
from pathlib import Path

import aiofiles

from .asset import GeneratedFile, WritableAsset

__all__ = [
    "write_files",
    "write_assets",
]

_LOGGER = logging.getLogger(__name__)


async def write_files(directory: Path, files: Iterable[GeneratedFile]) -> list[Path]:
    """Write the files under the directory, creating parent directories.

    Returns the paths written, in order.
    """
    written = []
    for generated in files:
        path = directory / generated.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        _LOGGER.debug("Writing %s (%d bytes)", path, len(generated.data))
        async with aiofiles.open(str(path), mode="wb") as output:
            await output.write(generated.data)
        written.append(path)
    return written


async def write_assets(directory: Path, assets: Iterable[WritableAsset]) -> list[Path]:
    """Write the files of every asset under the directory."""
    written = []
    for asset in assets:
        _LOGGER.info("Writing files for %s", asset.name())
        written.extend(await write_files(directory, asset.files()))
    return written
