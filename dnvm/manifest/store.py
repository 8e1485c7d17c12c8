"""Reading and writing the manifest file."""

import logging
import os
from pathlib import Path

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from ..errors import ManifestFileCorrupted, ManifestIOError
from .models import Manifest

logger = logging.getLogger(__name__)


async def read_or_create_manifest(path: Path) -> Manifest:
    """Read the manifest at ``path``, or return an empty one if none exists."""
    try:
        if not await aiofiles.os.path.exists(path):
            logger.debug(f"No manifest at {path}, starting with an empty one")
            return Manifest()
        async with aiofiles.open(path, 'r', encoding='utf-8') as f:
            text = await f.read()
    except UnicodeDecodeError as e:
        raise ManifestFileCorrupted(f"Manifest file {path} is not valid UTF-8") from e
    except OSError as e:
        raise ManifestIOError(f"Error reading manifest file {path}: {e}") from e

    try:
        return Manifest.model_validate_json(text)
    except ValidationError as e:
        raise ManifestFileCorrupted(f"Manifest file {path} is corrupted: {e}") from e


async def write_manifest(manifest: Manifest, path: Path) -> None:
    """Persist ``manifest``, replacing the whole file at once."""
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        await aiofiles.os.makedirs(path.parent, exist_ok=True)
        async with aiofiles.open(tmp_path, 'w', encoding='utf-8') as f:
            await f.write(manifest.model_dump_json(indent=2))
            await f.flush()
            os.fsync(f.fileno())
        await aiofiles.os.replace(tmp_path, path)
    except OSError as e:
        raise ManifestIOError(f"Error writing manifest file {path}: {e}") from e
