"""Archive extraction."""

import asyncio
import logging
import tarfile
import zipfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def _extract(archive_path: Path, dest_dir: Path) -> None:
    dest_dir.mkdir(parents=True, exist_ok=True)
    if archive_path.name.endswith(".zip"):
        with zipfile.ZipFile(archive_path, 'r') as zip_ref:
            zip_ref.extractall(dest_dir)
    else:
        with tarfile.open(archive_path, 'r:*') as tar:
            if hasattr(tarfile, "data_filter"):
                tar.extractall(dest_dir, filter="data")
            else:
                tar.extractall(dest_dir)


async def extract_archive_to_dir(archive_path: Path, dest_dir: Path) -> Optional[str]:
    """Extract an archive into ``dest_dir``.

    Returns None on success, or an error message describing the failure.
    """
    logger.debug(f"Extracting {archive_path} to {dest_dir}")
    try:
        await asyncio.to_thread(_extract, archive_path, dest_dir)
    except (tarfile.TarError, zipfile.BadZipFile, OSError, EOFError) as e:
        return str(e) or type(e).__name__
    return None
