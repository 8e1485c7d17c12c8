"""The top-level ``dotnet`` launcher in the dnvm home directory."""

import logging
from pathlib import Path

from ..utils.platform import PlatformAdapter

logger = logging.getLogger(__name__)


def launcher_exists(plat: PlatformAdapter, home: Path) -> bool:
    path = plat.launcher_path(home)
    # is_symlink catches dangling links, which exists() would miss
    return path.is_symlink() or path.exists()


def retarget_launcher(plat: PlatformAdapter, home: Path, sdk_dir_name: str) -> Path:
    """Recreate the launcher so it points at ``home/sdk_dir_name``."""
    path = plat.launcher_path(home)
    path.unlink(missing_ok=True)
    logger.debug(f"Pointing {path} at {home / sdk_dir_name}")
    return plat.write_launcher(home, sdk_dir_name)


def create_launcher_if_missing(plat: PlatformAdapter, home: Path, sdk_dir_name: str) -> None:
    if not launcher_exists(plat, home):
        retarget_launcher(plat, home, sdk_dir_name)
