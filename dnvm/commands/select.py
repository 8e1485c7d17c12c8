"""``dnvm select``: point the launcher at a different SDK directory."""

import logging

from ..config import GlobalOptions
from ..errors import ManifestFileCorrupted, ManifestIOError, Result
from ..install import retarget_launcher
from ..manifest import read_or_create_manifest
from ..utils.platform import PlatformAdapter

logger = logging.getLogger(__name__)


async def select_sdk_dir(options: GlobalOptions, plat: PlatformAdapter, sdk_dir_name: str) -> Result:
    try:
        manifest = await read_or_create_manifest(options.manifest_path)
    except ManifestFileCorrupted as e:
        logger.error(f"Manifest file corrupted: {e}")
        return Result.MANIFEST_FILE_CORRUPTED
    except ManifestIOError as e:
        logger.error(str(e))
        return Result.MANIFEST_IO_ERROR

    known_dirs = {t.sdk_dir_name for t in manifest.tracked_channels}
    known_dirs.update(s.sdk_dir_name for s in manifest.installed_sdk_versions)
    if sdk_dir_name not in known_dirs:
        logger.error(f"Invalid SDK directory name: {sdk_dir_name}")
        logger.error(f"Valid SDK directory names: {', '.join(sorted(known_dirs)) or '(none)'}")
        return Result.BAD_DIR_NAME

    try:
        retarget_launcher(plat, options.home, sdk_dir_name)
    except OSError as e:
        logger.error(f"Could not update launcher: {e}")
        return Result.INSTALL_LOCATION_NOT_WRITABLE
    logger.info(f"Selected SDK directory '{sdk_dir_name}'")
    return Result.SUCCESS
