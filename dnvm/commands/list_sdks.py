"""``dnvm list``: show tracked channels and installed SDKs."""

import logging
from typing import Optional

from ..config import GlobalOptions
from ..errors import ManifestFileCorrupted, ManifestIOError, Result
from ..manifest import Manifest, read_or_create_manifest
from ..utils.platform import PlatformAdapter

logger = logging.getLogger(__name__)


def format_manifest(manifest: Manifest, active_dir: Optional[str] = None) -> str:
    lines = ["Tracked channels:"]
    for tracked in manifest.tracked_channels:
        lines.append(f"  {tracked.channel_name}\t({tracked.sdk_dir_name})")
    lines.append("")
    lines.append("Installed SDKs:")
    lines.append("  \tChannel\tVersion\tDirectory")
    for sdk in manifest.installed_sdk_versions:
        marker = "*" if sdk.sdk_dir_name == active_dir else " "
        lines.append(f"  {marker}\t{sdk.channel}\t{sdk.sdk_version}\t{sdk.sdk_dir_name}")
    return "\n".join(lines)


async def list_sdks(options: GlobalOptions, plat: PlatformAdapter) -> Result:
    try:
        manifest = await read_or_create_manifest(options.manifest_path)
    except ManifestFileCorrupted as e:
        logger.error(f"Manifest file corrupted: {e}")
        return Result.MANIFEST_FILE_CORRUPTED
    except ManifestIOError as e:
        logger.error(str(e))
        return Result.MANIFEST_IO_ERROR

    print(format_manifest(manifest, plat.read_launcher_target(options.home)))
    return Result.SUCCESS
