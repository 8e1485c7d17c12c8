"""``dnvm update``: install newer SDKs for every tracked channel."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import semver

from ..config import GlobalOptions
from ..errors import CouldntFetchIndex, ManifestFileCorrupted, ManifestIOError, Result
from ..install import Installer
from ..manifest import Manifest, read_or_create_manifest
from ..releases import ChannelIndex, ReleasesIndex, fetch_latest_index
from ..updater import SelfUpdater
from ..utils.async_http import AsyncHTTPClient
from ..utils.platform import PlatformAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PotentialUpdate:
    channel: str
    newest_installed: Optional[semver.Version]
    newest_available: semver.Version
    channel_index: ChannelIndex


def parse_version(version: str) -> Optional[semver.Version]:
    try:
        return semver.Version.parse(version)
    except (ValueError, TypeError):
        return None


def find_potential_updates(manifest: Manifest, releases_index: ReleasesIndex) -> List[PotentialUpdate]:
    """List tracked channels whose latest SDK is newer than anything installed for them.

    Channels missing from the index, or whose advertised or installed
    versions don't parse, are skipped.
    """
    updates = []
    for tracked in manifest.tracked_channels:
        installed = [v for v in map(parse_version, tracked.installed_sdk_versions) if v is not None]
        if tracked.installed_sdk_versions and not installed:
            logger.debug(f"No parsable installed version for '{tracked.channel_name}'")
            continue
        newest_installed = max(installed) if installed else None

        channel_index = releases_index.get_latest_release_for_channel(tracked.channel_name)
        if channel_index is None:
            logger.debug(f"Channel '{tracked.channel_name}' not found in the releases index")
            continue
        newest_available = parse_version(channel_index.latest_sdk)
        if newest_available is None:
            logger.debug(f"Unparsable SDK version '{channel_index.latest_sdk}' for '{tracked.channel_name}'")
            continue

        if newest_installed is None or newest_installed < newest_available:
            updates.append(PotentialUpdate(tracked.channel_name, newest_installed, newest_available, channel_index))
    return updates


class UpdateCommand:
    def __init__(
        self,
        options: GlobalOptions,
        http: AsyncHTTPClient,
        plat: PlatformAdapter,
        yes: bool = False,
        self_update: bool = False,
        prompt: Callable[[str], str] = input,
    ):
        self.options = options
        self.http = http
        self.platform = plat
        self.yes = yes
        self.self_update = self_update
        self.prompt = prompt

    async def run(self) -> Result:
        if self.self_update:
            updater = SelfUpdater(self.http, self.options.releases_url, self.platform)
            return await updater.update()

        try:
            releases_index = await fetch_latest_index(self.http, self.options.feed_url)
        except CouldntFetchIndex as e:
            logger.error(str(e))
            return Result.COULDNT_FETCH_INDEX

        try:
            manifest = await read_or_create_manifest(self.options.manifest_path)
        except ManifestFileCorrupted as e:
            logger.error(f"Manifest file corrupted: {e}")
            return Result.MANIFEST_FILE_CORRUPTED
        except ManifestIOError as e:
            logger.error(str(e))
            return Result.MANIFEST_IO_ERROR

        logger.info("Looking for available updates")
        updates = find_potential_updates(manifest, releases_index)
        if not updates:
            logger.info("No updates available")
            return Result.SUCCESS

        logger.info("Found versions available for update")
        logger.info("Channel\tInstalled\tAvailable")
        logger.info("-------------------------------------------------")
        for update in updates:
            logger.info(f"{update.channel}\t{update.newest_installed or '-'}\t{update.newest_available}")

        if self.yes:
            response = "y"
        else:
            try:
                response = self.prompt("Install updates? [y/N]: ")
            except EOFError:
                # No answer on a closed stdin means no
                response = ""
        if response.strip().lower() != "y":
            return Result.SUCCESS

        return await self.apply_updates(manifest, updates)

    async def apply_updates(self, manifest: Manifest, updates: List[PotentialUpdate]) -> Result:
        """Install each update independently; a failure doesn't stop the rest."""
        installer = Installer(self.http, self.options, self.platform)
        first_failure = None
        for update in updates:
            tracked = manifest.get_tracked_channel(update.channel)
            logger.info(f"Updating channel '{update.channel}' to {update.newest_available}")
            result, manifest = await installer.install_sdk(
                manifest, update.channel, update.channel_index, tracked.sdk_dir_name
            )
            if result != Result.SUCCESS:
                logger.error(f"Failed to update channel '{update.channel}': {result.name}")
                if first_failure is None:
                    first_failure = result
        return first_failure if first_failure is not None else Result.SUCCESS
