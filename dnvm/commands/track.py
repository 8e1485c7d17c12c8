"""``dnvm track``: start tracking a channel and install its latest SDK."""

import logging
from typing import Optional

from ..config import DEFAULT_SDK_DIR_NAME, GlobalOptions
from ..errors import CouldntFetchIndex, ManifestFileCorrupted, ManifestIOError, Result
from ..install import Installer
from ..manifest import TrackedChannel, read_or_create_manifest
from ..releases import fetch_latest_index
from ..utils.async_http import AsyncHTTPClient
from ..utils.platform import PlatformAdapter

logger = logging.getLogger(__name__)


class TrackCommand:
    def __init__(
        self,
        options: GlobalOptions,
        http: AsyncHTTPClient,
        plat: PlatformAdapter,
        channel: str,
        sdk_dir: Optional[str] = None,
        force: bool = False,
    ):
        self.options = options
        self.http = http
        self.platform = plat
        self.channel = channel.lower()
        self.sdk_dir = sdk_dir or DEFAULT_SDK_DIR_NAME
        self.force = force

    async def run(self) -> Result:
        home = self.options.home
        sdk_install_path = self.options.sdk_install_dir(self.sdk_dir)
        logger.debug(f"Install Directory: {home}")
        logger.debug(f"SDK install directory: {sdk_install_path}")
        try:
            sdk_install_path.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.error("Cannot write to install location. Ensure you have appropriate permissions.")
            return Result.INSTALL_LOCATION_NOT_WRITABLE

        return await self.install_latest_from_channel()

    async def install_latest_from_channel(self) -> Result:
        try:
            manifest = await read_or_create_manifest(self.options.manifest_path)
        except ManifestFileCorrupted as e:
            logger.error(f"Manifest file corrupted: {e}")
            return Result.MANIFEST_FILE_CORRUPTED
        except ManifestIOError as e:
            logger.error(str(e))
            return Result.MANIFEST_IO_ERROR

        if manifest.is_tracked(self.channel):
            logger.info(f"Channel '{self.channel}' is already being tracked."
                        " Did you mean to run 'dnvm update'?")
            return Result.CHANNEL_ALREADY_TRACKED

        # Only persisted together with a successful install
        manifest = manifest.with_tracked_channel(TrackedChannel(
            channel_name=self.channel,
            sdk_dir_name=self.sdk_dir,
        ))

        try:
            index = await fetch_latest_index(self.http, self.options.feed_url)
        except CouldntFetchIndex as e:
            logger.error(str(e))
            return Result.COULDNT_FETCH_INDEX

        channel_index = index.get_latest_release_for_channel(self.channel)
        if channel_index is None:
            logger.error(f"Could not find the latest version for channel '{self.channel}'")
            return Result.COULDNT_FETCH_LATEST_VERSION
        logger.info(f"Found latest version: {channel_index.latest_sdk}")

        installer = Installer(self.http, self.options, self.platform)
        result, _ = await installer.install_sdk(
            manifest, self.channel, channel_index, self.sdk_dir, force=self.force
        )
        return result
