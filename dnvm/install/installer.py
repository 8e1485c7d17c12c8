"""SDK installation: download, extract and record in the manifest."""

import logging
import tempfile
from pathlib import Path
from typing import Tuple

from ..config import GlobalOptions
from ..errors import CouldntFetchReleaseInfo, FetchError, ManifestIOError, Result
from ..manifest import InstalledSdk, Manifest, write_manifest
from ..releases import ChannelIndex, fetch_channel_releases
from ..utils.archive import extract_archive_to_dir
from ..utils.async_http import AsyncHTTPClient
from ..utils.platform import PlatformAdapter, Rid
from .launcher import create_launcher_if_missing

logger = logging.getLogger(__name__)


def construct_archive_name(version: str, rid: Rid, suffix: str) -> str:
    return f"dotnet-sdk-{version}-{rid}{suffix}"


def construct_download_link(feed_url: str, version: str, archive_name: str) -> str:
    return f"{feed_url}/Sdk/{version}/{archive_name}"


class Installer:
    """Installs SDK versions into the dnvm home and keeps the manifest in sync."""

    def __init__(self, http: AsyncHTTPClient, options: GlobalOptions, plat: PlatformAdapter):
        self.http = http
        self.options = options
        self.platform = plat

    async def install_sdk(
        self,
        manifest: Manifest,
        channel: str,
        channel_index: ChannelIndex,
        sdk_dir_name: str,
        force: bool = False,
    ) -> Tuple[Result, Manifest]:
        """Install the latest SDK of ``channel_index`` and record it under ``channel``.

        Returns the result and the manifest as it now stands on disk. On any
        failure the returned manifest is the one passed in.
        """
        version = channel_index.latest_sdk
        tracked = manifest.get_tracked_channel(channel)

        if not force:
            if tracked is not None and version in tracked.installed_sdk_versions:
                logger.info(f"Version {version} is already installed."
                            " Skipping installation. To install anyway, pass --force.")
                return Result.SUCCESS, manifest
            if manifest.find_installed_sdk(version, sdk_dir_name) is not None:
                # Only the version number is compared, not the release metadata
                logger.info(f"Version {version} is already installed in '{sdk_dir_name}',"
                            f" recording it under channel '{channel}'.")
                return await self._persist(manifest.with_channel_version(channel, version), manifest)

        try:
            release_index = await fetch_channel_releases(self.http, channel_index)
        except CouldntFetchReleaseInfo as e:
            logger.error(str(e))
            return Result.COULDNT_FETCH_RELEASE_INFO, manifest
        release = release_index.find_release_for_sdk(version)
        if release is None:
            logger.error(f"No release in channel {channel_index.channel_version} contains SDK {version}")
            return Result.COULDNT_FETCH_RELEASE_INFO, manifest

        result = await self.install_sdk_version(version, sdk_dir_name)
        if result != Result.SUCCESS:
            return result, manifest

        logger.debug(f"Adding installed version '{version}' to manifest.")
        new_manifest = manifest.with_installed_sdk(InstalledSdk(
            release_version=release.release_version,
            runtime_version=release.runtime.version,
            aspnet_version=release.aspnetcore_runtime.version,
            channel=channel,
            sdk_version=version,
            sdk_dir_name=sdk_dir_name,
        ))
        result, new_manifest = await self._persist(new_manifest, manifest)
        if result == Result.SUCCESS:
            logger.info("Successfully installed")
        return result, new_manifest

    async def install_sdk_version(self, version: str, sdk_dir_name: str) -> Result:
        """Download and extract one SDK version. Does not touch the manifest."""
        rid = self.platform.rid
        home = self.options.home
        sdk_install_path = self.options.sdk_install_dir(sdk_dir_name)
        archive_name = construct_archive_name(version, rid, self.platform.archive_suffix)
        link = construct_download_link(self.options.feed_url, version, archive_name)
        logger.debug(f"Download link: {link}")

        with tempfile.TemporaryDirectory(prefix="dnvm-") as temp_dir:
            archive_path = Path(temp_dir) / archive_name
            logger.debug(f"Archive path: {archive_path}")

            logger.info(f"Downloading dotnet SDK {version}...")
            try:
                await self.http.download(link, archive_path)
            except FetchError as e:
                logger.error(f"Failed to download SDK archive: {e}")
                return Result.COULDNT_FETCH_LATEST_VERSION

            logger.info(f"Installing to {sdk_install_path}")
            extract_error = await extract_archive_to_dir(archive_path, sdk_install_path)
            if extract_error is not None:
                logger.error(f"Extract failed: {extract_error}")
                return Result.EXTRACT_FAILED

        dotnet_exe = sdk_install_path / self.platform.exe_name
        try:
            logger.debug("chmoding downloaded host")
            self.platform.make_executable(dotnet_exe)
        except OSError as e:
            logger.error(f"chmod failed: {e}")
            return Result.EXTRACT_FAILED

        try:
            create_launcher_if_missing(self.platform, home, sdk_dir_name)
        except OSError as e:
            logger.error(f"Could not create launcher in {home}: {e}")
            return Result.INSTALL_LOCATION_NOT_WRITABLE
        return Result.SUCCESS

    async def _persist(self, new_manifest: Manifest, old_manifest: Manifest) -> Tuple[Result, Manifest]:
        logger.debug("Writing manifest")
        try:
            await write_manifest(new_manifest, self.options.manifest_path)
        except ManifestIOError as e:
            logger.error(str(e))
            return Result.MANIFEST_IO_ERROR, old_manifest
        return Result.SUCCESS, new_manifest
