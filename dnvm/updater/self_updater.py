"""Self-update: replace the running dnvm executable with the latest release."""

import asyncio
import logging
import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..errors import FetchError, Result
from ..releases import fetch_self_releases
from ..utils.archive import extract_archive_to_dir
from ..utils.async_http import AsyncHTTPClient
from ..utils.platform import Arch, PlatformAdapter, is_single_file

logger = logging.getLogger(__name__)

USAGE_STRING = "usage: "


class SelfUpdater:
    def __init__(
        self,
        http: AsyncHTTPClient,
        releases_url: str,
        plat: PlatformAdapter,
        process_path: Optional[Path] = None,
        single_file: Optional[bool] = None,
    ):
        self.http = http
        self.releases_url = releases_url
        self.platform = plat
        self.process_path = Path(process_path or sys.executable)
        self.single_file = is_single_file() if single_file is None else single_file

    async def get_release_link(self) -> str:
        """Get the download URL of the latest artifact for this platform."""
        releases = await fetch_self_releases(self.http, self.releases_url)
        # Only x64 binaries are published
        rid = str(self.platform.rid.with_arch(Arch.X64))
        link = releases.latestVersion.artifacts[rid]
        logger.debug(f"Artifact download link: {link}")
        return link

    async def update(self) -> Result:
        """Download, validate and swap in the latest dnvm."""
        if not self.single_file:
            logger.error("Cannot self-update: the current executable is not deployed as a single file.")
            return Result.NOT_A_SINGLE_FILE

        try:
            link = await self.get_release_link()
        except (FetchError, ValidationError, KeyError) as e:
            logger.error(f"Could not fetch the latest dnvm release: {e}")
            return Result.COULDNT_FETCH_RELEASES

        with tempfile.TemporaryDirectory(prefix="dnvm-self-") as temp_dir:
            download_path = Path(temp_dir) / link.rsplit("/", 1)[-1]
            archive_dir = Path(temp_dir) / "extract"
            try:
                await self.http.download(link, download_path)
            except FetchError as e:
                logger.error(f"Could not download the latest dnvm: {e}")
                return Result.COULDNT_FETCH_RELEASES

            logger.debug(f"Extraction directory: {archive_dir}")
            extract_error = await extract_archive_to_dir(download_path, archive_dir)
            if extract_error is not None:
                logger.error(f"Extraction failed: {extract_error}")
                return Result.SELF_UPDATE_FAILED

            new_exe = archive_dir / self.platform.tool_exe_name
            if not await self.validate_binary(new_exe):
                return Result.SELF_UPDATE_FAILED
            if not self.swap_with_running_file(new_exe):
                return Result.SELF_UPDATE_FAILED
        return Result.SUCCESS

    async def validate_binary(self, path: Path) -> bool:
        """Check the downloaded binary runs and prints its usage."""
        try:
            self.platform.make_executable(path)
        except OSError as e:
            logger.error(f"chmod failed: {e}")
            return False

        try:
            proc = await asyncio.create_subprocess_exec(
                str(path), "--help",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await proc.communicate()
        except OSError as e:
            logger.error(f"Could not run downloaded dnvm: {e}")
            return False

        output = stdout.decode(errors="replace")
        if proc.returncode != 0:
            logger.error("Could not run downloaded dnvm:")
            logger.error(stderr.decode(errors="replace"))
            return False
        if USAGE_STRING not in output:
            logger.error(f'Downloaded dnvm did not contain "{USAGE_STRING}":')
            logger.error(output)
            return False
        return True

    def swap_with_running_file(self, new_file: Path) -> bool:
        backup_path = self.process_path.with_name(self.process_path.name + ".bak")
        logger.debug(f"Swapping {self.process_path} with downloaded version at {new_file}")
        try:
            os.replace(self.process_path, backup_path)
            if self.process_path.exists():
                raise FileExistsError(f"{self.process_path} already exists")
            shutil.move(str(new_file), str(self.process_path))
            logger.info("Process successfully upgraded")
            if self.platform.can_delete_running_file:
                backup_path.unlink()
            return True
        except OSError as e:
            logger.error(f"Couldn't replace existing binary: {e}")
            logger.error(f"The previous version is kept at {backup_path}")
            return False
