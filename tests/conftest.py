"""Shared fixtures: a stub HTTP client and canned release documents."""

import io
import json
import sys
import tarfile
from pathlib import Path
from typing import Dict, Optional

import pytest

from dnvm.config import GlobalOptions
from dnvm.errors import FetchError
from dnvm.utils.platform import Arch, OsKind, Rid, UnixPlatform

FEED = "https://feed.test/dotnet"
RELEASES_URL = "https://feed.test/dnvm/releases.json"

unix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs symlinks and /bin/sh")


class StubHTTPClient:
    """Serves canned bytes per URL; anything else is a 404."""

    def __init__(self, responses: Optional[Dict[str, object]] = None):
        self.responses = dict(responses or {})
        self.requested = []

    def _get(self, url: str):
        self.requested.append(url)
        value = self.responses.get(url)
        if value is None:
            raise FetchError(url, "HTTP 404", 404)
        if isinstance(value, Exception):
            raise value
        return value

    async def get_json(self, url: str):
        value = self._get(url)
        if isinstance(value, (bytes, str)):
            return json.loads(value)
        return value

    async def download(self, url: str, dest: Path) -> None:
        dest.write_bytes(self._get(url))


def make_tar_gz(files: Dict[str, bytes], mode: int = 0o644) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = mode
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def channel_entry(channel_version: str, latest_sdk: str, release_type: str = "sts",
                  support_phase: str = "active") -> dict:
    return {
        "channel-version": channel_version,
        "latest-release": channel_version + ".0",
        "latest-runtime": channel_version + ".0",
        "latest-sdk": latest_sdk,
        "release-type": release_type,
        "support-phase": support_phase,
        "releases.json": f"{FEED}/release-metadata/{channel_version}/releases.json",
    }


def channel_releases(release_version: str, sdk_version: str) -> dict:
    return {
        "releases": [
            {
                "release-version": release_version,
                "runtime": {"version": release_version},
                "sdk": {"version": sdk_version},
                "aspnetcore-runtime": {"version": release_version},
            }
        ]
    }


def archive_url(version: str, rid: str = "linux-x64") -> str:
    return f"{FEED}/Sdk/{version}/dotnet-sdk-{version}-{rid}.tar.gz"


def sdk_archive() -> bytes:
    return make_tar_gz({
        "dotnet": b"#!/bin/sh\necho dotnet\n",
        "sdk/placeholder.txt": b"sdk",
    })


@pytest.fixture
def options(tmp_path):
    return GlobalOptions(home=tmp_path / "dnvm", feed_url=FEED + "/", releases_url=RELEASES_URL)


@pytest.fixture
def plat():
    return UnixPlatform(Rid(OsKind.LINUX, Arch.X64))


@pytest.fixture
def http():
    return StubHTTPClient()
