"""Tests for dnvm self-update."""

import pytest

from dnvm.errors import Result
from dnvm.updater import SelfUpdater
from dnvm.utils.platform import Arch, OsKind, Rid, UnixPlatform

from conftest import RELEASES_URL, StubHTTPClient, make_tar_gz, unix_only

ARTIFACT_URL = "https://feed.test/dnvm/1.2.0/dnvm-1.2.0-linux-x64.tar.gz"
ORIGINAL = b"#!/bin/sh\necho original dnvm\n"


def releases_doc() -> dict:
    return {"latestVersion": {"version": "1.2.0", "artifacts": {"linux-x64": ARTIFACT_URL}}}


def artifact_feed(script: str) -> StubHTTPClient:
    return StubHTTPClient({
        RELEASES_URL: releases_doc(),
        ARTIFACT_URL: make_tar_gz({"dnvm": script.encode()}, mode=0o755),
    })


@pytest.fixture
def running_exe(tmp_path):
    exe = tmp_path / "bin" / "dnvm"
    exe.parent.mkdir()
    exe.write_bytes(ORIGINAL)
    return exe


@pytest.mark.asyncio
async def test_refuses_when_not_single_file(plat, running_exe):
    http = artifact_feed("#!/bin/sh\necho 'usage: dnvm'\n")
    updater = SelfUpdater(http, RELEASES_URL, plat, process_path=running_exe, single_file=False)

    assert await updater.update() == Result.NOT_A_SINGLE_FILE
    assert http.requested == []


@pytest.mark.asyncio
async def test_release_link_uses_x64_artifact():
    arm = UnixPlatform(Rid(OsKind.LINUX, Arch.ARM64))
    updater = SelfUpdater(artifact_feed(""), RELEASES_URL, arm, single_file=True)
    assert await updater.get_release_link() == ARTIFACT_URL


@pytest.mark.asyncio
async def test_missing_artifact_for_platform(running_exe):
    mac = UnixPlatform(Rid(OsKind.OSX, Arch.X64))
    updater = SelfUpdater(artifact_feed(""), RELEASES_URL, mac, process_path=running_exe, single_file=True)
    assert await updater.update() == Result.COULDNT_FETCH_RELEASES


@unix_only
@pytest.mark.asyncio
async def test_nonzero_exit_never_swaps(plat, running_exe):
    http = artifact_feed("#!/bin/sh\necho 'usage: dnvm'\necho broken >&2\nexit 3\n")
    updater = SelfUpdater(http, RELEASES_URL, plat, process_path=running_exe, single_file=True)

    assert await updater.update() == Result.SELF_UPDATE_FAILED
    assert running_exe.read_bytes() == ORIGINAL
    assert sorted(p.name for p in running_exe.parent.iterdir()) == ["dnvm"]


@unix_only
@pytest.mark.asyncio
async def test_missing_usage_never_swaps(plat, running_exe):
    http = artifact_feed("#!/bin/sh\necho hello\n")
    updater = SelfUpdater(http, RELEASES_URL, plat, process_path=running_exe, single_file=True)

    assert await updater.update() == Result.SELF_UPDATE_FAILED
    assert running_exe.read_bytes() == ORIGINAL


@unix_only
@pytest.mark.asyncio
async def test_successful_update_swaps_binary(plat, running_exe):
    script = "#!/bin/sh\necho 'usage: dnvm [-h] {track,update}'\n"
    updater = SelfUpdater(artifact_feed(script), RELEASES_URL, plat, process_path=running_exe, single_file=True)

    assert await updater.update() == Result.SUCCESS
    assert running_exe.read_text() == script
    # Unix allows deleting the running file, so no backup is kept
    assert not running_exe.with_name("dnvm.bak").exists()


def test_swap_failure_keeps_backup(plat, running_exe, tmp_path):
    updater = SelfUpdater(StubHTTPClient(), RELEASES_URL, plat, process_path=running_exe, single_file=True)

    assert updater.swap_with_running_file(tmp_path / "does-not-exist") is False
    assert running_exe.with_name("dnvm.bak").read_bytes() == ORIGINAL
