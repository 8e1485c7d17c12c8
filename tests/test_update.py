"""Tests for update reconciliation and the update command."""

from unittest.mock import MagicMock

import pytest
import semver

from dnvm.commands import UpdateCommand, find_potential_updates
from dnvm.errors import Result
from dnvm.manifest import InstalledSdk, Manifest, TrackedChannel, read_or_create_manifest, write_manifest
from dnvm.releases import ReleasesIndex

from conftest import (
    FEED,
    StubHTTPClient,
    archive_url,
    channel_entry,
    channel_releases,
    sdk_archive,
    unix_only,
)

INDEX_URL = f"{FEED}/release-metadata/releases-index.json"


def manifest_with(channels) -> Manifest:
    """Build a manifest from ``{channel: [versions]}``."""
    tracked = []
    installed = []
    for channel, versions in channels.items():
        tracked.append(TrackedChannel(channel_name=channel, installed_sdk_versions=tuple(versions)))
        for v in versions:
            installed.append(InstalledSdk(release_version=v, runtime_version=v, aspnet_version=v,
                                          channel=channel, sdk_version=v))
    return Manifest(tracked_channels=tuple(tracked), installed_sdk_versions=tuple(installed))


def index_of(*entries) -> ReleasesIndex:
    return ReleasesIndex.model_validate({"releases-index": list(entries)})


def test_finds_only_strictly_newer_channels():
    manifest = manifest_with({
        "lts": ["8.0.100"],
        "current": ["9.0.305"],
        "preview": ["10.0.100-preview.1"],
    })
    index = index_of(
        channel_entry("10.0", "10.0.100-rc.2.25502.107", support_phase="preview"),
        channel_entry("9.0", "9.0.305"),
        channel_entry("8.0", "8.0.414", release_type="lts"),
    )

    updates = find_potential_updates(manifest, index)

    assert [(u.channel, str(u.newest_available)) for u in updates] == [
        ("lts", "8.0.414"),
        ("preview", "10.0.100-rc.2.25502.107"),
    ]
    assert updates[0].newest_installed == semver.Version.parse("8.0.100")
    assert updates[0].channel_index.channel_version == "8.0"


def test_channels_missing_from_index_are_skipped():
    manifest = manifest_with({"7.0": ["7.0.100"], "preview": ["9.0.100-rc.1"]})
    index = index_of(channel_entry("9.0", "9.0.305"))
    assert find_potential_updates(manifest, index) == []


def test_unparsable_available_version_is_skipped():
    manifest = manifest_with({"8.0": ["8.0.100"], "9.0": ["9.0.100"]})
    index = index_of(channel_entry("9.0", "9.0.200"), channel_entry("8.0", "8.0"))
    assert [u.channel for u in find_potential_updates(manifest, index)] == ["9.0"]


def test_newest_installed_uses_semver_precedence():
    # A string comparison would pick 9.0.99
    manifest = manifest_with({"current": ["9.0.99", "9.0.100-rc.1"]})
    index = index_of(channel_entry("9.0", "9.0.100"))

    updates = find_potential_updates(manifest, index)

    assert len(updates) == 1
    assert str(updates[0].newest_installed) == "9.0.100-rc.1"


def test_prerelease_is_older_than_release():
    manifest = manifest_with({"current": ["9.0.100"]})
    index = index_of(channel_entry("9.0", "9.0.100-rc.1"))
    assert find_potential_updates(manifest, index) == []


def test_channel_without_installs_is_updatable():
    manifest = manifest_with({"current": []})
    updates = find_potential_updates(manifest, index_of(channel_entry("9.0", "9.0.100")))
    assert [(u.channel, u.newest_installed) for u in updates] == [("current", None)]


def two_channel_feed(lts_archive, current_archive) -> StubHTTPClient:
    lts = channel_entry("8.0", "8.0.414", release_type="lts")
    current = channel_entry("9.0", "9.0.200")
    responses = {
        INDEX_URL: {"releases-index": [current, lts]},
        lts["releases.json"]: channel_releases("8.0.20", "8.0.414"),
        current["releases.json"]: channel_releases("9.0.8", "9.0.200"),
    }
    if lts_archive is not None:
        responses[archive_url("8.0.414")] = lts_archive
    if current_archive is not None:
        responses[archive_url("9.0.200")] = current_archive
    return StubHTTPClient(responses)


@unix_only
@pytest.mark.asyncio
async def test_failed_channel_does_not_block_others(options, plat):
    await write_manifest(manifest_with({"lts": ["8.0.100"], "current": ["9.0.100"]}), options.manifest_path)
    http = two_channel_feed(lts_archive=None, current_archive=sdk_archive())

    result = await UpdateCommand(options, http, plat, yes=True).run()

    assert result == Result.COULDNT_FETCH_LATEST_VERSION
    manifest = await read_or_create_manifest(options.manifest_path)
    assert manifest.get_tracked_channel("lts").installed_sdk_versions == ("8.0.100",)
    assert manifest.get_tracked_channel("current").installed_sdk_versions == ("9.0.100", "9.0.200")
    assert archive_url("9.0.200") in http.requested


@unix_only
@pytest.mark.asyncio
async def test_updates_all_channels(options, plat):
    await write_manifest(manifest_with({"lts": ["8.0.100"], "current": ["9.0.100"]}), options.manifest_path)
    http = two_channel_feed(sdk_archive(), sdk_archive())

    result = await UpdateCommand(options, http, plat, yes=True).run()

    assert result == Result.SUCCESS
    manifest = await read_or_create_manifest(options.manifest_path)
    assert [s.sdk_version for s in manifest.installed_sdk_versions] == ["8.0.100", "9.0.100", "8.0.414", "9.0.200"]


@pytest.mark.asyncio
async def test_declined_prompt_installs_nothing(options, plat):
    await write_manifest(manifest_with({"lts": ["8.0.100"]}), options.manifest_path)
    before = options.manifest_path.read_bytes()
    http = two_channel_feed(sdk_archive(), sdk_archive())
    prompt = MagicMock(return_value="n")

    result = await UpdateCommand(options, http, plat, prompt=prompt).run()

    assert result == Result.SUCCESS
    prompt.assert_called_once()
    assert http.requested == [INDEX_URL]
    assert options.manifest_path.read_bytes() == before


@pytest.mark.asyncio
async def test_index_unavailable(options, plat):
    result = await UpdateCommand(options, StubHTTPClient(), plat, yes=True).run()
    assert result == Result.COULDNT_FETCH_INDEX


def test_channel_with_only_unparsable_installs_is_skipped():
    manifest = manifest_with({"9.0": ["9.0"], "current": []})
    index = index_of(channel_entry("9.0", "9.0.100"))
    assert [u.channel for u in find_potential_updates(manifest, index)] == ["current"]


def test_unparsable_installed_versions_are_ignored():
    manifest = manifest_with({"current": ["9.0", "9.0.100"]})
    index = index_of(channel_entry("9.0", "9.0.200"))

    updates = find_potential_updates(manifest, index)

    assert [str(u.newest_installed) for u in updates] == ["9.0.100"]


@pytest.mark.asyncio
async def test_closed_stdin_installs_nothing(options, plat):
    await write_manifest(manifest_with({"lts": ["8.0.100"]}), options.manifest_path)
    before = options.manifest_path.read_bytes()
    http = two_channel_feed(sdk_archive(), sdk_archive())
    prompt = MagicMock(side_effect=EOFError)

    result = await UpdateCommand(options, http, plat, prompt=prompt).run()

    assert result == Result.SUCCESS
    prompt.assert_called_once()
    assert http.requested == [INDEX_URL]
    assert options.manifest_path.read_bytes() == before
