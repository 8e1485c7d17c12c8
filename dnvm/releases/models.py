"""Data models for the remote release documents."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

# Channel names accepted in addition to explicit channel versions like "8.0"
LTS = "lts"
CURRENT = "current"
PREVIEW = "preview"
NAMED_CHANNELS = (LTS, CURRENT, PREVIEW)

ACTIVE_PHASES = ("active", "maintenance")
PREVIEW_PHASES = ("preview", "go-live")


class ChannelIndex(BaseModel):
    """One entry of releases-index.json."""
    channel_version: str = Field(alias="channel-version")
    latest_release: Optional[str] = Field(default=None, alias="latest-release")
    latest_runtime: Optional[str] = Field(default=None, alias="latest-runtime")
    latest_sdk: str = Field(alias="latest-sdk")
    release_type: Optional[str] = Field(default=None, alias="release-type")
    support_phase: Optional[str] = Field(default=None, alias="support-phase")
    channel_release_index_url: str = Field(alias="releases.json")


class ReleasesIndex(BaseModel):
    releases: List[ChannelIndex] = Field(alias="releases-index")

    def get_channel_index(self, channel_version: str) -> Optional[ChannelIndex]:
        """Find the entry for an exact channel version such as ``8.0``."""
        for entry in self.releases:
            if entry.channel_version == channel_version:
                return entry
        return None

    def get_latest_release_for_channel(self, channel: str) -> Optional[ChannelIndex]:
        """Resolve a channel name to its newest index entry, or None if unknown."""
        channel = channel.lower()
        # The index is ordered newest channel first
        if channel == LTS:
            matches = (e for e in self.releases
                       if e.release_type == "lts" and e.support_phase in ACTIVE_PHASES)
        elif channel == CURRENT:
            matches = (e for e in self.releases if e.support_phase in ACTIVE_PHASES)
        elif channel == PREVIEW:
            matches = (e for e in self.releases if e.support_phase in PREVIEW_PHASES)
        else:
            return self.get_channel_index(channel)
        return next(matches, None)


class ComponentVersion(BaseModel):
    version: str


class ChannelRelease(BaseModel):
    """One release of a channel's releases.json."""
    release_version: str = Field(alias="release-version")
    runtime: ComponentVersion
    sdk: ComponentVersion
    aspnetcore_runtime: ComponentVersion = Field(alias="aspnetcore-runtime")
    sdks: List[ComponentVersion] = Field(default_factory=list)

    def has_sdk(self, sdk_version: str) -> bool:
        return self.sdk.version == sdk_version or any(s.version == sdk_version for s in self.sdks)


class ChannelReleaseIndex(BaseModel):
    releases: List[ChannelRelease]

    def find_release_for_sdk(self, sdk_version: str) -> Optional[ChannelRelease]:
        for release in self.releases:
            if release.has_sdk(sdk_version):
                return release
        return None


class LatestVersion(BaseModel):
    version: str
    artifacts: Dict[str, str]


class SelfReleases(BaseModel):
    """Document advertising the latest published dnvm binaries."""
    latestVersion: LatestVersion
