"""Data models for the local manifest of tracked channels and installed SDKs."""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, model_validator

from ..config import DEFAULT_SDK_DIR_NAME


class InstalledSdk(BaseModel):
    model_config = ConfigDict(frozen=True)

    release_version: str
    runtime_version: str
    aspnet_version: str
    channel: str
    sdk_version: str
    sdk_dir_name: str = DEFAULT_SDK_DIR_NAME


class TrackedChannel(BaseModel):
    model_config = ConfigDict(frozen=True)

    channel_name: str
    sdk_dir_name: str = DEFAULT_SDK_DIR_NAME
    installed_sdk_versions: Tuple[str, ...] = ()


class Manifest(BaseModel):
    """Persisted record of tracked channels and installed SDKs.

    Instances are immutable; the ``with_*`` methods return updated copies
    which callers persist explicitly.
    """
    model_config = ConfigDict(frozen=True)

    tracked_channels: Tuple[TrackedChannel, ...] = ()
    installed_sdk_versions: Tuple[InstalledSdk, ...] = ()

    @model_validator(mode="after")
    def _check_invariants(self) -> "Manifest":
        names = [t.channel_name for t in self.tracked_channels]
        if len(names) != len(set(names)):
            raise ValueError("a channel is tracked more than once")
        installed = {sdk.sdk_version for sdk in self.installed_sdk_versions}
        for tracked in self.tracked_channels:
            missing = [v for v in tracked.installed_sdk_versions if v not in installed]
            if missing:
                raise ValueError(
                    f"channel '{tracked.channel_name}' lists versions that are not installed: {missing}"
                )
        return self

    def get_tracked_channel(self, channel: str) -> Optional[TrackedChannel]:
        for tracked in self.tracked_channels:
            if tracked.channel_name == channel:
                return tracked
        return None

    def is_tracked(self, channel: str) -> bool:
        return self.get_tracked_channel(channel) is not None

    def find_installed_sdk(self, sdk_version: str, sdk_dir_name: str) -> Optional[InstalledSdk]:
        for sdk in self.installed_sdk_versions:
            if sdk.sdk_version == sdk_version and sdk.sdk_dir_name == sdk_dir_name:
                return sdk
        return None

    def with_tracked_channel(self, tracked: TrackedChannel) -> "Manifest":
        if self.is_tracked(tracked.channel_name):
            raise ValueError(f"Channel '{tracked.channel_name}' is already tracked")
        return self.model_copy(update={"tracked_channels": self.tracked_channels + (tracked,)})

    def with_channel_version(self, channel: str, sdk_version: str) -> "Manifest":
        """Record ``sdk_version`` under ``channel`` if the channel is tracked."""
        tracked = []
        for t in self.tracked_channels:
            if t.channel_name == channel and sdk_version not in t.installed_sdk_versions:
                t = t.model_copy(update={"installed_sdk_versions": t.installed_sdk_versions + (sdk_version,)})
            tracked.append(t)
        return self.model_copy(update={"tracked_channels": tuple(tracked)})

    def with_installed_sdk(self, sdk: InstalledSdk) -> "Manifest":
        """Add ``sdk`` and record its version under its channel.

        A reinstall of the same version into the same directory replaces the
        existing record in place.
        """
        existing = self.find_installed_sdk(sdk.sdk_version, sdk.sdk_dir_name)
        if existing is None:
            installed = self.installed_sdk_versions + (sdk,)
        else:
            installed = tuple(sdk if s is existing else s for s in self.installed_sdk_versions)
        manifest = self.model_copy(update={"installed_sdk_versions": installed})
        return manifest.with_channel_version(sdk.channel, sdk.sdk_version)
