"""Global options: install locations and feed URLs."""

import os
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_FEED_URL = "https://dotnetcli.azureedge.net/dotnet"
DEFAULT_RELEASES_URL = "https://commentout.com/dnvm/releases.json"
MANIFEST_FILE_NAME = "dnvmManifest.json"
DEFAULT_SDK_DIR_NAME = "dn"


def normalize_feed_url(url: str) -> str:
    return url.rstrip("/")


def default_home() -> Path:
    if platform.system() == "Windows":
        base = os.environ.get("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
        return Path(base) / "dnvm"
    base = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(base) / "dnvm"


@dataclass
class GlobalOptions:
    home: Path
    feed_url: str = DEFAULT_FEED_URL
    releases_url: str = DEFAULT_RELEASES_URL

    def __post_init__(self):
        self.home = Path(self.home)
        self.feed_url = normalize_feed_url(self.feed_url)

    @property
    def manifest_path(self) -> Path:
        return self.home / MANIFEST_FILE_NAME

    def sdk_install_dir(self, sdk_dir_name: str) -> Path:
        return self.home / sdk_dir_name

    def with_feed_url(self, feed_url: Optional[str]) -> "GlobalOptions":
        """Copy with a per-command feed override applied."""
        if not feed_url:
            return self
        return GlobalOptions(self.home, feed_url, self.releases_url)

    @classmethod
    def from_env(cls) -> "GlobalOptions":
        home = os.environ.get("DNVM_HOME")
        return cls(
            home=Path(home) if home else default_home(),
            feed_url=os.environ.get("DNVM_FEED_URL", DEFAULT_FEED_URL),
            releases_url=os.environ.get("DNVM_RELEASES_URL", DEFAULT_RELEASES_URL),
        )
