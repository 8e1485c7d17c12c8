"""Remote release documents."""

from .client import fetch_channel_releases, fetch_latest_index, fetch_self_releases
from .models import (
    ChannelIndex,
    ChannelRelease,
    ChannelReleaseIndex,
    ReleasesIndex,
    SelfReleases,
)

__all__ = [
    "fetch_channel_releases",
    "fetch_latest_index",
    "fetch_self_releases",
    "ChannelIndex",
    "ChannelRelease",
    "ChannelReleaseIndex",
    "ReleasesIndex",
    "SelfReleases",
]
