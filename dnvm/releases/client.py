"""Fetching the releases index and per-channel release documents."""

import logging

from pydantic import ValidationError

from ..errors import CouldntFetchIndex, CouldntFetchReleaseInfo, FetchError
from ..utils.async_http import AsyncHTTPClient
from .models import ChannelIndex, ChannelReleaseIndex, ReleasesIndex, SelfReleases

logger = logging.getLogger(__name__)


def releases_index_url(feed_url: str) -> str:
    return f"{feed_url}/release-metadata/releases-index.json"


async def fetch_latest_index(http: AsyncHTTPClient, feed_url: str) -> ReleasesIndex:
    """Fetch the releases index from the feed."""
    url = releases_index_url(feed_url)
    try:
        data = await http.get_json(url)
        return ReleasesIndex.model_validate(data)
    except (FetchError, ValidationError) as e:
        raise CouldntFetchIndex(f"Could not fetch the releases index: {e}") from e


async def fetch_channel_releases(http: AsyncHTTPClient, channel_index: ChannelIndex) -> ChannelReleaseIndex:
    """Fetch the detailed release list for one channel."""
    url = channel_index.channel_release_index_url
    try:
        data = await http.get_json(url)
        return ChannelReleaseIndex.model_validate(data)
    except (FetchError, ValidationError) as e:
        raise CouldntFetchReleaseInfo(
            f"Could not fetch releases for channel {channel_index.channel_version}: {e}"
        ) from e


async def fetch_self_releases(http: AsyncHTTPClient, url: str) -> SelfReleases:
    data = await http.get_json(url)
    logger.debug(f"Releases JSON: {data}")
    return SelfReleases.model_validate(data)
