"""Async HTTP client utilities."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import aiofiles
import aiohttp

from ..errors import FetchError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
REQUEST_TIMEOUT = 300


class AsyncHTTPClient:
    """Reusable async HTTP client.

    One instance is opened per process and passed to every component that
    talks to the network. Any transport failure or non-success status is
    raised as ``FetchError``.
    """

    def __init__(self, headers: Optional[Dict[str, str]] = None, timeout: int = REQUEST_TIMEOUT):
        self.default_headers = headers or {}
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(headers=self.default_headers, timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self.session:
            await self.session.close()

    async def get_json(self, url: str) -> Dict[str, Any]:
        """GET request returning the body parsed as JSON."""
        logger.debug(f"GET {url}")
        try:
            async with self.session.get(url) as resp:
                if resp.status != 200:
                    raise FetchError(url, f"HTTP {resp.status}", resp.status)
                return await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise FetchError(url, str(e) or type(e).__name__) from e

    async def download(self, url: str, dest: Path) -> None:
        """Stream a file to ``dest``, flushed to disk before returning."""
        logger.debug(f"Downloading {url} -> {dest}")
        try:
            async with self.session.get(url) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    logger.debug(f"Failed response body: {body[:500]}")
                    raise FetchError(url, f"HTTP {resp.status}", resp.status)

                total_size = int(resp.headers.get('Content-Length', 0))
                downloaded = 0

                async with aiofiles.open(dest, 'wb') as f:
                    async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                        await f.write(chunk)
                        downloaded += len(chunk)
                    await f.flush()
                    os.fsync(f.fileno())

                logger.debug(f"Downloaded {downloaded} of {total_size} bytes")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(url, str(e) or type(e).__name__) from e
