"""Common utilities."""

from .async_http import AsyncHTTPClient
from .logger import setup_logging
from .platform import PlatformAdapter, Rid, detect_platform

__all__ = ["AsyncHTTPClient", "setup_logging", "PlatformAdapter", "Rid", "detect_platform"]
