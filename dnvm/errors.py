"""Exceptions and command results."""

from enum import IntEnum


class DnvmError(Exception):
    """Base exception for dnvm errors."""
    pass


class ManifestFileCorrupted(DnvmError):
    """Raised when the manifest file exists but cannot be parsed."""
    pass


class ManifestIOError(DnvmError):
    """Raised when the manifest file cannot be read or written."""
    pass


class FetchError(DnvmError):
    """Raised when an HTTP request fails or returns a non-success status."""

    def __init__(self, url: str, message: str, status: int = 0):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.status = status


class CouldntFetchIndex(DnvmError):
    """Raised when the releases index cannot be fetched or parsed."""
    pass


class CouldntFetchReleaseInfo(DnvmError):
    """Raised when a channel's release detail document cannot be fetched or parsed."""
    pass


class Result(IntEnum):
    """Terminal outcome of a command. The value is the process exit code."""

    SUCCESS = 0
    COULDNT_FETCH_LATEST_VERSION = 1
    INSTALL_LOCATION_NOT_WRITABLE = 2
    NOT_A_SINGLE_FILE = 3
    EXTRACT_FAILED = 4
    SELF_UPDATE_FAILED = 5
    MANIFEST_IO_ERROR = 6
    MANIFEST_FILE_CORRUPTED = 7
    CHANNEL_ALREADY_TRACKED = 8
    COULDNT_FETCH_INDEX = 9
    COULDNT_FETCH_RELEASE_INFO = 10
    COULDNT_FETCH_RELEASES = 11
    BAD_DIR_NAME = 12

    @property
    def is_success(self) -> bool:
        # Already tracked means the desired end state holds
        return self in (Result.SUCCESS, Result.CHANNEL_ALREADY_TRACKED)

    @property
    def exit_code(self) -> int:
        return 0 if self.is_success else int(self)
