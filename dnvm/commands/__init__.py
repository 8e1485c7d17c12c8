"""Command implementations."""

from .list_sdks import list_sdks
from .select import select_sdk_dir
from .track import TrackCommand
from .update import PotentialUpdate, UpdateCommand, find_potential_updates

__all__ = [
    "list_sdks",
    "select_sdk_dir",
    "TrackCommand",
    "PotentialUpdate",
    "UpdateCommand",
    "find_potential_updates",
]
