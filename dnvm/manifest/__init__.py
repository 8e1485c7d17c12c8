"""Local manifest of tracked channels and installed SDKs."""

from .models import InstalledSdk, Manifest, TrackedChannel
from .store import read_or_create_manifest, write_manifest

__all__ = ["InstalledSdk", "Manifest", "TrackedChannel", "read_or_create_manifest", "write_manifest"]
