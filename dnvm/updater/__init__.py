"""Self-update of the dnvm executable."""

from .self_updater import SelfUpdater

__all__ = ["SelfUpdater"]
