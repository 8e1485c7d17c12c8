"""SDK installation."""

from .installer import Installer, construct_archive_name, construct_download_link
from .launcher import create_launcher_if_missing, retarget_launcher

__all__ = [
    "Installer",
    "construct_archive_name",
    "construct_download_link",
    "create_launcher_if_missing",
    "retarget_launcher",
]
