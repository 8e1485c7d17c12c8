"""Platform detection and platform-specific file operations."""

import dataclasses
import glob
import os
import platform
import stat
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class OsKind(str, Enum):
    WINDOWS = "win"
    LINUX = "linux"
    OSX = "osx"


class Arch(str, Enum):
    X64 = "x64"
    X86 = "x86"
    ARM64 = "arm64"
    ARM = "arm"


@dataclass(frozen=True)
class Rid:
    """Runtime identifier, e.g. ``linux-x64`` or ``linux-musl-arm64``."""
    os: OsKind
    arch: Arch
    libc: Optional[str] = None

    def with_arch(self, arch: Arch) -> "Rid":
        return dataclasses.replace(self, arch=arch)

    def __str__(self) -> str:
        if self.libc:
            return f"{self.os.value}-{self.libc}-{self.arch.value}"
        return f"{self.os.value}-{self.arch.value}"


EXE_NAME = "dotnet"
TOOL_NAME = "dnvm"


def _detect_os() -> OsKind:
    system = platform.system().lower()
    if system == "windows":
        return OsKind.WINDOWS
    if system == "darwin":
        return OsKind.OSX
    if system == "linux":
        return OsKind.LINUX
    raise NotImplementedError(f"Unsupported operating system: {platform.system()}")


def _detect_arch() -> Arch:
    arch_map = {
        "amd64": Arch.X64,
        "x86_64": Arch.X64,
        "i386": Arch.X86,
        "i686": Arch.X86,
        "x86": Arch.X86,
        "arm64": Arch.ARM64,
        "aarch64": Arch.ARM64,
        "armv7l": Arch.ARM,
        "armv8l": Arch.ARM,
    }
    machine = platform.machine().lower()
    if machine not in arch_map:
        raise NotImplementedError(f"Unsupported architecture: {platform.machine()}")
    return arch_map[machine]


def _detect_libc(os_kind: OsKind) -> Optional[str]:
    if os_kind != OsKind.LINUX:
        return None
    libc, _ = platform.libc_ver()
    if libc != "glibc" and glob.glob("/lib/ld-musl-*"):
        return "musl"
    return None


def current_rid() -> Rid:
    os_kind = _detect_os()
    return Rid(os_kind, _detect_arch(), _detect_libc(os_kind))


class PlatformAdapter(ABC):
    """Platform-conditional behaviour, selected once at startup."""

    archive_suffix: str
    exe_suffix: str
    launcher_name: str
    can_delete_running_file: bool

    def __init__(self, rid: Rid):
        self.rid = rid

    @property
    def exe_name(self) -> str:
        return EXE_NAME + self.exe_suffix

    @property
    def tool_exe_name(self) -> str:
        return TOOL_NAME + self.exe_suffix

    @abstractmethod
    def make_executable(self, path: Path) -> None:
        """Mark ``path`` runnable. Raises OSError on failure."""

    @abstractmethod
    def write_launcher(self, home: Path, sdk_dir_name: str) -> Path:
        """Create the top-level launcher pointing at ``home/sdk_dir_name``."""

    @abstractmethod
    def read_launcher_target(self, home: Path) -> Optional[str]:
        """Return the SDK directory name the launcher points at, if any."""

    def launcher_path(self, home: Path) -> Path:
        return home / self.launcher_name


class UnixPlatform(PlatformAdapter):
    archive_suffix = ".tar.gz"
    exe_suffix = ""
    launcher_name = EXE_NAME
    can_delete_running_file = True

    def make_executable(self, path: Path) -> None:
        mode = os.stat(path).st_mode
        os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    def write_launcher(self, home: Path, sdk_dir_name: str) -> Path:
        link = self.launcher_path(home)
        os.symlink(home / sdk_dir_name / self.exe_name, link)
        return link

    def read_launcher_target(self, home: Path) -> Optional[str]:
        link = self.launcher_path(home)
        if not link.is_symlink():
            return None
        return Path(os.readlink(link)).parent.name


class WindowsPlatform(PlatformAdapter):
    archive_suffix = ".zip"
    exe_suffix = ".exe"
    launcher_name = EXE_NAME + ".cmd"
    # Windows holds a lock on a running executable
    can_delete_running_file = False

    def make_executable(self, path: Path) -> None:
        pass

    def write_launcher(self, home: Path, sdk_dir_name: str) -> Path:
        # The dotnet muxer doesn't resolve its own location through symlinks,
        # so forward to the real exe from a script instead.
        script = self.launcher_path(home)
        script.write_text(f'@echo off\r\n"%~dp0{sdk_dir_name}\\{self.exe_name}" %*\r\n')
        return script

    def read_launcher_target(self, home: Path) -> Optional[str]:
        script = self.launcher_path(home)
        if not script.exists():
            return None
        for line in script.read_text().splitlines():
            if line.startswith('"%~dp0'):
                return line[len('"%~dp0'):].split("\\", 1)[0]
        return None


def platform_for(rid: Rid) -> PlatformAdapter:
    if rid.os == OsKind.WINDOWS:
        return WindowsPlatform(rid)
    return UnixPlatform(rid)


def detect_platform() -> PlatformAdapter:
    return platform_for(current_rid())


def is_single_file() -> bool:
    """True when running as a frozen single-file executable."""
    return bool(getattr(sys, "frozen", False))
