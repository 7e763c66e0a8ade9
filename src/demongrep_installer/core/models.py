"""Data model for a single install run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class OperatingSystem(str, Enum):
    """Normalized host operating system."""

    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"


class Architecture(str, Enum):
    """Normalized host CPU architecture."""

    X86_64 = "x86_64"
    AARCH64 = "aarch64"


class VersionSource(str, Enum):
    """Where a release version came from."""

    EXPLICIT = "explicit"
    LATEST = "latest"
    FALLBACK = "fallback"


class ResolvedBy(str, Enum):
    """Which rule selected the install directory."""

    EXPLICIT = "explicit"
    SYSTEM_WIDE = "system_wide"
    USER_FALLBACK = "user_fallback"


class Stage(str, Enum):
    """States of the install procedure."""

    START = "start"
    PLATFORM_DETECTED = "platform_detected"
    VERSION_RESOLVED = "version_resolved"
    URL_CONSTRUCTED = "url_constructed"
    DOWNLOADED = "downloaded"
    VERIFIED = "verified"
    EXTRACTED = "extracted"
    BINARY_FOUND = "binary_found"
    INSTALL_DIR_RESOLVED = "install_dir_resolved"
    INSTALLED = "installed"
    DONE = "done"
    FAILED = "failed"


# Sentinel release version meaning "use the provider's latest alias"
LATEST_ALIAS = "latest"


@dataclass(frozen=True)
class PlatformTarget:
    """Normalized host platform and its release target triple."""

    os: OperatingSystem
    arch: Architecture
    triple: str


@dataclass(frozen=True)
class ReleaseVersion:
    """A release version without any leading tag prefix."""

    value: str
    source: VersionSource

    @property
    def is_fallback(self) -> bool:
        """True when metadata lookup failed and the latest alias is used."""
        return self.source == VersionSource.FALLBACK

    def __str__(self) -> str:
        return self.value


@dataclass
class DownloadJob:
    """State of a single artifact download.

    Only ``attempts_made`` changes over the life of the job.
    """

    url: str
    destination: Path
    max_attempts: int = 3
    attempts_made: int = 0

    @property
    def exhausted(self) -> bool:
        """True once no attempts remain."""
        return self.attempts_made >= self.max_attempts


@dataclass(frozen=True)
class InstallTarget:
    """The directory chosen for installation."""

    directory: Path
    resolved_by: ResolvedBy
    writable: bool


@dataclass(frozen=True)
class InstallResult:
    """Outcome of a successful install."""

    installed_path: Path
    reported_version: str
    on_path: bool
    resolved_version: str = ""
