"""Configuration data models for demongrep-installer.

The configuration is built once at process entry from the environment and an
optional YAML file, then passed explicitly to every stage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

DEFAULT_REPO_OWNER = "nahuelcio"
DEFAULT_REPO_NAME = "demongrep"
DEFAULT_BINARY_NAME = "demongrep"

# Download policy
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 2.0

# Binary locator: root's children are depth 1
DEFAULT_SEARCH_DEPTH = 2

DEFAULT_SYSTEM_INSTALL_DIR = Path("/usr/local/bin")
DEFAULT_USER_INSTALL_DIR = Path("~/.local/bin")


@dataclass
class ReleaseConfig:
    """Where releases are published."""

    owner: str = DEFAULT_REPO_OWNER
    repo: str = DEFAULT_REPO_NAME
    binary_name: str = DEFAULT_BINARY_NAME
    base_url: str = ""  # Empty = derive from owner/repo
    metadata_url: str = ""  # Empty = derive from owner/repo

    @property
    def release_base_url(self) -> str:
        """Base URL under which versioned release assets live."""
        if self.base_url:
            return self.base_url.rstrip("/")
        return f"https://github.com/{self.owner}/{self.repo}/releases/download"

    @property
    def latest_metadata_url(self) -> str:
        """URL of the latest-release metadata endpoint."""
        if self.metadata_url:
            return self.metadata_url
        return f"https://api.github.com/repos/{self.owner}/{self.repo}/releases/latest"


@dataclass
class DownloadConfig:
    """Download retry policy."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay: float = DEFAULT_RETRY_DELAY
    timeout: Optional[float] = None  # None = transport default


@dataclass
class BinaryConfig:
    """Binary locator policy."""

    search_depth: int = DEFAULT_SEARCH_DEPTH


@dataclass
class InstallConfig:
    """Candidate install directories."""

    system_dir: Path = DEFAULT_SYSTEM_INSTALL_DIR
    user_dir: Path = DEFAULT_USER_INSTALL_DIR


@dataclass
class InstallerConfig:
    """Complete installer configuration.

    Attributes:
        version: Explicit release version (``VERSION``), or None for latest.
        install_dir: Explicit install directory (``INSTALL_DIR``), or None.
        debug: Enable debug logging (``INSTALLER_DEBUG``).
        search_path: Snapshot of ``PATH`` used for the summary.
    """

    version: Optional[str] = None
    install_dir: Optional[Path] = None
    debug: bool = False
    search_path: str = ""
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    download: DownloadConfig = field(default_factory=DownloadConfig)
    binary: BinaryConfig = field(default_factory=BinaryConfig)
    install: InstallConfig = field(default_factory=InstallConfig)

    # Sources the config was assembled from, for diagnostics
    sources: List[str] = field(default_factory=list)

    @property
    def system_install_dir(self) -> Path:
        return self.install.system_dir.expanduser()

    @property
    def user_install_dir(self) -> Path:
        return self.install.user_dir.expanduser()
