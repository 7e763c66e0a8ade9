"""Configuration for demongrep-installer."""

from demongrep_installer.config.loader import ConfigError, load_config
from demongrep_installer.config.models import (
    BinaryConfig,
    DownloadConfig,
    InstallConfig,
    InstallerConfig,
    ReleaseConfig,
)

__all__ = [
    "BinaryConfig",
    "ConfigError",
    "DownloadConfig",
    "InstallConfig",
    "InstallerConfig",
    "ReleaseConfig",
    "load_config",
]
