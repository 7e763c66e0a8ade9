"""Install directory resolution.

Resolution order:
1. INSTALL_DIR override (used verbatim; checked at install time)
2. System-wide directory (/usr/local/bin) if writable
3. Per-user directory (~/.local/bin), created if missing, if writable
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from demongrep_installer.config.models import InstallerConfig
from demongrep_installer.core.errors import NoWritableInstallDirectoryError
from demongrep_installer.core.logging import get_logger
from demongrep_installer.core.models import InstallTarget, ResolvedBy

LOGGER = get_logger(__name__)

PERMISSION_HINT = (
    "You can either:\n"
    "  1. Run with sudo: sudo demongrep-install\n"
    "  2. Set INSTALL_DIR to a writable directory:\n"
    "     INSTALL_DIR=~/.local/bin demongrep-install"
)


def is_writable_dir(path: Path) -> bool:
    """Return True if ``path`` is an existing directory we can write to."""
    return path.is_dir() and os.access(path, os.W_OK)


def resolve_install_dir(config: InstallerConfig) -> InstallTarget:
    """Choose the directory to install into.

    Args:
        config: Installer configuration.

    Returns:
        The selected InstallTarget.

    Raises:
        NoWritableInstallDirectoryError: If no candidate is writable.
    """
    if config.install_dir is not None:
        directory = config.install_dir
        return InstallTarget(directory, ResolvedBy.EXPLICIT, is_writable_dir(directory))

    system_dir = config.system_install_dir
    if is_writable_dir(system_dir):
        return InstallTarget(system_dir, ResolvedBy.SYSTEM_WIDE, True)
    LOGGER.debug(f"System directory {system_dir} is not writable")

    user_dir = config.user_install_dir
    if not user_dir.is_dir():
        try:
            user_dir.mkdir(parents=True, exist_ok=True)
            LOGGER.debug(f"Created user directory {user_dir}")
        except OSError as e:
            LOGGER.debug(f"Cannot create {user_dir}: {e}")

    if is_writable_dir(user_dir):
        return InstallTarget(user_dir, ResolvedBy.USER_FALLBACK, True)

    raise NoWritableInstallDirectoryError(
        "Could not determine writable installation directory",
        hint="Please set INSTALL_DIR environment variable and try again, "
        "or re-run with elevated privileges",
    )


def is_on_path(directory: Path, path_value: Optional[str] = None) -> bool:
    """Check whether ``directory`` is an entry of the executable search path.

    Args:
        directory: Directory to look for.
        path_value: PATH string (default: the PATH environment variable).

    Returns:
        True if any PATH entry refers to the same directory.
    """
    if path_value is None:
        path_value = os.environ.get("PATH", "")

    target = _normalize(directory)
    for entry in path_value.split(os.pathsep):
        if entry and _normalize(Path(entry)) == target:
            return True
    return False


def _normalize(path: Path) -> str:
    return os.path.normcase(os.path.abspath(os.path.expanduser(str(path))))
