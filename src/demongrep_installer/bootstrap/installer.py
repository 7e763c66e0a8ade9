"""Final install step and post-install checks."""

from __future__ import annotations

import shutil
import stat
import subprocess
from pathlib import Path

from demongrep_installer.bootstrap.paths import PERMISSION_HINT, is_writable_dir
from demongrep_installer.bootstrap.validation import ToolStatus, validate_binary
from demongrep_installer.core.errors import (
    InstalledFileNotExecutableError,
    PermissionDeniedError,
)
from demongrep_installer.core.logging import get_logger

LOGGER = get_logger(__name__)

UNKNOWN_VERSION = "unknown"

# Tried in order when asking the installed binary for its version
VERSION_FLAGS = ("--version", "-v")

_EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def make_executable(path: Path) -> None:
    """Add the executable bits to ``path`` (like ``chmod +x``)."""
    mode = path.stat().st_mode
    path.chmod(mode | _EXECUTABLE_BITS)


def install_binary(binary: Path, install_dir: Path, binary_name: str) -> Path:
    """Copy ``binary`` into ``install_dir`` under ``binary_name``.

    An existing file with the same name is overwritten.

    Args:
        binary: Located binary in the scratch tree.
        install_dir: Destination directory.
        binary_name: Canonical installed file name.

    Returns:
        Path of the installed binary.

    Raises:
        PermissionDeniedError: If the directory cannot be created or written.
        InstalledFileNotExecutableError: If the copy is not an executable file.
    """
    if not install_dir.is_dir():
        try:
            install_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PermissionDeniedError(
                f"Cannot create installation directory {install_dir}: {e}",
                hint=PERMISSION_HINT,
            ) from e

    if not is_writable_dir(install_dir):
        raise PermissionDeniedError(
            f"Installation directory requires elevated permissions: {install_dir}",
            hint=PERMISSION_HINT,
        )

    make_executable(binary)

    destination = install_dir / binary_name
    try:
        shutil.copy2(binary, destination)
    except OSError as e:
        raise PermissionDeniedError(
            f"Failed to copy binary to {install_dir}: {e}",
            hint=PERMISSION_HINT,
        ) from e

    status = validate_binary(destination)
    if status != ToolStatus.PRESENT:
        raise InstalledFileNotExecutableError(
            f"Installed file is not executable: {destination} ({status.value})"
        )

    LOGGER.debug(f"Installed {binary} -> {destination}")
    return destination


def query_installed_version(binary: Path, timeout: float = 30) -> str:
    """Ask the installed binary for its version.

    Tries ``--version`` then ``-v``; the first successful invocation's first
    output line wins.

    Returns:
        Version line, or ``"unknown"`` if both invocations fail.
    """
    for flag in VERSION_FLAGS:
        try:
            result = subprocess.run(
                [str(binary), flag],
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
            )
        except (subprocess.SubprocessError, FileNotFoundError, OSError) as e:
            LOGGER.debug(f"{binary} {flag} failed: {e}")
            continue
        if result.returncode != 0:
            continue
        lines = result.stdout.strip().splitlines()
        if lines:
            return lines[0].strip()
    return UNKNOWN_VERSION
