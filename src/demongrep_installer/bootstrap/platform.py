"""Platform detection.

Maps the host kernel name and machine type to a normalized (OS, architecture)
pair and from that to a release target triple.
"""

from __future__ import annotations

import platform as _platform
from typing import Dict, Optional, Tuple

from demongrep_installer.core.errors import (
    UnsupportedArchitectureError,
    UnsupportedCombinationError,
    UnsupportedPlatformError,
)
from demongrep_installer.core.logging import get_logger
from demongrep_installer.core.models import Architecture, OperatingSystem, PlatformTarget

LOGGER = get_logger(__name__)

# Kernel name prefixes, matched case-sensitively as uname reports them
_OS_PREFIXES: Tuple[Tuple[str, OperatingSystem], ...] = (
    ("Linux", OperatingSystem.LINUX),
    ("Darwin", OperatingSystem.MACOS),
    ("MINGW", OperatingSystem.WINDOWS),
    ("MSYS", OperatingSystem.WINDOWS),
    ("CYGWIN", OperatingSystem.WINDOWS),
    ("Windows", OperatingSystem.WINDOWS),
)

_ARCH_ALIASES: Dict[str, Architecture] = {
    "x86_64": Architecture.X86_64,
    "amd64": Architecture.X86_64,
    "aarch64": Architecture.AARCH64,
    "arm64": Architecture.AARCH64,
}

# Published release targets. Only these combinations have artifacts.
TARGET_TRIPLES: Dict[Tuple[OperatingSystem, Architecture], str] = {
    (OperatingSystem.LINUX, Architecture.X86_64): "x86_64-unknown-linux-gnu",
    (OperatingSystem.MACOS, Architecture.X86_64): "x86_64-apple-darwin",
    (OperatingSystem.MACOS, Architecture.AARCH64): "aarch64-apple-darwin",
}


def detect_os(kernel_name: str) -> OperatingSystem:
    """Normalize a kernel name (as reported by ``uname -s``).

    Raises:
        UnsupportedPlatformError: For any kernel outside the known families.
    """
    for prefix, os_name in _OS_PREFIXES:
        if kernel_name.startswith(prefix):
            return os_name
    raise UnsupportedPlatformError(f"Unsupported operating system: {kernel_name}")


def detect_arch(machine: str) -> Architecture:
    """Normalize a machine type (as reported by ``uname -m``).

    Raises:
        UnsupportedArchitectureError: For any unknown machine type.
    """
    arch = _ARCH_ALIASES.get(machine.lower())
    if arch is None:
        raise UnsupportedArchitectureError(f"Unsupported architecture: {machine}")
    return arch


def resolve_triple(os_name: OperatingSystem, arch: Architecture) -> str:
    """Look up the release target triple for an OS/architecture pair.

    Raises:
        UnsupportedCombinationError: If no release is published for the pair.
    """
    triple = TARGET_TRIPLES.get((os_name, arch))
    if triple is None:
        raise UnsupportedCombinationError(
            f"Unsupported OS and architecture combination: {os_name.value}-{arch.value}"
        )
    return triple


def get_platform_target(
    kernel_name: Optional[str] = None,
    machine: Optional[str] = None,
) -> PlatformTarget:
    """Detect the host platform and its target triple.

    Args:
        kernel_name: Override for the kernel name (default: host).
        machine: Override for the machine type (default: host).

    Returns:
        PlatformTarget for the host.
    """
    if kernel_name is None:
        kernel_name = _platform.system()
    if machine is None:
        machine = _platform.machine()

    LOGGER.debug(f"Host kernel={kernel_name!r} machine={machine!r}")

    os_name = detect_os(kernel_name)
    arch = detect_arch(machine)
    return PlatformTarget(os=os_name, arch=arch, triple=resolve_triple(os_name, arch))
