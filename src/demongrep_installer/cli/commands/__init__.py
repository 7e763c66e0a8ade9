"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from demongrep_installer.config.models import InstallerConfig


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier.

        Returns:
            String name of the command.
        """

    @abstractmethod
    def execute(self, args: Namespace, config: "InstallerConfig | None" = None) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            config: Installer configuration.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# ruff: noqa: E402
from demongrep_installer.cli.commands.install import InstallCommand
from demongrep_installer.cli.commands.version import VersionCommand

__all__ = [
    "Command",
    "InstallCommand",
    "VersionCommand",
]
