"""Version command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from demongrep_installer.config.models import InstallerConfig

from demongrep_installer.cli.commands import Command
from demongrep_installer.cli.exit_codes import EXIT_SUCCESS


class VersionCommand(Command):
    """Shows the installer version."""

    def __init__(self, version: str):
        self._version = version

    @property
    def name(self) -> str:
        """Command identifier."""
        return "version"

    def execute(self, args: Namespace, config: "InstallerConfig | None" = None) -> int:
        print(f"Installer version: {self._version}")
        return EXIT_SUCCESS
