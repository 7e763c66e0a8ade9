"""Tests for the version command."""

from __future__ import annotations

from argparse import Namespace

from demongrep_installer.cli.commands.version import VersionCommand
from demongrep_installer.cli.exit_codes import EXIT_SUCCESS


class TestVersionCommand:
    def test_prints_version(self, capsys) -> None:
        command = VersionCommand("1.0.0")
        assert command.name == "version"
        assert command.execute(Namespace()) == EXIT_SUCCESS
        assert capsys.readouterr().out == "Installer version: 1.0.0\n"
