"""Tests for CLI functionality."""

from __future__ import annotations

import argparse
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import demongrep_installer.cli as cli
from demongrep_installer.cli.exit_codes import (
    EXIT_BOOTSTRAP_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SUCCESS,
)
from demongrep_installer.core.errors import UnsupportedPlatformError
from demongrep_installer.core.reporter import CallbackReporter, Severity

PIPELINE = "demongrep_installer.cli.commands.install.InstallPipeline"


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("VERSION", "INSTALL_DIR", "DEMONGREP_INSTALLER_CONFIG", "INSTALLER_DEBUG"):
        monkeypatch.delenv(name, raising=False)


class TestBuildParser:
    """Tests for CLI argument parser."""

    def test_only_help_and_version(self) -> None:
        parser = cli.build_parser()
        assert isinstance(parser, argparse.ArgumentParser)
        flags = sorted(s for a in parser._actions for s in a.option_strings)
        assert flags == ["--help", "--version", "-h"]

    def test_help_documents_environment(self) -> None:
        text = cli.build_parser().format_help()
        for name in ("VERSION", "INSTALL_DIR", "DEMONGREP_INSTALLER_CONFIG"):
            assert name in text
        assert "VERSION=1.0.0 demongrep-install" in text


class TestMainCommand:
    """Tests for main CLI entry point."""

    def test_main_help_exits_successfully(self, capsys) -> None:
        exit_code = cli.main(["--help"])
        captured = capsys.readouterr()
        assert exit_code == EXIT_SUCCESS
        assert "usage:" in captured.out.lower()

    @patch(PIPELINE)
    def test_help_does_not_install(self, mock_pipeline_cls: MagicMock, capsys) -> None:
        cli.main(["-h"])
        mock_pipeline_cls.assert_not_called()

    def test_main_version_shows_version(self, capsys) -> None:
        exit_code = cli.main(["--version"])
        captured = capsys.readouterr()
        assert exit_code == EXIT_SUCCESS
        assert captured.out.startswith("Installer version: ")
        assert cli.get_version() in captured.out

    def test_unknown_flag_is_usage_error(self, capsys) -> None:
        exit_code = cli.main(["--force"])
        captured = capsys.readouterr()
        assert exit_code == EXIT_INVALID_USAGE
        assert "unrecognized arguments" in captured.err

    def test_positional_argument_is_usage_error(self, capsys) -> None:
        assert cli.main(["install"]) == EXIT_INVALID_USAGE


class TestCLIRunner:
    """Tests for CLIRunner dispatch."""

    @patch(PIPELINE)
    def test_runs_install_with_environment_config(
        self,
        mock_pipeline_cls: MagicMock,
        clean_env: None,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        monkeypatch.setenv("VERSION", "1.2.3")
        monkeypatch.setenv("INSTALL_DIR", str(tmp_path))

        exit_code = cli.CLIRunner(reporter=CallbackReporter()).run([])

        assert exit_code == EXIT_SUCCESS
        config = mock_pipeline_cls.call_args[0][0]
        assert config.version == "1.2.3"
        assert config.install_dir == tmp_path

    def test_config_error_is_usage_error(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("DEMONGREP_INSTALLER_CONFIG", str(tmp_path / "missing.yml"))
        events: list = []

        exit_code = cli.CLIRunner(reporter=CallbackReporter(on_event=events.append)).run([])

        assert exit_code == EXIT_INVALID_USAGE
        assert events[0].severity == Severity.ERROR
        assert "Config file not found" in events[0].message

    @patch(PIPELINE)
    def test_install_failure_exit_code(
        self, mock_pipeline_cls: MagicMock, clean_env: None
    ) -> None:
        mock_pipeline_cls.return_value.execute.side_effect = UnsupportedPlatformError(
            "Unsupported operating system: Plan9"
        )
        events: list = []

        exit_code = cli.CLIRunner(reporter=CallbackReporter(on_event=events.append)).run([])

        assert exit_code == EXIT_BOOTSTRAP_FAILURE
        assert events[-1].message == "Unsupported operating system: Plan9"

    @pytest.mark.parametrize("content", [b"\xff\xfe", None])
    def test_unreadable_config_is_usage_error(
        self,
        content,
        clean_env: None,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        path = tmp_path / "installer.yml"
        if content is None:
            path.mkdir()
        else:
            path.write_bytes(content)
        monkeypatch.setenv("DEMONGREP_INSTALLER_CONFIG", str(path))
        events: list = []

        exit_code = cli.CLIRunner(reporter=CallbackReporter(on_event=events.append)).run([])

        assert exit_code == EXIT_INVALID_USAGE
        assert "Cannot read config file" in events[0].message
