"""Tests for demongrep_installer.bootstrap.validation."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from demongrep_installer.bootstrap.validation import ToolStatus, validate_binary


class TestValidateBinary:
    def test_missing(self, tmp_path: Path) -> None:
        assert validate_binary(tmp_path / "nope") == ToolStatus.MISSING

    def test_directory_is_missing(self, tmp_path: Path) -> None:
        assert validate_binary(tmp_path) == ToolStatus.MISSING

    def test_executable(self, tmp_path: Path) -> None:
        binary = tmp_path / "demongrep"
        binary.write_text("#!/bin/sh\n")
        binary.chmod(0o755)
        assert validate_binary(binary) == ToolStatus.PRESENT

    def test_not_executable(self, tmp_path: Path) -> None:
        binary = tmp_path / "demongrep"
        binary.write_text("#!/bin/sh\n")
        with patch("demongrep_installer.bootstrap.validation.os.access", return_value=False):
            assert validate_binary(binary) == ToolStatus.NOT_EXECUTABLE
