"""Shared fixtures for unit tests."""

from __future__ import annotations

import io
import tarfile
from pathlib import Path
from typing import Dict, Optional, Tuple

import pytest

from demongrep_installer.config.models import InstallConfig, InstallerConfig

FAKE_BINARY = b'#!/bin/sh\necho "demongrep 1.2.3"\n'


def make_tar_gz(path: Path, files: Dict[str, Tuple[bytes, int]]) -> Path:
    """Write a gzip-compressed tar containing ``files`` (name -> (data, mode))."""
    with tarfile.open(path, "w:gz") as tar:
        for name, (data, mode) in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = mode
            tar.addfile(info, io.BytesIO(data))
    return path


def release_archive_bytes(layout: str = "root") -> bytes:
    """Build a release archive in memory.

    Args:
        layout: "root" (binary at top level), "bin" (under bin/) or
            "nested" (inside a versioned directory).
    """
    name = {
        "root": "demongrep",
        "bin": "bin/demongrep",
        "nested": "demongrep-1.2.3/demongrep",
    }[layout]
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for extra, data in (("README.md", b"readme\n"), (name, FAKE_BINARY)):
            info = tarfile.TarInfo(extra)
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


class FakeResponse(io.BytesIO):
    """Minimal stand-in for an HTTP response used as a context manager."""

    def __init__(self, data: bytes, content_length: Optional[int] = None) -> None:
        super().__init__(data)
        length = len(data) if content_length is None else content_length
        self.headers = {"Content-Length": str(length)}


@pytest.fixture
def release_archive() -> bytes:
    return release_archive_bytes()


@pytest.fixture
def installer_config(tmp_path: Path) -> InstallerConfig:
    """Config whose install directories live under tmp_path."""
    return InstallerConfig(
        install=InstallConfig(
            system_dir=tmp_path / "system-bin",
            user_dir=tmp_path / "home" / ".local" / "bin",
        ),
    )
