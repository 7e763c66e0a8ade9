"""Tests for demongrep_installer.bootstrap.artifacts."""

from __future__ import annotations

from demongrep_installer.bootstrap.artifacts import archive_file_name, build_download_url
from demongrep_installer.config.models import ReleaseConfig


class TestBuildDownloadUrl:
    """Tests for build_download_url."""

    def test_follows_naming_convention(self) -> None:
        base = ReleaseConfig(owner="o", repo="demongrep").release_base_url
        url = build_download_url(base, "demongrep", "1.0.0", "x86_64-unknown-linux-gnu")
        assert url == (
            "https://github.com/o/demongrep/releases/download/"
            "v1.0.0/demongrep-1.0.0-x86_64-unknown-linux-gnu.tar.gz"
        )

    def test_is_deterministic(self) -> None:
        args = ("https://example.com/dl", "demongrep", "2.1.0", "aarch64-apple-darwin")
        assert build_download_url(*args) == build_download_url(*args)

    def test_trailing_slash_in_base(self) -> None:
        url = build_download_url("https://example.com/dl/", "demongrep", "1.0.0", "t")
        assert url == "https://example.com/dl/v1.0.0/demongrep-1.0.0-t.tar.gz"

    def test_latest_alias_substituted_verbatim(self) -> None:
        url = build_download_url("https://example.com/dl", "demongrep", "latest", "t")
        assert url == "https://example.com/dl/vlatest/demongrep-latest-t.tar.gz"


class TestArchiveFileName:
    def test_name(self) -> None:
        assert archive_file_name("demongrep", "1.0.0") == "demongrep-1.0.0.tar.gz"
