"""
Bootstrap stages for installing the demongrep binary.

This module handles:
- Platform detection (OS + architecture -> target triple)
- Release version resolution and artifact naming
- Download with retry, archive verification and extraction
- Install directory resolution and the final install
"""

from demongrep_installer.bootstrap.archive import extract_archive, locate_binary, verify_archive
from demongrep_installer.bootstrap.artifacts import archive_file_name, build_download_url
from demongrep_installer.bootstrap.download import DownloadManager, secure_urlopen
from demongrep_installer.bootstrap.installer import install_binary, query_installed_version
from demongrep_installer.bootstrap.paths import is_on_path, resolve_install_dir
from demongrep_installer.bootstrap.platform import get_platform_target
from demongrep_installer.bootstrap.scratch import handle_termination_signals, scratch_directory
from demongrep_installer.bootstrap.validation import ToolStatus, validate_binary
from demongrep_installer.bootstrap.versions import resolve_version

__all__ = [
    "DownloadManager",
    "ToolStatus",
    "archive_file_name",
    "build_download_url",
    "extract_archive",
    "get_platform_target",
    "handle_termination_signals",
    "install_binary",
    "is_on_path",
    "locate_binary",
    "query_installed_version",
    "resolve_install_dir",
    "resolve_version",
    "scratch_directory",
    "secure_urlopen",
    "validate_binary",
    "verify_archive",
]
