"""Release artifact naming."""

from __future__ import annotations


def build_download_url(base_url: str, repo: str, version: str, triple: str) -> str:
    """Build the download URL for a release artifact.

    Pure function; the URL is not checked for existence.

    Example:
        >>> build_download_url("https://x/releases/download", "demongrep",
        ...                    "1.0.0", "x86_64-unknown-linux-gnu")
        'https://x/releases/download/v1.0.0/demongrep-1.0.0-x86_64-unknown-linux-gnu.tar.gz'
    """
    return f"{base_url.rstrip('/')}/v{version}/{repo}-{version}-{triple}.tar.gz"


def archive_file_name(repo: str, version: str) -> str:
    """File name used for the downloaded archive in the scratch directory."""
    return f"{repo}-{version}.tar.gz"
