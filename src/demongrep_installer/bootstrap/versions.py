"""Release version resolution.

An explicit version is used verbatim. Otherwise the latest published version
is read from the release metadata endpoint; if that fails for any reason the
resolver degrades to the ``latest`` alias instead of aborting the install.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Optional

from demongrep_installer.bootstrap.download import secure_urlopen
from demongrep_installer.core.errors import MetadataUnavailableError
from demongrep_installer.core.logging import get_logger
from demongrep_installer.core.models import LATEST_ALIAS, ReleaseVersion, VersionSource

LOGGER = get_logger(__name__)

_TAG_PREFIX = re.compile(r"^[^0-9]+")

GITHUB_ACCEPT = "application/vnd.github+json"


def normalize_tag(tag: str) -> str:
    """Strip any leading non-digit prefix from a release tag (``v2.0.0`` -> ``2.0.0``)."""
    return _TAG_PREFIX.sub("", tag.strip())


def parse_latest_version(body: Any) -> str:
    """Extract the normalized version from a latest-release metadata body.

    Args:
        body: Raw response body (bytes or str) or an already-decoded object.

    Returns:
        Version string without tag prefix.

    Raises:
        MetadataUnavailableError: If the body is malformed or has no usable tag.
    """
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except json.JSONDecodeError as e:
            raise MetadataUnavailableError(f"Release metadata is not valid JSON: {e}") from e

    if not isinstance(body, dict):
        raise MetadataUnavailableError("Release metadata is not a JSON object")

    tag = body.get("tag_name")
    if not isinstance(tag, str) or not tag.strip():
        raise MetadataUnavailableError("Release metadata has no tag_name")

    version = normalize_tag(tag)
    if not version:
        raise MetadataUnavailableError(f"Release tag has no version number: {tag!r}")
    return version


def fetch_latest_version(metadata_url: str, timeout: Optional[float] = None) -> str:
    """Query the metadata endpoint for the latest published version.

    Raises:
        MetadataUnavailableError: On any request or parse failure.
    """
    try:
        with secure_urlopen(
            metadata_url, timeout=timeout, headers={"Accept": GITHUB_ACCEPT}
        ) as response:
            body = response.read()
    except MetadataUnavailableError:
        raise
    except Exception as e:
        raise MetadataUnavailableError(f"Could not fetch release metadata: {e}") from e
    return parse_latest_version(body)


def resolve_version(
    explicit: Optional[str],
    metadata_url: str,
    timeout: Optional[float] = None,
    fetch: Optional[Callable[[str, Optional[float]], str]] = None,
) -> ReleaseVersion:
    """Decide which release version to install.

    Args:
        explicit: User-supplied version; used verbatim when non-empty.
        metadata_url: Latest-release metadata endpoint.
        timeout: Optional request timeout.
        fetch: Override for :func:`fetch_latest_version` (for tests).

    Returns:
        ReleaseVersion with its source. Never raises on metadata failure.
    """
    if explicit:
        return ReleaseVersion(explicit, VersionSource.EXPLICIT)

    fetch = fetch or fetch_latest_version
    try:
        version = fetch(metadata_url, timeout)
    except MetadataUnavailableError as e:
        LOGGER.info(f"Falling back to '{LATEST_ALIAS}': {e}")
        return ReleaseVersion(LATEST_ALIAS, VersionSource.FALLBACK)

    LOGGER.debug(f"Latest release from {metadata_url}: {version}")
    return ReleaseVersion(version, VersionSource.LATEST)
