"""HTTPS download helpers and the retrying download manager."""

from __future__ import annotations

import shutil
import ssl
import time
import urllib.request
from http.client import HTTPResponse
from pathlib import Path
from typing import Callable, Dict, Optional
from urllib.parse import urlparse

from demongrep_installer import __version__
from demongrep_installer.config.models import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_DELAY
from demongrep_installer.core.errors import DownloadExhaustedError
from demongrep_installer.core.logging import get_logger
from demongrep_installer.core.models import DownloadJob
from demongrep_installer.core.reporter import NullReporter, Reporter

LOGGER = get_logger(__name__)

USER_AGENT = f"demongrep-installer/{__version__}"

CHUNK_SIZE = 64 * 1024


class IncompleteDownloadError(OSError):
    """The transfer ended before the advertised number of bytes arrived."""


def secure_urlopen(
    url: str,
    timeout: Optional[float] = None,
    headers: Optional[Dict[str, str]] = None,
) -> HTTPResponse:
    """Open an HTTPS URL with certificate verification.

    Args:
        url: URL to open. Must use the https scheme.
        timeout: Optional socket timeout in seconds.
        headers: Extra request headers.

    Returns:
        The open HTTP response.

    Raises:
        ValueError: If the URL is not https.
        urllib.error.URLError: On connection or HTTP errors.
    """
    if urlparse(url).scheme != "https":
        raise ValueError(f"Invalid download URL (https required): {url}")

    request_headers = {"User-Agent": USER_AGENT}
    if headers:
        request_headers.update(headers)
    request = urllib.request.Request(url, headers=request_headers)
    context = ssl.create_default_context()
    if timeout is None:
        return urllib.request.urlopen(request, context=context)  # nosec B310
    return urllib.request.urlopen(request, timeout=timeout, context=context)  # nosec B310


class DownloadManager:
    """Downloads a single file with a bounded, fixed-delay retry loop.

    This is the only stage of the install that retries automatically.
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        timeout: Optional[float] = None,
        reporter: Optional[Reporter] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize DownloadManager.

        Args:
            max_attempts: Total number of attempts, including the first.
            retry_delay: Seconds to wait between attempts.
            timeout: Optional socket timeout per attempt.
            reporter: Progress reporter.
            sleep: Sleep function (injectable for tests).
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay
        self._timeout = timeout
        self._reporter = reporter or NullReporter()
        self._sleep = sleep

    def download(self, url: str, destination: Path) -> DownloadJob:
        """Download ``url`` to ``destination``.

        Args:
            url: Artifact URL.
            destination: File path to write; its parent must exist.

        Returns:
            The completed DownloadJob.

        Raises:
            DownloadExhaustedError: After all attempts failed.
        """
        job = DownloadJob(url=url, destination=destination, max_attempts=self._max_attempts)
        last_error: Optional[str] = None

        while not job.exhausted:
            job.attempts_made += 1
            self._reporter.info(f"Downloading from {url}...")
            try:
                written = self._fetch(url, destination)
            except ValueError:
                # Rejected URLs are not transient
                raise
            except Exception as e:
                last_error = str(e) or type(e).__name__
                LOGGER.debug(f"Attempt {job.attempts_made} for {url} failed: {e!r}")
                destination.unlink(missing_ok=True)
                if not job.exhausted:
                    self._reporter.warning(
                        f"Download failed, retrying... "
                        f"(attempt {job.attempts_made + 1}/{job.max_attempts})"
                    )
                    self._sleep(self._retry_delay)
                continue

            LOGGER.debug(f"Downloaded {written} bytes to {destination}")
            self._reporter.success("Downloaded successfully")
            return job

        raise DownloadExhaustedError(url, job.attempts_made, last_error)

    def _fetch(self, url: str, destination: Path) -> int:
        """Perform one transfer; returns the number of bytes written."""
        with secure_urlopen(url, timeout=self._timeout) as response:
            expected = _content_length(response)
            with open(destination, "wb") as f:
                shutil.copyfileobj(response, f, CHUNK_SIZE)
                written = f.tell()

        if expected is not None and written != expected:
            raise IncompleteDownloadError(
                f"Incomplete download: received {written} of {expected} bytes"
            )
        return written


def _content_length(response: HTTPResponse) -> Optional[int]:
    headers = getattr(response, "headers", None)
    value = headers.get("Content-Length") if headers else None
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None
