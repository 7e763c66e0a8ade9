"""Error taxonomy for the install procedure.

Every stage failure is an :class:`InstallerError`. Errors are raised where they
are detected and handled once, in the CLI, which prints the message and any
remediation hint before exiting non-zero.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence


class InstallerError(Exception):
    """Base class for fatal install failures.

    Attributes:
        stage: Name of the pipeline stage that failed (set by the pipeline
            when not known at raise time).
        hint: Optional multi-line remediation text for the user.
    """

    def __init__(
        self,
        message: str,
        hint: Optional[str] = None,
        stage: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.stage = stage


class UnsupportedPlatformError(InstallerError):
    """The host operating system is not supported."""


class UnsupportedArchitectureError(InstallerError):
    """The host CPU architecture is not supported."""


class UnsupportedCombinationError(InstallerError):
    """No release is published for this OS and architecture pair."""


class MetadataUnavailableError(InstallerError):
    """Release metadata could not be fetched or parsed.

    Always recovered by the version resolver; never fatal.
    """


class DownloadExhaustedError(InstallerError):
    """All download attempts failed."""

    def __init__(self, url: str, attempts: int, last_error: Optional[str] = None) -> None:
        message = f"Failed to download {url} after {attempts} attempts"
        if last_error:
            message = f"{message}: {last_error}"
        super().__init__(message)
        self.url = url
        self.attempts = attempts


class ArchiveCorruptedError(InstallerError):
    """The downloaded file is not a valid gzip-compressed tar archive."""


class ExtractionFailedError(InstallerError):
    """The archive could not be unpacked."""


class BinaryNotFoundError(InstallerError):
    """The expected executable was not found inside the unpacked archive."""

    def __init__(self, binary_name: str, searched: Sequence[Path]) -> None:
        self.binary_name = binary_name
        self.searched: List[Path] = list(searched)
        locations = ", ".join(str(p) for p in self.searched)
        super().__init__(
            f"Could not find {binary_name} binary in extracted archive "
            f"(searched: {locations})"
        )


class NoWritableInstallDirectoryError(InstallerError):
    """Neither the system-wide nor the per-user directory is writable."""


class PermissionDeniedError(InstallerError):
    """The install directory cannot be created or written."""


class InstalledFileNotExecutableError(InstallerError):
    """The installed file is missing or lacks the executable bit."""
