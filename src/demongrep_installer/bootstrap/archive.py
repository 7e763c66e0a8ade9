"""Release archive handling: integrity check, extraction and binary lookup."""

from __future__ import annotations

import tarfile
import zlib
from collections import deque
from pathlib import Path
from typing import Deque, List, Optional, Tuple

from demongrep_installer.config.models import DEFAULT_BINARY_NAME, DEFAULT_SEARCH_DEPTH
from demongrep_installer.core.errors import (
    ArchiveCorruptedError,
    BinaryNotFoundError,
    ExtractionFailedError,
)
from demongrep_installer.core.logging import get_logger

LOGGER = get_logger(__name__)

# Errors a damaged gzip/tar stream can surface as
_ARCHIVE_ERRORS = (tarfile.TarError, OSError, EOFError, zlib.error)

CHUNK_SIZE = 64 * 1024


def verify_archive(archive: Path) -> int:
    """Check that ``archive`` is a complete, readable gzip-compressed tar.

    Every member header is read, then the rest of the decompressed stream
    through the gzip trailer; nothing is written to disk.

    Args:
        archive: Path to the downloaded archive.

    Returns:
        Number of members in the archive.

    Raises:
        ArchiveCorruptedError: If the file is missing, truncated or not a tar.gz.
    """
    try:
        with tarfile.open(archive, "r:gz") as tar:
            count = sum(1 for _ in tar)
            # Drain the stream so a missing or damaged gzip trailer is detected
            while tar.fileobj.read(CHUNK_SIZE):
                pass
    except _ARCHIVE_ERRORS as e:
        LOGGER.debug(f"Archive check failed for {archive}: {e!r}")
        raise ArchiveCorruptedError(
            "Archive verification failed - corrupted download"
        ) from e

    LOGGER.debug(f"Archive {archive} has {count} members")
    return count


def extract_archive(archive: Path, dest_dir: Path) -> None:
    """Extract a verified archive into an existing directory.

    Args:
        archive: Path to the archive.
        dest_dir: Existing target directory.

    Raises:
        ExtractionFailedError: On any extraction error, including members
            that would land outside ``dest_dir``.
    """
    if not dest_dir.is_dir():
        raise ExtractionFailedError(f"Extraction directory does not exist: {dest_dir}")

    root = dest_dir.resolve()
    try:
        with tarfile.open(archive, "r:gz") as tar:
            members = tar.getmembers()
            for member in members:
                # Validate each member path to prevent traversal attacks
                member_path = (root / member.name).resolve()
                if not member_path.is_relative_to(root):
                    raise ExtractionFailedError(f"Path traversal detected: {member.name}")
            tar.extractall(path=root, members=members, filter="data")
    except ExtractionFailedError:
        raise
    except _ARCHIVE_ERRORS as e:
        raise ExtractionFailedError(f"Extraction failed: {e}") from e


def locate_binary(
    root: Path,
    binary_name: str = DEFAULT_BINARY_NAME,
    max_depth: int = DEFAULT_SEARCH_DEPTH,
) -> Path:
    """Find the executable inside an extracted release tree.

    Checks ``root/<name>``, then ``root/bin/<name>``, then searches
    breadth-first up to ``max_depth`` levels below ``root`` (its direct
    children are depth 1).

    Args:
        root: Root of the extracted tree.
        binary_name: File name to look for.
        max_depth: Maximum search depth.

    Returns:
        Path to the first match.

    Raises:
        BinaryNotFoundError: If no regular file with that name exists.
    """
    candidates = [root / binary_name, root / "bin" / binary_name]
    for candidate in candidates:
        if candidate.is_file():
            return candidate

    searched: List[Path] = list(candidates)
    found = _search(root, binary_name, max_depth)
    if found is not None:
        return found

    searched.append(root / ("*/" * max(max_depth - 1, 0)) / binary_name)
    raise BinaryNotFoundError(binary_name, searched)


def _search(root: Path, binary_name: str, max_depth: int) -> Optional[Path]:
    queue: Deque[Tuple[Path, int]] = deque([(root, 1)])
    while queue:
        directory, depth = queue.popleft()
        if depth > max_depth:
            continue
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            LOGGER.debug(f"Cannot list {directory}: {e}")
            continue
        for entry in entries:
            if entry.name == binary_name and entry.is_file():
                return entry
        for entry in entries:
            if entry.is_dir() and not entry.is_symlink():
                queue.append((entry, depth + 1))
    return None
