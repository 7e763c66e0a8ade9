"""Scoped scratch directory for downloads and extraction."""

from __future__ import annotations

import shutil
import signal
import tempfile
from contextlib import contextmanager
from pathlib import Path
from types import FrameType
from typing import Dict, Iterator, Optional, Sequence

from demongrep_installer.core.logging import get_logger

LOGGER = get_logger(__name__)

SCRATCH_PREFIX = "demongrep-install-"


@contextmanager
def scratch_directory(
    prefix: str = SCRATCH_PREFIX,
    parent: Optional[Path] = None,
) -> Iterator[Path]:
    """Create a run-exclusive temporary directory, removed on exit.

    Removal happens on every exit path: normal return, exceptions,
    ``KeyboardInterrupt`` and ``SystemExit`` (see
    :func:`handle_termination_signals`).

    Args:
        prefix: Directory name prefix.
        parent: Parent directory (default: the system temp directory).

    Yields:
        Path to the scratch directory.
    """
    path = Path(tempfile.mkdtemp(prefix=prefix, dir=str(parent) if parent else None))
    LOGGER.debug(f"Created scratch directory {path}")
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        LOGGER.debug(f"Removed scratch directory {path}")


def _default_signals() -> Sequence[signal.Signals]:
    names = ("SIGTERM", "SIGHUP")
    return [getattr(signal, name) for name in names if hasattr(signal, name)]


def _raise_system_exit(signum: int, frame: Optional[FrameType]) -> None:
    raise SystemExit(128 + signum)


@contextmanager
def handle_termination_signals(
    signals: Optional[Sequence[signal.Signals]] = None,
) -> Iterator[None]:
    """Turn termination signals into ``SystemExit`` for the duration of a run.

    Python already raises ``KeyboardInterrupt`` for SIGINT; SIGTERM and SIGHUP
    would otherwise kill the process without unwinding, skipping cleanup.
    Previous handlers are restored on exit.
    """
    previous: Dict[signal.Signals, object] = {}
    for sig in signals if signals is not None else _default_signals():
        try:
            previous[sig] = signal.signal(sig, _raise_system_exit)
        except ValueError:
            # Not the main thread
            LOGGER.debug(f"Cannot install handler for {sig!r}")
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)  # type: ignore[arg-type]
