"""Tests for demongrep_installer.bootstrap.scratch."""

from __future__ import annotations

import os
import shutil
import signal
from pathlib import Path

import pytest

from demongrep_installer.bootstrap.scratch import (
    SCRATCH_PREFIX,
    handle_termination_signals,
    scratch_directory,
)


class TestScratchDirectory:
    """Tests for scratch_directory."""

    def test_created_and_removed(self, tmp_path: Path) -> None:
        with scratch_directory(parent=tmp_path) as scratch:
            assert scratch.is_dir()
            assert scratch.parent == tmp_path
            assert scratch.name.startswith(SCRATCH_PREFIX)
            (scratch / "nested").mkdir()
            (scratch / "nested" / "file").write_text("x")
        assert not scratch.exists()
        assert list(tmp_path.iterdir()) == []

    def test_unique_per_run(self, tmp_path: Path) -> None:
        with scratch_directory(parent=tmp_path) as first:
            with scratch_directory(parent=tmp_path) as second:
                assert first != second

    @pytest.mark.parametrize("exc_type", [RuntimeError, KeyboardInterrupt, SystemExit])
    def test_removed_on_exception(self, tmp_path: Path, exc_type: type) -> None:
        with pytest.raises(exc_type):
            with scratch_directory(parent=tmp_path):
                raise exc_type()
        assert list(tmp_path.iterdir()) == []

    def test_already_removed_is_tolerated(self, tmp_path: Path) -> None:
        with scratch_directory(parent=tmp_path) as scratch:
            shutil.rmtree(scratch)
        assert list(tmp_path.iterdir()) == []


@pytest.mark.skipif(not hasattr(signal, "SIGTERM"), reason="SIGTERM not available")
class TestHandleTerminationSignals:
    """Tests for handle_termination_signals."""

    def test_sigterm_raises_system_exit(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            with handle_termination_signals([signal.SIGTERM]):
                with scratch_directory(parent=tmp_path):
                    os.kill(os.getpid(), signal.SIGTERM)
        assert exc_info.value.code == 128 + signal.SIGTERM
        assert list(tmp_path.iterdir()) == []

    def test_restores_previous_handler(self) -> None:
        before = signal.getsignal(signal.SIGTERM)
        with handle_termination_signals([signal.SIGTERM]):
            assert signal.getsignal(signal.SIGTERM) is not before
        assert signal.getsignal(signal.SIGTERM) is before
