"""Tests for demongrep_installer.core.reporter."""

from __future__ import annotations

import io
from pathlib import Path

from demongrep_installer.core.models import InstallResult
from demongrep_installer.core.reporter import (
    CallbackReporter,
    ConsoleReporter,
    NullReporter,
    ReportEvent,
    Severity,
)


def _result(on_path: bool) -> InstallResult:
    return InstallResult(
        installed_path=Path("/home/dev/.local/bin/demongrep"),
        reported_version="demongrep 1.2.3",
        on_path=on_path,
        resolved_version="1.2.3",
    )


class TestCallbackReporter:
    """Tests for CallbackReporter."""

    def test_helpers_emit_events(self) -> None:
        events = []
        reporter = CallbackReporter(on_event=events.append)

        reporter.info("a")
        reporter.success("b")
        reporter.warning("c")
        reporter.error("d")

        assert events == [
            ReportEvent(Severity.INFO, "a"),
            ReportEvent(Severity.SUCCESS, "b"),
            ReportEvent(Severity.WARNING, "c"),
            ReportEvent(Severity.ERROR, "d"),
        ]

    def test_summary_callback(self) -> None:
        summaries = []
        reporter = CallbackReporter(on_summary=lambda r, d: summaries.append((r, d)))
        result = _result(True)

        reporter.summary(result, Path("/home/dev/.local/bin"))

        assert summaries == [(result, Path("/home/dev/.local/bin"))]

    def test_no_callbacks(self) -> None:
        reporter = CallbackReporter()
        reporter.info("ignored")
        reporter.summary(_result(True), Path("/x"))


class TestNullReporter:
    def test_accepts_everything(self) -> None:
        reporter = NullReporter()
        reporter.error("ignored")
        reporter.summary(_result(False), Path("/x"))


class TestConsoleReporter:
    """Tests for ConsoleReporter."""

    def _reporter(self):
        out, err = io.StringIO(), io.StringIO()
        return ConsoleReporter(output=out, error_output=err, use_color=False), out, err

    def test_info_goes_to_stdout(self) -> None:
        reporter, out, err = self._reporter()
        reporter.info("Fetching latest version...")
        assert "ℹ Fetching latest version..." in out.getvalue()
        assert err.getvalue() == ""

    def test_error_goes_to_stderr(self) -> None:
        reporter, out, err = self._reporter()
        reporter.error("Unsupported operating system: Plan9")
        assert "✗ Unsupported operating system: Plan9" in err.getvalue()
        assert out.getvalue() == ""

    def test_markup_in_messages_is_escaped(self) -> None:
        reporter, out, _ = self._reporter()
        reporter.warning("path [bold]literal[/bold]")
        assert "[bold]literal[/bold]" in out.getvalue()

    def test_long_lines_not_wrapped(self) -> None:
        reporter, out, _ = self._reporter()
        url = "https://github.com/nahuelcio/demongrep/releases/download/" + "x" * 200
        reporter.info(f"Download URL: {url}")
        assert url in out.getvalue()

    def test_summary_on_path(self) -> None:
        reporter, out, _ = self._reporter()
        reporter.summary(_result(True), Path("/home/dev/.local/bin"))
        text = out.getvalue()
        assert "Installation completed successfully!" in text
        assert "Binary: /home/dev/.local/bin/demongrep" in text
        assert "Version: demongrep 1.2.3" in text
        assert "Release: v1.2.3" in text
        assert "demongrep is available in your PATH" in text
        assert "export PATH" not in text

    def test_summary_not_on_path(self) -> None:
        reporter, out, _ = self._reporter()
        reporter.summary(_result(False), Path("/home/dev/.local/bin"))
        text = out.getvalue()
        assert "Installation directory is not in your PATH" in text
        assert 'export PATH="$PATH:/home/dev/.local/bin"' in text
        assert "Run /home/dev/.local/bin/demongrep directly" in text

    def test_no_color_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        out = io.StringIO()
        reporter = ConsoleReporter(output=out, error_output=io.StringIO())
        reporter.success("done")
        assert "\x1b[" not in out.getvalue()
