"""Reporter abstraction for user-facing progress output.

Provides a unified interface for install progress messages:
- Console: Print to the terminal with Rich formatting
- Callback: Forward events to another system (used by tests)
- Null: No-op
"""

from __future__ import annotations

import os
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, TextIO

from rich.console import Console
from rich.markup import escape

from demongrep_installer.core.models import InstallResult


class Severity(str, Enum):
    """Severity of a progress message."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ReportEvent:
    """A single progress message."""

    severity: Severity
    message: str


# Icon and Rich style per severity
_ICONS = {
    Severity.INFO: ("ℹ", "blue"),
    Severity.SUCCESS: ("✓", "green"),
    Severity.WARNING: ("⚠", "yellow"),
    Severity.ERROR: ("✗", "red"),
}


class Reporter(ABC):
    """Abstract base class for reporters."""

    @abstractmethod
    def emit(self, event: ReportEvent) -> None:
        """Emit a progress event.

        Args:
            event: The event to emit.
        """

    @abstractmethod
    def summary(self, result: InstallResult, install_dir: Path) -> None:
        """Emit the final install summary.

        Args:
            result: Result of the completed install.
            install_dir: Directory the binary was installed into.
        """

    def info(self, message: str) -> None:
        self.emit(ReportEvent(Severity.INFO, message))

    def success(self, message: str) -> None:
        self.emit(ReportEvent(Severity.SUCCESS, message))

    def warning(self, message: str) -> None:
        self.emit(ReportEvent(Severity.WARNING, message))

    def error(self, message: str) -> None:
        self.emit(ReportEvent(Severity.ERROR, message))


class NullReporter(Reporter):
    """No-op reporter."""

    def emit(self, event: ReportEvent) -> None:
        pass

    def summary(self, result: InstallResult, install_dir: Path) -> None:
        pass


class CallbackReporter(Reporter):
    """Reporter that invokes callbacks for events and the summary."""

    def __init__(
        self,
        on_event: Optional[Callable[[ReportEvent], None]] = None,
        on_summary: Optional[Callable[[InstallResult, Path], None]] = None,
    ):
        """Initialize CallbackReporter.

        Args:
            on_event: Callback for each progress event.
            on_summary: Callback for the final summary.
        """
        self._on_event = on_event
        self._on_summary = on_summary

    def emit(self, event: ReportEvent) -> None:
        if self._on_event:
            self._on_event(event)

    def summary(self, result: InstallResult, install_dir: Path) -> None:
        if self._on_summary:
            self._on_summary(result, install_dir)


class ConsoleReporter(Reporter):
    """Terminal reporter.

    Info, success and warning lines go to ``output``; error lines go to
    ``error_output``. Colour is used only when the stream is a terminal and
    ``NO_COLOR`` is not set.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        error_output: Optional[TextIO] = None,
        use_color: Optional[bool] = None,
    ):
        """Initialize ConsoleReporter.

        Args:
            output: Stream for regular output (default: stdout).
            error_output: Stream for error lines (default: stderr).
            use_color: Force colour on or off; auto-detect when None.
        """
        if use_color is None:
            use_color = not os.environ.get("NO_COLOR")
        self._console = Console(
            file=output or sys.stdout,
            no_color=not use_color,
            highlight=False,
        )
        self._error_console = Console(
            file=error_output or sys.stderr,
            no_color=not use_color,
            highlight=False,
        )

    def emit(self, event: ReportEvent) -> None:
        icon, style = _ICONS[event.severity]
        console = self._error_console if event.severity == Severity.ERROR else self._console
        console.print(
            f"[{style}]{icon}[/{style}] {escape(event.message)}",
            soft_wrap=True,
        )

    def summary(self, result: InstallResult, install_dir: Path) -> None:
        out = self._console
        out.print()
        self.success("Installation completed successfully!")
        out.print()
        out.print(f"  [blue]Binary:[/blue] {escape(str(result.installed_path))}", soft_wrap=True)
        out.print(f"  [blue]Version:[/blue] {escape(result.reported_version)}", soft_wrap=True)
        if result.resolved_version:
            out.print(f"  [blue]Release:[/blue] v{escape(result.resolved_version)}", soft_wrap=True)
        out.print()

        binary_name = result.installed_path.name
        if result.on_path:
            self.info(f"{binary_name} is available in your PATH")
            out.print()
            self.info(f"You can now run: {binary_name}")
        else:
            self.warning("Installation directory is not in your PATH")
            out.print()
            self.info(f"To use {binary_name}, either:")
            self.info(f"  1. Add {install_dir} to your PATH")
            self.info(f"  2. Run {result.installed_path} directly")
            out.print()
            self.info(
                "To add to PATH, add this line to your shell profile "
                "(~/.bashrc, ~/.zshrc, etc.):"
            )
            self.info(f'    export PATH="$PATH:{install_dir}"')
        out.print()
