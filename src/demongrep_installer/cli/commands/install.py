"""Install command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import Optional

from demongrep_installer.bootstrap.scratch import handle_termination_signals
from demongrep_installer.cli.commands import Command
from demongrep_installer.cli.exit_codes import (
    EXIT_BOOTSTRAP_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_SUCCESS,
)
from demongrep_installer.config.models import InstallerConfig
from demongrep_installer.core.errors import InstallerError
from demongrep_installer.core.logging import get_logger
from demongrep_installer.core.reporter import ConsoleReporter, Reporter
from demongrep_installer.pipeline.executor import InstallPipeline

LOGGER = get_logger(__name__)


class InstallCommand(Command):
    """Downloads and installs the demongrep binary."""

    def __init__(self, reporter: Optional[Reporter] = None):
        """Initialize InstallCommand.

        Args:
            reporter: Progress reporter (default: console).
        """
        self._reporter = reporter or ConsoleReporter()

    @property
    def name(self) -> str:
        """Command identifier."""
        return "install"

    def execute(self, args: Namespace, config: "InstallerConfig | None" = None) -> int:
        """Run the full install procedure.

        Args:
            args: Parsed command-line arguments (unused).
            config: Installer configuration; defaults when None.

        Returns:
            EXIT_SUCCESS, EXIT_BOOTSTRAP_FAILURE or EXIT_INTERRUPTED.
        """
        pipeline = InstallPipeline(config or InstallerConfig(), reporter=self._reporter)

        try:
            with handle_termination_signals():
                pipeline.execute()
        except InstallerError as e:
            LOGGER.debug(f"Install failed at stage {e.stage}: {e.message}")
            self._reporter.error(e.message)
            if e.hint:
                for line in e.hint.splitlines():
                    self._reporter.info(line)
            return EXIT_BOOTSTRAP_FAILURE
        except KeyboardInterrupt:
            self._reporter.error("Installation cancelled by user")
            return EXIT_INTERRUPTED
        except Exception as e:
            LOGGER.debug("Unexpected failure", exc_info=True)
            self._reporter.error(f"Installation failed: {e}")
            if config is not None and config.debug:
                import traceback
                traceback.print_exc()
            return EXIT_BOOTSTRAP_FAILURE

        return EXIT_SUCCESS
