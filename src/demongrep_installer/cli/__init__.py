"""Command-line entry point for demongrep-install."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
from typing import Iterable, Optional

from demongrep_installer.cli.commands import InstallCommand, VersionCommand
from demongrep_installer.cli.exit_codes import (
    EXIT_INVALID_USAGE,
    EXIT_SUCCESS,
)
from demongrep_installer.config.loader import ConfigError, load_config
from demongrep_installer.core.logging import configure_logging, get_logger
from demongrep_installer.core.reporter import ConsoleReporter, Reporter

LOGGER = get_logger(__name__)

EPILOG = """\
environment variables:
  VERSION                     Specific version to install (default: latest)
  INSTALL_DIR                 Custom installation directory
                              (default: /usr/local/bin or ~/.local/bin)
  DEMONGREP_INSTALLER_CONFIG  YAML file with download/install policy overrides
  INSTALLER_DEBUG             Set to 1 for debug logging
  NO_COLOR                    Disable coloured output

examples:
  # Install latest version
  demongrep-install

  # Install specific version
  VERSION=1.0.0 demongrep-install

  # Install to custom directory
  INSTALL_DIR=~/.cargo/bin demongrep-install
"""


def get_version() -> str:
    try:
        return version("demongrep-installer")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from demongrep_installer import __version__

        return __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="demongrep-install",
        description="demongrep installer - download and install the demongrep binary.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show installer version and exit.",
    )
    return parser


class CLIRunner:
    """Parses arguments, loads configuration and dispatches to a command."""

    def __init__(self, reporter: Optional[Reporter] = None) -> None:
        self._reporter = reporter

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Arguments without the program name (default: sys.argv[1:]).

        Returns:
            Process exit code.
        """
        parser = build_parser()
        argv_list = list(argv) if argv is not None else None

        try:
            args = parser.parse_args(argv_list)
        except SystemExit as e:
            # argparse exits 0 for --help and 2 for usage errors
            return EXIT_SUCCESS if e.code in (0, None) else EXIT_INVALID_USAGE

        if args.version:
            return VersionCommand(get_version()).execute(args)

        reporter = self._reporter or ConsoleReporter()

        try:
            config = load_config()
        except ConfigError as e:
            reporter.error(str(e))
            return EXIT_INVALID_USAGE

        configure_logging(debug=config.debug)
        LOGGER.debug(f"demongrep-installer {get_version()}")

        return InstallCommand(reporter).execute(args, config)


def main(argv: Optional[Iterable[str]] = None) -> int:
    """CLI entrypoint.

    Returns an exit code suitable for use as a console script.
    """
    return CLIRunner().run(argv)


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    raise SystemExit(main())
