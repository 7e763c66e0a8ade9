"""Logging setup for demongrep-installer.

All modules obtain their logger through :func:`get_logger` so that a single
call to :func:`configure_logging` controls verbosity for the whole package.
User-facing progress output is handled by the reporter, not by logging.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

ROOT_LOGGER_NAME = "demongrep_installer"

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"

_HANDLER_ATTR = "_demongrep_installer_handler"


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package root logger.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the package root logger.

    Precedence: debug > quiet > verbose > default (WARNING).

    Args:
        debug: Enable DEBUG level.
        verbose: Enable INFO level.
        quiet: Only show errors.
        stream: Output stream for log records (default: stderr).

    Returns:
        The configured root package logger.
    """
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    root = logging.getLogger(ROOT_LOGGER_NAME)

    # Replace our own handler on reconfiguration instead of stacking another one
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    setattr(handler, _HANDLER_ATTR, True)

    root.addHandler(handler)
    root.setLevel(level)
    return root
