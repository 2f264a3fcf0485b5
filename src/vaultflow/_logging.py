"""Logging setup for the vf command line.

Library modules only ever do::

    log = logging.getLogger(__name__)

and never configure handlers themselves. The CLI calls configure_logging()
once; embedding applications configure the "vaultflow" logger as they like.

VAULTFLOW_LOG_LEVEL selects the level:
    - DEBUG: one line per folder, entry and page (deterministic ids, reuse vs create)
    - INFO: pipeline milestones (default)
    - WARNING: documents left in place, other handled surprises
    - ERROR: identity collisions and errors that aborted an import
"""

import logging
import os
import sys

PACKAGE_LOGGER = "vaultflow"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _level_from_env() -> int:
    level_name = os.environ.get("VAULTFLOW_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def configure_logging() -> None:
    """Attach a stderr handler to the package logger.

    Subsequent calls are no-ops.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.handlers:
        return

    level = _level_from_env()
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger.setLevel(level)
    package_logger.addHandler(handler)

    # Keep records away from the root logger (no duplicate lines)
    package_logger.propagate = False


def set_quiet_mode(quiet: bool) -> None:
    """Only let errors through the package logger when quiet is set."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    level = logging.ERROR if quiet else _level_from_env()
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        handler.setLevel(level)
