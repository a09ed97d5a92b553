"""Package-wide logging for mcflow.

All module loggers live under the ``mcflow`` logger, which owns the only
handler. Solvers report progress at DEBUG; the command line reports file
loading and timing at INFO. Log records go to stderr so that results printed
on stdout stay machine-readable.
"""

import logging
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "mcflow"

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler_installed = False


def setup_root_logger(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Install the single ``mcflow`` handler unless it is already installed.

    Args:
        level: Initial level of the ``mcflow`` logger.
        format_string: Record format; defaults to ``DEFAULT_FORMAT``.
        handler: Handler to install; defaults to a stderr StreamHandler.
    """
    global _handler_installed
    if _handler_installed:
        return

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.setLevel(level)

    handler = handler if handler is not None else logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    package_logger.addHandler(handler)
    package_logger.propagate = True

    _handler_installed = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, which defers its level to ``mcflow``."""
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: Union[int, str]) -> None:
    """Set the level of the ``mcflow`` logger and its handler.

    Args:
        level: A ``logging`` level number or a level name such as ``"debug"``.

    Raises:
        ValueError: If ``level`` is a name ``logging`` does not know.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level '{level}'.")
        level = resolved

    setup_root_logger()
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        handler.setLevel(level)


def level_for_flags(verbose: bool, quiet: bool) -> int:
    """Map the command-line ``--verbose``/``--quiet`` flags to a level."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def reset_logging() -> None:
    """Remove the ``mcflow`` handler so the next setup starts fresh."""
    global _handler_installed
    _handler_installed = False

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


setup_root_logger()
