"""Logging setup for ovirt-bridge.

The bridge logs under the ``ovirt_bridge`` logger. The console level is
picked in this order:
- -v: INFO, -vv: DEBUG, -vvv: DEBUG plus urllib3 connection logging
- no -v: the ``logging.level`` from the config file
- neither: WARNING

An optional log file always receives DEBUG records.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "ovirt_bridge"

# Libraries whose records are shown at -vvv
HTTP_LOGGERS = ("urllib3",)


def get_log_level(verbosity: int) -> int:
    """Map a -v count to a logging level.

    Args:
        verbosity: Number of -v flags.

    Returns:
        Logging level constant.
    """
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def _console_level(verbosity: int, log_level: str | None) -> int:
    if verbosity or not log_level:
        return get_log_level(verbosity)
    return getattr(logging, log_level.upper(), logging.WARNING)


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def _drop_handlers(logger: logging.Logger) -> None:
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


def configure_logging(
    verbosity: int = 0,
    log_file: str | Path | None = None,
    log_level: str | None = None,
) -> None:
    """Configure the package logger.

    Safe to call more than once: the CLI configures logging from its flags
    first and again once the config file has been read.

    Args:
        verbosity: Number of -v flags from the CLI.
        log_file: Optional path to a DEBUG log file.
        log_level: Level from the config file; ignored when -v was given.

    Example:
        >>> configure_logging(verbosity=1)
        >>> configure_logging(log_file="/var/log/ovirt-bridge.log", log_level="INFO")
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG)
    _drop_handlers(package_logger)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_console_level(verbosity, log_level))
    console_handler.setFormatter(_formatter())
    package_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_formatter())
        package_logger.addHandler(file_handler)

    for name in HTTP_LOGGERS:
        http_logger = logging.getLogger(name)
        http_logger.handlers.clear()
        if verbosity >= 3:
            http_logger.setLevel(logging.DEBUG)
            http_logger.addHandler(console_handler)
        else:
            http_logger.setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger under the ``ovirt_bridge`` namespace.

    Args:
        name: Module name, e.g. 'client' or 'discovery'.

    Returns:
        Logger instance.
    """
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
