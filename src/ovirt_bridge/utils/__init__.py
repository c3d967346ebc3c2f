"""Utility modules for ovirt-bridge.

This package contains shared utilities for logging and terminal output.
Output helpers are imported from ovirt_bridge.utils.output directly.
"""

from ovirt_bridge.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
