"""CLI module for ovirt-bridge.

This package contains all Click command definitions for the ovirt-bridge CLI.
"""

from ovirt_bridge.cli.main import cli

__all__ = ["cli"]
