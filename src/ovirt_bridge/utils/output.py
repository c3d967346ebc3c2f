"""Rich terminal output utilities for ovirt-bridge.

This module provides formatted output using the Rich library for the
interactive commands: engine host listings, target group previews and
status messages.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table

from ovirt_bridge.models.host import Host
from ovirt_bridge.models.target import TargetGroup

# Global console instance
console = Console()
error_console = Console(stderr=True)


class OutputFormat(str, Enum):
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


class OutputFormatter:
    """Handles formatting and outputting data in various formats.

    Args:
        format_type: Output format to use (table, json, yaml).
        output_console: Rich console instance for output.

    Example:
        >>> formatter = OutputFormatter(OutputFormat.TABLE)
        >>> formatter.print_hosts(hosts)
        >>> formatter.print_targets(groups)
    """

    def __init__(
        self,
        format_type: OutputFormat = OutputFormat.TABLE,
        output_console: Console | None = None,
    ) -> None:
        self.format_type = format_type
        self.console = output_console or console

    def _print_data(self, data: Any) -> None:
        if self.format_type == OutputFormat.JSON:
            self.console.print_json(json.dumps(data, indent=2))
        else:
            self.console.print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))

    def print_hosts(self, hosts: list[Host]) -> None:
        """Print the hosts reported by the engine.

        Args:
            hosts: List of Host objects to display.
        """
        if self.format_type != OutputFormat.TABLE:
            self._print_data([h.to_dict() for h in hosts])
            return

        table = Table(title="Engine Hosts", show_header=True)
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Address", style="white")
        table.add_column("Cluster", style="yellow")

        for host in hosts:
            table.add_row(host.name or "-", host.address, host.cluster_id)

        self.console.print(table)

    def print_targets(self, groups: list[TargetGroup]) -> None:
        """Print target groups.

        Args:
            groups: Target groups to display.
        """
        if self.format_type != OutputFormat.TABLE:
            self._print_data([g.to_dict() for g in groups])
            return

        table = Table(title="Scrape Targets", show_header=True)
        table.add_column("Cluster", style="yellow", no_wrap=True)
        table.add_column("Hosts", justify="right", style="dim")
        table.add_column("Targets", style="white")

        for group in groups:
            table.add_row(
                group.cluster_id or "-",
                str(len(group.targets)),
                "\n".join(group.targets),
            )

        self.console.print(table)


def print_success(message: str) -> None:
    """Print a success message.

    Args:
        message: Success message to display.
    """
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message to stderr.

    Args:
        message: Error message to display.
    """
    error_console.print(f"[red]✗[/red] {message}")


def print_info(message: str) -> None:
    """Print an info message.

    Args:
        message: Info message to display.
    """
    console.print(f"[blue]ℹ[/blue] {message}")
