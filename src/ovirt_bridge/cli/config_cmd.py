"""Configuration commands for ovirt-bridge.

This module provides CLI commands for viewing and scaffolding the
ovirt-bridge configuration file.
"""

from __future__ import annotations

import json

import click
import yaml

from ovirt_bridge.cli.context import Context, pass_context
from ovirt_bridge.core.config import PASSWORD_ENV, ConfigManager
from ovirt_bridge.core.exceptions import ConfigurationError
from ovirt_bridge.utils.output import console, print_error, print_info, print_success


@click.group()
def config() -> None:
    """Inspect and initialize configuration.

    Settings are resolved from CLI options, the ENGINE_PASSWORD
    environment variable, the YAML config file and built-in defaults,
    in that order.
    """


@config.command("show")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    help="Output format.",
)
@pass_context
def config_show(ctx: Context, fmt: str) -> None:
    """Show the resolved configuration.

    The engine password is masked.

    Examples:

        $ ovirt-prometheus-bridge config show

        $ ovirt-prometheus-bridge --update-interval 30 config show -f json
    """
    try:
        data = ctx.init_config().to_dict()
    except ConfigurationError as e:
        print_error(str(e))
        raise SystemExit(1) from e

    if fmt == "json":
        console.print_json(json.dumps(data, indent=2))
    else:
        console.print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))

    console.print(f"\n[dim]Config file: {ctx.config_manager.path}[/dim]")


@config.command("init")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Overwrite existing configuration.",
)
@pass_context
def config_init(ctx: Context, force: bool) -> None:
    """Create an example configuration file.

    Examples:

        $ ovirt-prometheus-bridge config init

        $ ovirt-prometheus-bridge --config /etc/ovirt-bridge.yaml config init --force
    """
    config_path = ctx.config_manager.path

    if config_path.exists() and not force:
        print_error(f"Configuration already exists: {config_path}")
        print_info("Use --force to overwrite.")
        raise SystemExit(1)

    try:
        path = ConfigManager.create_example_config(config_path)
    except OSError as e:
        print_error(f"Failed to create configuration: {e}")
        raise SystemExit(1) from e

    print_success(f"Created configuration at: {path}")
    print_info(f"Set the engine password in this file or via the {PASSWORD_ENV} variable.")


@config.command("path")
@pass_context
def config_path(ctx: Context) -> None:
    """Show the configuration file path.

    Examples:

        $ ovirt-prometheus-bridge config path
    """
    path = ctx.config_manager.path
    click.echo(str(path))

    if path.exists():
        console.print("[dim](file exists)[/dim]")
    else:
        console.print("[dim](file does not exist)[/dim]")
