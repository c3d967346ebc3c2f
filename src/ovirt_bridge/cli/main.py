"""Main CLI entry point for ovirt-bridge.

This module defines the main CLI group and the global options that are
shared across all commands. Engine and discovery options override values
from the YAML config file.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click
from rich.console import Console

from ovirt_bridge import __version__
from ovirt_bridge.cli.config_cmd import config
from ovirt_bridge.cli.context import Context, pass_context
from ovirt_bridge.cli.discover import hosts, once, run
from ovirt_bridge.core.config import PASSWORD_ENV, get_default_config_path
from ovirt_bridge.core.exceptions import BridgeError
from ovirt_bridge.utils.logging import configure_logging
from ovirt_bridge.utils.output import error_console, print_error


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console = Console()
    console.print(f"ovirt-prometheus-bridge version [cyan]{__version__}[/cyan]")
    ctx.exit()


@click.group()
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v, -vv, -vvv for more).",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Show full error tracebacks.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    envvar="OVIRT_BRIDGE_CONFIG",
    help=f"Path to config file (default: {get_default_config_path()}).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write DEBUG logs to this file.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Target file for Prometheus (default: engine-hosts.json).",
)
@click.option(
    "--engine-url",
    default=None,
    help="Engine URL (default: https://localhost:8443).",
)
@click.option(
    "--engine-user",
    default=None,
    help="Engine user (default: admin@internal).",
)
@click.option(
    "--engine-password",
    envvar=PASSWORD_ENV,
    default=None,
    help=f"Engine password. Consider using the {PASSWORD_ENV} environment variable.",
)
@click.option(
    "--no-verify",
    is_flag=True,
    default=False,
    help="Don't verify the engine certificate.",
)
@click.option(
    "--engine-ca",
    default=None,
    help="Path to engine CA certificate (default: /etc/pki/vdsm/certs/cacert.pem).",
)
@click.option(
    "--update-interval",
    type=click.IntRange(min=1),
    default=None,
    help="Update interval for host discovery in seconds (default: 60).",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Engine request timeout in seconds (default: min(30, interval)).",
)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@pass_context
def cli(
    ctx: Context,
    verbose: int,
    debug: bool,
    config_path: str | None,
    log_file: str | None,
    output: str | None,
    engine_url: str | None,
    engine_user: str | None,
    engine_password: str | None,
    no_verify: bool,
    engine_ca: str | None,
    update_interval: int | None,
    timeout: float | None,
) -> None:
    """ovirt-prometheus-bridge - Prometheus targets for oVirt hosts.

    Polls the oVirt engine for its hosts and writes them, grouped by
    cluster, to a file for Prometheus file-based service discovery.

    Use -v, -vv, or -vvv for increasing levels of verbosity.

    Examples:

        # Run the bridge

        $ ENGINE_PASSWORD=secret ovirt-prometheus-bridge \\
            --engine-url https://engine.example.com \\
            --output /etc/prometheus/engine-hosts.json run

        # Preview the targets without writing

        $ ovirt-prometheus-bridge once --dry-run

        # List engine hosts

        $ ovirt-prometheus-bridge hosts
    """
    ctx.verbose = verbose
    ctx.debug = debug

    configure_logging(verbosity=verbose, log_file=log_file)

    if config_path:
        ctx.config_path = Path(config_path)

    ctx.overrides = {
        "engine": {
            "url": engine_url,
            "user": engine_user,
            "password": engine_password,
            "verify": False if no_verify else None,
            "ca_file": engine_ca,
            "timeout": timeout,
        },
        "discovery": {
            "output": output,
            "interval": update_interval,
        },
        "logging": {
            "file": log_file,
        },
    }


# Register subcommands
cli.add_command(run)
cli.add_command(once)
cli.add_command(hosts)
cli.add_command(config)


def main() -> None:
    """Main entry point with error handling."""
    try:
        cli(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        error_console.print("\n[dim]Aborted[/dim]")
        sys.exit(1)
    except BridgeError as e:
        print_error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        error_console.print("\n[dim]Interrupted[/dim]")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("OVIRT_BRIDGE_DEBUG") or "--debug" in sys.argv:
            import traceback

            traceback.print_exc()
        else:
            print_error(f"Unexpected error: {e}")
            error_console.print("[dim]Use --debug for full traceback[/dim]")
        sys.exit(1)


if __name__ == "__main__":
    main()
