"""Discovery commands for ovirt-bridge.

This module provides the commands that talk to the engine: the
long-running ``run`` loop, a single ``once`` cycle, and ``hosts`` for
inspecting what the engine reports.
"""

from __future__ import annotations

import signal
from types import FrameType

import click

from ovirt_bridge.cli.context import Context, pass_context
from ovirt_bridge.core.exceptions import BridgeError, ConfigurationError
from ovirt_bridge.core.grouper import group_hosts
from ovirt_bridge.core.writer import TargetWriter
from ovirt_bridge.models.host import parse_inventory
from ovirt_bridge.utils.logging import get_logger
from ovirt_bridge.utils.output import (
    OutputFormat,
    OutputFormatter,
    print_error,
    print_info,
    print_success,
)

logger = get_logger("cli")


@click.command("run")
@pass_context
def run(ctx: Context) -> None:
    """Poll the engine and rewrite the target file until terminated.

    Failed cycles are logged and retried at the next interval. SIGTERM
    and SIGINT stop the loop after the current cycle.

    Examples:

        $ ovirt-prometheus-bridge --engine-url https://engine.example.com run

        $ ENGINE_PASSWORD=secret ovirt-prometheus-bridge -v run
    """
    try:
        loop = ctx.init_loop()
    except ConfigurationError as e:
        print_error(str(e))
        raise SystemExit(1) from e

    def handle_signal(signum: int, _frame: FrameType | None) -> None:
        logger.info(f"Received {signal.Signals(signum).name}, stopping")
        loop.stop()

    signal.signal(signal.SIGTERM, handle_signal)
    signal.signal(signal.SIGINT, handle_signal)

    with loop:
        loop.run()


@click.command("once")
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the target document instead of writing it.",
)
@pass_context
def once(ctx: Context, dry_run: bool) -> None:
    """Run a single discovery cycle.

    Exits non-zero if the cycle failed; the target file is then left
    unchanged.

    Examples:

        $ ovirt-prometheus-bridge once

        $ ovirt-prometheus-bridge once --dry-run
    """
    if dry_run:
        try:
            with ctx.init_client() as client:
                groups = group_hosts(parse_inventory(client.fetch_hosts()))
        except BridgeError as e:
            print_error(str(e))
            raise SystemExit(1) from e

        click.echo(TargetWriter.render(groups), nl=False)
        return

    try:
        loop = ctx.init_loop()
    except ConfigurationError as e:
        print_error(str(e))
        raise SystemExit(1) from e

    with loop:
        result = loop.run_once()

    if not result.success:
        print_error(str(result.error))
        raise SystemExit(1)

    print_success(
        f"Wrote {result.groups} target group(s) for {result.hosts} host(s) "
        f"to {loop.writer.path}"
    )


@click.command("hosts")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["table", "json", "yaml"]),
    default="table",
    help="Output format.",
)
@click.option(
    "--group",
    "-g",
    is_flag=True,
    help="Show hosts grouped into scrape targets by cluster.",
)
@pass_context
def hosts(ctx: Context, fmt: str, group: bool) -> None:
    """List the hosts reported by the engine.

    Examples:

        $ ovirt-prometheus-bridge hosts

        $ ovirt-prometheus-bridge hosts --group

        $ ovirt-prometheus-bridge hosts -f json
    """
    try:
        with ctx.init_client() as client:
            host_list = parse_inventory(client.fetch_hosts())
    except BridgeError as e:
        print_error(str(e))
        raise SystemExit(1) from e

    if not host_list:
        print_info("The engine reported no hosts.")
        return

    formatter = OutputFormatter(OutputFormat(fmt))
    if group:
        formatter.print_targets(group_hosts(host_list))
    else:
        formatter.print_hosts(host_list)
