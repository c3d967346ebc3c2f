"""Discovery loop for ovirt-bridge.

This module provides the DiscoveryLoop class that ties the pipeline
together: fetch the host inventory, decode it, group hosts by cluster and
write the target file. A failed cycle leaves the previous file in place
and the loop simply waits for the next tick.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ovirt_bridge.core.client import InventoryClient
from ovirt_bridge.core.exceptions import (
    EngineError,
    InventoryDecodeError,
    TargetWriteError,
)
from ovirt_bridge.core.grouper import group_hosts
from ovirt_bridge.core.writer import TargetWriter
from ovirt_bridge.models.host import parse_inventory
from ovirt_bridge.utils.logging import get_logger

if TYPE_CHECKING:
    from ovirt_bridge.core.config import BridgeConfig
    from ovirt_bridge.core.exceptions import BridgeError

logger = get_logger("discovery")

CYCLE_ERRORS = (EngineError, InventoryDecodeError, TargetWriteError)


@dataclass
class CycleResult:
    """Outcome of a single discovery cycle.

    Args:
        started_at: Wall-clock time the cycle started.
        finished_at: Wall-clock time the cycle finished.
        hosts: Number of hosts reported by the engine.
        groups: Number of target groups written.
        error: The failure that abandoned the cycle, if any.

    Attributes:
        success: True if the target file was written.
    """

    started_at: float
    finished_at: float = 0.0
    hosts: int = 0
    groups: int = 0
    error: BridgeError | None = None

    @property
    def success(self) -> bool:
        """Check if the cycle wrote the target file."""
        return self.error is None

    @property
    def duration(self) -> float:
        """Cycle duration in seconds."""
        return self.finished_at - self.started_at


class DiscoveryLoop:
    """Runs discovery cycles on a fixed interval.

    Args:
        config: Resolved bridge configuration.
        client: Inventory client; built from the config if not given.
        writer: Target writer; built from the config if not given.

    Attributes:
        last_success: Time of the last successful write, or None.

    Example:
        >>> loop = DiscoveryLoop(config)
        >>> result = loop.run_once()
        >>> result.success
        True

        >>> # From another thread or a signal handler
        >>> loop.stop()
    """

    def __init__(
        self,
        config: BridgeConfig,
        client: InventoryClient | None = None,
        writer: TargetWriter | None = None,
    ) -> None:
        self.config = config
        self.client = client or InventoryClient(config.engine, timeout=config.request_timeout)
        self.writer = writer or TargetWriter(config.discovery.output)
        self.interval = config.discovery.interval
        self.last_success: float | None = None
        self._stop = threading.Event()

    def run_once(self) -> CycleResult:
        """Run a single fetch, decode, group and write cycle.

        Cycle-level failures are logged and reported in the result rather
        than raised.

        Returns:
            CycleResult describing the cycle.
        """
        result = CycleResult(started_at=time.time())

        try:
            body = self.client.fetch_hosts()
            hosts = parse_inventory(body)
            groups = group_hosts(hosts)
            self.writer.write(groups)

            result.hosts = len(hosts)
            result.groups = len(groups)
            self.last_success = time.time()
            logger.info(
                f"Discovered {result.hosts} host(s) in {result.groups} cluster(s), "
                f"wrote {self.writer.path}"
            )

        except CYCLE_ERRORS as e:
            result.error = e
            logger.error(f"Discovery cycle failed: {e}")

        result.finished_at = time.time()
        return result

    def run(self, max_cycles: int | None = None) -> int:
        """Run cycles until stopped.

        The interval is waited after each cycle finishes.

        Args:
            max_cycles: Stop after this many cycles; None runs until stop().

        Returns:
            Number of cycles that ran.
        """
        cycles = 0
        logger.info(
            f"Polling {self.client.url} every {self.interval}s, writing {self.writer.path}"
        )

        while not self._stop.is_set():
            self.run_once()
            cycles += 1

            if max_cycles is not None and cycles >= max_cycles:
                break

            if self._stop.wait(self.interval):
                break

        logger.info(f"Discovery stopped after {cycles} cycle(s)")
        return cycles

    def stop(self) -> None:
        """Ask the loop to exit; an in-flight cycle finishes first."""
        self._stop.set()

    @property
    def stopped(self) -> bool:
        """Whether stop() has been called."""
        return self._stop.is_set()

    def close(self) -> None:
        """Release the client's connections."""
        self.client.close()

    def __enter__(self) -> DiscoveryLoop:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
