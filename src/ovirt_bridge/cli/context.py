"""CLI context for ovirt-bridge.

This module defines the shared context object passed to all CLI commands,
extracted to avoid circular imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from ovirt_bridge.core.client import InventoryClient
from ovirt_bridge.core.config import BridgeConfig, ConfigManager
from ovirt_bridge.core.discovery import DiscoveryLoop
from ovirt_bridge.utils.logging import configure_logging


class Context:
    """CLI context object passed to all commands.

    Holds the CLI options and lazily resolves the configuration, so that
    commands like ``config path`` work without engine credentials.

    Attributes:
        config_path: Explicit config file path, if given.
        overrides: Nested settings taken from CLI options.
        config: Resolved BridgeConfig, once loaded.
        verbose: Verbosity level (0-3).
        debug: Whether to show debug tracebacks.
    """

    def __init__(self) -> None:
        self.config_path: Path | None = None
        self.overrides: dict[str, Any] = {}
        self.config: BridgeConfig | None = None
        self.verbose: int = 0
        self.debug: bool = False

    @property
    def config_manager(self) -> ConfigManager:
        """ConfigManager for the selected config file."""
        return ConfigManager(self.config_path, required=self.config_path is not None)

    def init_config(self) -> BridgeConfig:
        """Resolve and validate the configuration.

        Once resolved, logging is reconfigured with the level and file from
        the configuration unless -v flags were given.

        Returns:
            Resolved BridgeConfig.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        if self.config is None:
            self.config = self.config_manager.load(self.overrides)
            configure_logging(
                verbosity=self.verbose,
                log_file=self.config.logging.file,
                log_level=self.config.logging.level,
            )
        return self.config

    def init_client(self) -> InventoryClient:
        """Create an inventory client from the configuration.

        Returns:
            InventoryClient instance.
        """
        config = self.init_config()
        return InventoryClient(config.engine, timeout=config.request_timeout)

    def init_loop(self) -> DiscoveryLoop:
        """Create a discovery loop from the configuration.

        Returns:
            DiscoveryLoop instance.
        """
        config = self.init_config()
        return DiscoveryLoop(config, client=self.init_client())


pass_context = click.make_pass_decorator(Context, ensure=True)
