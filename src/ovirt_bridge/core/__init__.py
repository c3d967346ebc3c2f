"""Core functionality for ovirt-bridge.

This module contains the core business logic including configuration
management, the engine client and the exception hierarchy. The discovery
pipeline lives in the grouper, writer and discovery modules.
"""

from ovirt_bridge.core.client import InventoryClient
from ovirt_bridge.core.config import BridgeConfig, ConfigManager
from ovirt_bridge.core.exceptions import (
    BridgeError,
    ConfigurationError,
    EngineError,
    InventoryDecodeError,
    TargetWriteError,
)

__all__ = [
    "BridgeConfig",
    "BridgeError",
    "ConfigManager",
    "ConfigurationError",
    "EngineError",
    "InventoryClient",
    "InventoryDecodeError",
    "TargetWriteError",
]
