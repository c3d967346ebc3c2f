"""ovirt-bridge - Prometheus file-based service discovery for oVirt hosts.

This package polls an oVirt engine for its hypervisor hosts and writes
them as Prometheus scrape targets, grouped by cluster, to a file watched
by a ``file_sd_config``.

Example:
    $ ENGINE_PASSWORD=secret ovirt-prometheus-bridge \\
        --engine-url https://engine.example.com \\
        --output /etc/prometheus/engine-hosts.json run
"""

__version__ = "0.1.0"

from ovirt_bridge.core.exceptions import (
    BridgeError,
    ConfigurationError,
    EngineError,
    InventoryDecodeError,
    TargetWriteError,
)

__all__ = [
    "BridgeError",
    "ConfigurationError",
    "EngineError",
    "InventoryDecodeError",
    "TargetWriteError",
    "__version__",
]
