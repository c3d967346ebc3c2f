"""Data models for ovirt-bridge.

This module contains Pydantic models for engine hosts and scrape target groups.
"""

from ovirt_bridge.models.host import Cluster, Host, HostInventory, parse_inventory
from ovirt_bridge.models.target import CLUSTER_LABEL, TargetGroup

__all__ = [
    "CLUSTER_LABEL",
    "Cluster",
    "Host",
    "HostInventory",
    "TargetGroup",
    "parse_inventory",
]
