"""Grouping of engine hosts into Prometheus target groups."""

from __future__ import annotations

from collections.abc import Iterable

from ovirt_bridge.models.host import Host
from ovirt_bridge.models.target import TargetGroup


def group_hosts(hosts: Iterable[Host]) -> list[TargetGroup]:
    """Group hosts by cluster.

    Clusters appear in the order their first host was seen, and addresses
    keep input order within a group. Addresses are not deduplicated.

    Args:
        hosts: Hosts as decoded from the engine response.

    Returns:
        One TargetGroup per distinct cluster id; empty for empty input.

    Example:
        >>> groups = group_hosts(hosts)
        >>> [g.cluster_id for g in groups]
        ['A', 'B']
    """
    by_cluster: dict[str, TargetGroup] = {}
    groups: list[TargetGroup] = []

    for host in hosts:
        group = by_cluster.get(host.cluster_id)
        if group is not None:
            group.targets.append(host.address)
            continue

        group = TargetGroup.for_cluster(host.cluster_id, host.address)
        by_cluster[host.cluster_id] = group
        groups.append(group)

    return groups
