"""Target group model for ovirt-bridge.

A target group is one entry of a Prometheus ``file_sd_config`` document:
a list of addresses that share a common label set.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

CLUSTER_LABEL = "cluster"


class TargetGroup(BaseModel):
    """Scrape targets for a single cluster.

    Args:
        targets: Host addresses, in the order the hosts were seen.
        labels: Label set applied to every target.

    Example:
        >>> group = TargetGroup.for_cluster("c-1", "node1.example.com")
        >>> group.model_dump()
        {'targets': ['node1.example.com'], 'labels': {'cluster': 'c-1'}}
    """

    targets: list[str] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def for_cluster(cls, cluster_id: str, address: str) -> TargetGroup:
        """Create a group for a cluster seeded with its first address."""
        return cls(targets=[address], labels={CLUSTER_LABEL: cluster_id})

    @property
    def cluster_id(self) -> str | None:
        """Cluster this group was built for."""
        return self.labels.get(CLUSTER_LABEL)

    def to_dict(self) -> dict:
        """Convert to the file_sd representation."""
        return self.model_dump()
