"""Host models for ovirt-bridge.

This module defines the data models for the host inventory returned by
the engine's ``/ovirt-engine/api/hosts`` endpoint, and the parser that
decodes a raw response body into them.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ovirt_bridge.core.exceptions import InventoryDecodeError


class Cluster(BaseModel):
    """Reference to the cluster a host belongs to.

    Args:
        id: Opaque cluster identifier assigned by the engine.
    """

    model_config = ConfigDict(extra="ignore")

    id: str


class Host(BaseModel):
    """Represents one hypervisor as reported by the engine.

    Args:
        address: Hostname or IP address the host is reachable at.
        cluster: Cluster the host belongs to.

    Example:
        >>> host = Host(address="node1.example.com", cluster=Cluster(id="c-1"))
        >>> host.cluster_id
        'c-1'
    """

    model_config = ConfigDict(extra="ignore")

    address: str
    cluster: Cluster
    name: str | None = Field(default=None, description="Engine display name")

    @property
    def cluster_id(self) -> str:
        """Identifier of the cluster this host belongs to."""
        return self.cluster.id

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return self.model_dump(exclude_none=True)


class HostInventory(BaseModel):
    """Top-level document returned by the hosts collection endpoint.

    The engine returns ``{}`` when it manages no hosts, so a missing or
    null ``host`` key is an empty inventory.
    """

    model_config = ConfigDict(extra="ignore")

    host: list[Host] = Field(default_factory=list)

    @field_validator("host", mode="before")
    @classmethod
    def none_as_empty(cls, v: object) -> object:
        """Treat an explicit null host list as empty."""
        return [] if v is None else v


def parse_inventory(data: bytes | str) -> list[Host]:
    """Decode a raw engine response into a list of hosts.

    Args:
        data: Raw response body.

    Returns:
        Hosts in the order the engine listed them.

    Raises:
        InventoryDecodeError: If the body is not JSON or has the wrong shape.
    """
    try:
        inventory = HostInventory.model_validate_json(data)
    except ValidationError as e:
        raise InventoryDecodeError(
            f"Invalid host inventory: {e.error_count()} error(s), first: {e.errors()[0]['msg']}",
            details={"location": ".".join(str(p) for p in e.errors()[0]["loc"])},
        ) from e
    return inventory.host
