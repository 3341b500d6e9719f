"""
Membership records returned by the orchestration API.

Only the fields the decision cycle needs are decoded. Everything else
in the API response is ignored.
"""

import ipaddress
from enum import Enum

import msgspec


class NodeRole(str, Enum):
    """Role of a node in the cluster."""

    MANAGER = "manager"
    WORKER = "worker"


class NodeState(str, Enum):
    """Readiness of a node as reported by the orchestrator."""

    READY = "ready"
    DOWN = "down"
    DISCONNECTED = "disconnected"
    UNKNOWN = "unknown"


class NodeStatus(msgspec.Struct, rename={"state": "State", "addr": "Addr"}):
    state: str
    addr: str


class NodeSpec(msgspec.Struct, rename={"role": "Role"}):
    role: str


class Node(msgspec.Struct, rename={"id": "ID", "status": "Status", "spec": "Spec"}):
    id: str
    status: NodeStatus
    spec: NodeSpec

    @property
    def is_ready_manager(self) -> bool:
        return (
            self.spec.role == NodeRole.MANAGER.value
            and self.status.state == NodeState.READY.value
        )


class ManagerAddress(msgspec.Struct, frozen=True):
    """
    A validated ``host:port`` endpoint of an eligible manager.

    ``host`` is always an IP literal. ``node_id`` is the identifier of the
    membership record the address came from, when there was one.
    """

    host: str
    port: int
    node_id: str | None = None

    @classmethod
    def parse(
        cls,
        value: str,
        node_id: str | None = None,
    ) -> "ManagerAddress | None":
        host, separator, port = value.strip().rpartition(":")
        if not separator or not host:
            return None

        if len(port) > 5 or not (port.isascii() and port.isdigit()):
            return None

        port_number = int(port)
        if port_number > 65535:
            return None

        try:
            if host.startswith("[") and host.endswith("]"):
                ip = ipaddress.IPv6Address(host[1:-1])

            else:
                ip = ipaddress.IPv4Address(host)

        except ValueError:
            return None

        return cls(
            host=str(ip),
            port=port_number,
            node_id=node_id,
        )

    @property
    def endpoint(self) -> tuple[str, int]:
        return (self.host, self.port)

    def same_endpoint(self, other: "ManagerAddress") -> bool:
        return self.endpoint == other.endpoint

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"

        return f"{self.host}:{self.port}"
