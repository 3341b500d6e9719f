from typing import Iterable

from swarm_quorum.models import ManagerAddress, Node


def select_manager_addresses(nodes: Iterable[Node]) -> list[ManagerAddress]:
    """Build the peer set from a membership snapshot.

    Keeps ready managers whose address parses as ``ip:port``, in source
    order. A second record advertising an endpoint already in the set is
    dropped.
    """
    peers: list[ManagerAddress] = []
    seen: set[tuple[str, int]] = set()

    for node in nodes:
        if not node.is_ready_manager:
            continue

        address = ManagerAddress.parse(node.status.addr, node_id=node.id)
        if address is None or address.endpoint in seen:
            continue

        seen.add(address.endpoint)
        peers.append(address)

    return peers
