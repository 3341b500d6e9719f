from enum import Enum

import msgspec


class CoordinatorState(str, Enum):
    IDLE = "idle"
    DISCOVERING = "discovering"
    PROPOSING = "proposing"
    COLLECTING = "collecting"
    DECIDED = "decided"


class CycleOutcome(str, Enum):
    """How one decision cycle ended."""

    FETCH_FAILED = "fetch_failed"  # Membership source errored, nothing sent
    INSUFFICIENT_PEERS = "insufficient_peers"  # Fewer than two managers
    QUORUM_REACHED = "quorum_reached"  # Decided(Success)
    NO_QUORUM = "no_quorum"  # Collection deadline elapsed


class CycleResult(msgspec.Struct, frozen=True, kw_only=True):
    outcome: CycleOutcome
    peer_count: int = 0
    threshold: int = 0
    confirmations: int = 0
    confirmed_by: tuple[str, ...] = ()
    elapsed: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.outcome == CycleOutcome.QUORUM_REACHED
