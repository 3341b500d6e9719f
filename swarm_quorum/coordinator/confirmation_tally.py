def quorum_threshold(peer_count: int) -> int:
    """Confirmations needed, self included, for a peer set of ``peer_count``."""
    return peer_count // 2 + 1


class ConfirmationTally:
    """
    Confirmations collected for one proposal.

    The proposer is counted from the start. Confirmations are keyed by the
    sender's ``node_id`` so a peer that confirms twice is counted once.
    """

    def __init__(
        self,
        self_id: str,
        threshold: int,
    ) -> None:
        self.self_id = self_id
        self.threshold = threshold
        self._confirmed: set[str] = {self_id}
        self.duplicates: int = 0

    def add(self, node_id: str) -> bool:
        if node_id in self._confirmed:
            self.duplicates += 1
            return False

        self._confirmed.add(node_id)
        return True

    @property
    def count(self) -> int:
        return len(self._confirmed)

    @property
    def reached(self) -> bool:
        return self.count >= self.threshold

    @property
    def confirmed_by(self) -> tuple[str, ...]:
        return tuple(
            sorted(
                node_id for node_id in self._confirmed if node_id != self.self_id
            )
        )
