from typing import Protocol, Sequence

from swarm_quorum.models import Node


class MembershipSource(Protocol):
    """Protocol that any source of cluster membership must implement."""

    async def list_managers(self) -> Sequence[Node]:  # pragma: no cover
        """Return the current membership snapshot.

        Implementations **must not** cache between calls and **must** raise
        :class:`swarm_quorum.errors.MembershipError` for every failure,
        whatever its cause. Filtering to ready managers is left to the
        caller (see :func:`select_manager_addresses`).
        """

    async def close(self) -> None:  # pragma: no cover
        """Release any connection held by the source."""
