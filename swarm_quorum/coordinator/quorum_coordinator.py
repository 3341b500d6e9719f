"""
Quorum coordinator for scaling decisions.

One decision cycle discovers the ready managers, proposes a scaling
action to every other manager, collects confirmations until a majority
(self included) agrees or the collection deadline passes, and on success
tells the peers the action is proceeding. Between cycles the coordinator
answers proposals made by its peers.
"""

import asyncio
import random
import time
from typing import Protocol, Sequence, Tuple

from swarm_quorum.env import Env, TimeParser
from swarm_quorum.errors import MembershipError, SetupError
from swarm_quorum.logging import Logger
from swarm_quorum.logging.quorum_logging_models import (
    CoordinatorDebug,
    CoordinatorError,
    CoordinatorInfo,
    CoordinatorTrace,
    CoordinatorWarning,
    QuorumDecision,
)
from swarm_quorum.membership import MembershipSource, select_manager_addresses
from swarm_quorum.models import (
    Confirmation,
    CoordinatorState,
    CycleOutcome,
    CycleResult,
    ManagerAddress,
    Message,
    Proposal,
    ScaleComplete,
)

from .confirmation_tally import ConfirmationTally, quorum_threshold


Address = Tuple[str, int]


class Messenger(Protocol):
    async def send(self, target: ManagerAddress | Address, message: Message) -> None:  # pragma: no cover
        ...

    async def receive(self, timeout: float | None = None) -> Tuple[Message, Address] | None:  # pragma: no cover
        ...

    async def drain(self) -> list[Tuple[Message, Address]]:  # pragma: no cover
        ...


class QuorumCoordinator:
    def __init__(
        self,
        env: Env,
        membership: MembershipSource,
        messenger: Messenger,
        logger: Logger | None = None,
    ) -> None:
        self._env = env
        self._membership = membership
        self._messenger = messenger
        self._logger = logger or Logger()

        advertise_address = ManagerAddress.parse(env.advertise_addr)
        if advertise_address is None:
            raise SetupError(
                "Advertised address must be an ip:port address",
                advertise_addr=env.advertise_addr,
            )

        self._advertise_address = advertise_address
        self._node_id = env.QUORUM_NODE_ID or str(advertise_address)

        self._cycle_interval = TimeParser(env.QUORUM_CYCLE_INTERVAL).time
        self._cycle_jitter = TimeParser(env.QUORUM_CYCLE_JITTER).time
        self._collection_timeout = TimeParser(env.QUORUM_COLLECTION_TIMEOUT).time
        self._auto_confirm = env.QUORUM_AUTO_CONFIRM

        self._state = CoordinatorState.IDLE
        self._last_result: CycleResult | None = None
        self._running = False
        self._run_task: asyncio.Task | None = None

    @property
    def node_id(self) -> str:
        return self._node_id

    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def last_result(self) -> CycleResult | None:
        return self._last_result

    @property
    def _log_fields(self) -> dict:
        return {
            "node_id": self._node_id,
            "node_host": self._advertise_address.host,
            "node_port": self._advertise_address.port,
        }

    async def run(self) -> None:
        self._running = True
        self._run_task = asyncio.current_task()

        await self._logger.log(
            CoordinatorInfo(
                message=(
                    f"Quorum coordinator started for service {self._env.SERVICE_ID} "
                    f"(cpu_threshold={self._env.CPU_THRESHOLD})"
                ),
                **self._log_fields,
            )
        )

        try:
            while self._running:
                await self.run_cycle()
                await self.serve(self.next_cycle_delay())

        except asyncio.CancelledError:
            pass

        finally:
            self._running = False
            self._run_task = None
            self._state = CoordinatorState.IDLE

    def stop(self) -> None:
        self._running = False

        if self._run_task and not self._run_task.done():
            self._run_task.cancel()

    def next_cycle_delay(self) -> float:
        return self._cycle_interval + random.uniform(0, self._cycle_jitter)

    async def run_cycle(self) -> CycleResult:
        started = time.monotonic()
        self._state = CoordinatorState.DISCOVERING

        try:
            nodes = await self._membership.list_managers()

        except MembershipError as membership_error:
            await self._logger.log(
                CoordinatorError(
                    message=f"Failed to retrieve manager addresses: {membership_error}",
                    error=membership_error.to_dict(),
                    **self._log_fields,
                )
            )

            return self._finish(
                CycleResult(
                    outcome=CycleOutcome.FETCH_FAILED,
                    elapsed=time.monotonic() - started,
                )
            )

        peers = select_manager_addresses(nodes)
        self._resolve_identity(peers)

        peer_count = len(peers)
        if peer_count < 2:
            await self._logger.log(
                CoordinatorDebug(
                    message=f"Skipping cycle, {peer_count} ready manager(s) discovered",
                    **self._log_fields,
                )
            )

            return self._finish(
                CycleResult(
                    outcome=CycleOutcome.INSUFFICIENT_PEERS,
                    peer_count=peer_count,
                    elapsed=time.monotonic() - started,
                )
            )

        threshold = quorum_threshold(peer_count)
        targets = [
            peer for peer in peers if not peer.same_endpoint(self._advertise_address)
        ]

        # Answer proposals that arrived while idle, drop stale confirmations
        for message, addr in await self._messenger.drain():
            await self._handle_idle_message(message, addr)

        self._state = CoordinatorState.PROPOSING

        proposal = Proposal(node_id=self._node_id)
        for peer in targets:
            await self._messenger.send(peer, proposal)

        await self._logger.log(
            CoordinatorDebug(
                message=f"Proposed scaling to {len(targets)} peer(s), threshold {threshold} of {peer_count}",
                **self._log_fields,
            )
        )

        self._state = CoordinatorState.COLLECTING

        tally = ConfirmationTally(self._node_id, threshold)
        await self._collect(tally)

        self._state = CoordinatorState.DECIDED

        if tally.reached:
            for peer in targets:
                await self._messenger.send(peer, ScaleComplete())

            outcome = CycleOutcome.QUORUM_REACHED

            await self._logger.log(
                CoordinatorInfo(
                    message="Scaling decision reached and action taken.",
                    **self._log_fields,
                )
            )

        else:
            outcome = CycleOutcome.NO_QUORUM

            await self._logger.log(
                CoordinatorWarning(
                    message=(
                        f"No quorum after {self._collection_timeout}s: "
                        f"{tally.count} of {threshold} confirmations"
                    ),
                    **self._log_fields,
                )
            )

        result = CycleResult(
            outcome=outcome,
            peer_count=peer_count,
            threshold=threshold,
            confirmations=tally.count,
            confirmed_by=tally.confirmed_by,
            elapsed=time.monotonic() - started,
        )

        await self._logger.log(
            QuorumDecision(
                message=f"Cycle decided {outcome.value}",
                node_id=self._node_id,
                outcome=outcome.value,
                peer_count=peer_count,
                threshold=threshold,
                confirmations=tally.count,
                elapsed=result.elapsed,
            )
        )

        return self._finish(result)

    async def _collect(self, tally: ConfirmationTally) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._collection_timeout

        while not tally.reached:
            remaining = deadline - loop.time()
            if remaining <= 0:
                return

            received = await self._messenger.receive(timeout=remaining)
            if received is None:
                continue

            message, addr = received

            if isinstance(message, Confirmation):
                if tally.add(message.node_id):
                    await self._logger.log(
                        CoordinatorDebug(
                            message=f"Confirmation from {message.node_id} ({tally.count}/{tally.threshold})",
                            **self._log_fields,
                        )
                    )

                else:
                    await self._logger.log(
                        CoordinatorTrace(
                            message=f"Ignored repeated confirmation from {message.node_id}",
                            **self._log_fields,
                        )
                    )

            elif isinstance(message, Proposal):
                await self._logger.log(
                    CoordinatorDebug(
                        message=f"Dropped competing proposal from {message.node_id} while collecting",
                        **self._log_fields,
                    )
                )

            elif isinstance(message, ScaleComplete):
                await self._log_scale_complete(addr)

    async def serve(self, duration: float) -> None:
        """Answer peer proposals until ``duration`` seconds have passed."""
        self._state = CoordinatorState.IDLE

        loop = asyncio.get_running_loop()
        deadline = loop.time() + duration

        while (remaining := deadline - loop.time()) > 0:
            received = await self._messenger.receive(timeout=remaining)
            if received is None:
                continue

            message, addr = received
            await self._handle_idle_message(message, addr)

    async def _handle_idle_message(
        self,
        message: Message,
        addr: Address,
    ) -> None:
        if isinstance(message, Proposal):
            if message.node_id == self._node_id or not self._auto_confirm:
                return

            await self._messenger.send(
                addr,
                Confirmation(node_id=self._node_id),
            )

            await self._logger.log(
                CoordinatorDebug(
                    message=f"Confirmed proposal from {message.node_id} at {addr[0]}:{addr[1]}",
                    **self._log_fields,
                )
            )

        elif isinstance(message, Confirmation):
            await self._logger.log(
                CoordinatorTrace(
                    message=f"Discarded stale confirmation from {message.node_id}",
                    **self._log_fields,
                )
            )

        elif isinstance(message, ScaleComplete):
            await self._log_scale_complete(addr)

    async def _log_scale_complete(self, addr: Address) -> None:
        await self._logger.log(
            CoordinatorInfo(
                message=f"Peer at {addr[0]}:{addr[1]} reported scaling complete",
                **self._log_fields,
            )
        )

    def _resolve_identity(self, peers: Sequence[ManagerAddress]) -> None:
        if self._env.QUORUM_NODE_ID:
            return

        for peer in peers:
            if peer.node_id and peer.same_endpoint(self._advertise_address):
                self._node_id = peer.node_id
                return

        self._node_id = str(self._advertise_address)

    def _finish(self, result: CycleResult) -> CycleResult:
        self._last_result = result
        self._state = CoordinatorState.IDLE
        return result
