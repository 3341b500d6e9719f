import asyncio
from typing import Tuple

from swarm_quorum.env import Env
from swarm_quorum.errors import MessageDecodeError, SetupError
from swarm_quorum.logging import Logger
from swarm_quorum.logging.quorum_logging_models import MessengerWarning
from swarm_quorum.models import ManagerAddress, Message

from .udp_socket_protocol import UDPSocketProtocol


Address = Tuple[str, int]


class QuorumMessenger:
    """
    Best-effort datagram transport for quorum messages.

    Received datagrams are only queued by the socket protocol. Decoding
    happens in :meth:`receive`, on the caller's task, so a single
    coordinator task owns every read from the socket.
    """

    def __init__(
        self,
        host: str,
        port: int,
        max_datagram_size: int = 1024,
        logger: Logger | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self._max_datagram_size = max_datagram_size
        self._logger = logger or Logger()

        self._transport: asyncio.DatagramTransport | None = None
        self._protocol: UDPSocketProtocol | None = None
        self._queue: asyncio.Queue[
            Tuple[bytes | Exception, Address | None]
        ] = asyncio.Queue()

    @classmethod
    def from_env(
        cls,
        env: Env,
        logger: Logger | None = None,
    ) -> "QuorumMessenger":
        local_address = ManagerAddress.parse(env.LOCAL_ADDR)
        if local_address is None:
            raise SetupError(
                "LOCAL_ADDR must be an ip:port address",
                local_addr=env.LOCAL_ADDR,
            )

        return cls(
            local_address.host,
            local_address.port,
            max_datagram_size=env.QUORUM_MAX_DATAGRAM_SIZE,
            logger=logger,
        )

    @property
    def address(self) -> Address:
        if self._transport is not None:
            sockname = self._transport.get_extra_info("sockname")
            return (sockname[0], sockname[1])

        return (self.host, self.port)

    @property
    def running(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    async def start(self) -> None:
        loop = asyncio.get_running_loop()

        try:
            transport, protocol = await loop.create_datagram_endpoint(
                lambda: UDPSocketProtocol(self._enqueue),
                local_addr=(self.host, self.port),
            )

        except OSError as err:
            raise SetupError(
                "Failed to bind datagram socket",
                cause=err,
                host=self.host,
                port=self.port,
            ) from err

        self._transport = transport
        self._protocol = protocol

    def _enqueue(
        self,
        data: bytes | Exception,
        addr: Address | None,
    ) -> None:
        self._queue.put_nowait((data, addr))

    async def send(
        self,
        target: ManagerAddress | Address,
        message: Message,
    ) -> None:
        endpoint = target.endpoint if isinstance(target, ManagerAddress) else target

        if self._transport is None or self._transport.is_closing():
            return

        try:
            self._transport.sendto(message.dump(), endpoint)

        except (OSError, ValueError):
            # Fire and forget
            pass

    async def receive(
        self,
        timeout: float | None = None,
    ) -> Tuple[Message, Address] | None:
        try:
            data, addr = await asyncio.wait_for(
                self._queue.get(),
                timeout=timeout,
            )

        except asyncio.TimeoutError:
            return None

        return await self._decode(data, addr)

    async def receive_one(
        self,
        timeout: float | None = None,
    ) -> Message | None:
        received = await self.receive(timeout=timeout)
        if received is None:
            return None

        message, _ = received
        return message

    async def drain(self) -> list[Tuple[Message, Address]]:
        """Decode everything already queued without waiting."""
        drained: list[Tuple[Message, Address]] = []

        while not self._queue.empty():
            data, addr = self._queue.get_nowait()
            if received := await self._decode(data, addr):
                drained.append(received)

        return drained

    async def _decode(
        self,
        data: bytes | Exception,
        addr: Address | None,
    ) -> Tuple[Message, Address] | None:
        if isinstance(data, Exception) or addr is None:
            return None

        try:
            if len(data) > self._max_datagram_size:
                raise MessageDecodeError(
                    "Datagram exceeds maximum size",
                    size=len(data),
                    max_size=self._max_datagram_size,
                )

            return Message.load(data), addr

        except MessageDecodeError as err:
            local_host, local_port = self.address
            remote_host, remote_port = addr[0], addr[1]

            await self._logger.log(
                MessengerWarning(
                    message=f"Discarded datagram: {err}",
                    local_host=local_host,
                    local_port=local_port,
                    remote_host=remote_host,
                    remote_port=remote_port,
                )
            )

            return None

    async def close(self) -> None:
        if self._transport is not None and not self._transport.is_closing():
            self._transport.close()

        if self._protocol is not None:
            await self._protocol.on_con_lost

        self._transport = None
        self._protocol = None
