import asyncio
from typing import Callable, Tuple


class UDPSocketProtocol(asyncio.DatagramProtocol):
    def __init__(
        self,
        callback: Callable[[bytes | Exception, Tuple[str, int] | None], None],
    ):
        super().__init__()
        self.callback = callback
        self.transport: asyncio.DatagramTransport | None = None
        self.on_con_lost = asyncio.get_event_loop().create_future()

    def connection_made(self, transport: asyncio.DatagramTransport) -> None:
        self.transport = transport

    def datagram_received(self, data: bytes, addr: Tuple[str, int]) -> None:
        self.callback(data, addr)

    def error_received(self, exc: Exception) -> None:
        self.callback(exc, None)

    def connection_lost(self, exc: Exception | None) -> None:
        if not self.on_con_lost.done():
            self.on_con_lost.set_result(True)
