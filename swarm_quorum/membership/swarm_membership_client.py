import asyncio
import ssl

import aiohttp
import msgspec

from swarm_quorum.env import Env, TimeParser
from swarm_quorum.errors import MembershipError
from swarm_quorum.models import Node

from .tls import create_client_ssl_context


class SwarmMembershipClient:
    """
    Membership source backed by the orchestrator's ``GET /nodes`` endpoint.

    The request is made over mutual TLS when an SSL context is supplied.
    Every failure mode, from connection refused to an undecodable body,
    surfaces as a single :class:`MembershipError`.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        ssl_context: ssl.SSLContext | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._ssl_context = ssl_context
        self._session: aiohttp.ClientSession | None = None
        self._decoder = msgspec.json.Decoder(list[Node])

    @classmethod
    def from_env(cls, env: Env) -> "SwarmMembershipClient":
        ssl_context: ssl.SSLContext | None = None
        if env.QUORUM_MEMBERSHIP_URL.startswith("https://"):
            ssl_context = create_client_ssl_context(**env.get_tls_paths())

        return cls(
            env.QUORUM_MEMBERSHIP_URL,
            timeout=TimeParser(env.QUORUM_MEMBERSHIP_TIMEOUT).time,
            ssl_context=ssl_context,
        )

    @property
    def url(self) -> str:
        return self._url

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            connector = (
                aiohttp.TCPConnector(ssl=self._ssl_context)
                if self._ssl_context
                else aiohttp.TCPConnector()
            )

            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            )

        return self._session

    async def list_managers(self) -> list[Node]:
        session = self._get_session()

        try:
            async with session.get(self._url) as response:
                if not 200 <= response.status < 300:
                    raise MembershipError(
                        f"Membership endpoint returned {response.status}",
                        url=self._url,
                        status=response.status,
                    )

                body = await response.read()

        except (aiohttp.ClientError, asyncio.TimeoutError, ssl.SSLError) as err:
            raise MembershipError(
                "Membership request failed",
                cause=err,
                url=self._url,
            ) from err

        try:
            return self._decoder.decode(body)

        except msgspec.DecodeError as err:
            raise MembershipError(
                "Malformed membership response",
                cause=err,
                url=self._url,
            ) from err

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

        self._session = None
