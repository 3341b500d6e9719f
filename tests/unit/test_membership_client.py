import socket

import pytest
from aiohttp import web
from aiohttp import test_utils

from swarm_quorum.errors import MembershipError, SetupError
from swarm_quorum.membership import SwarmMembershipClient


NODES_BODY = [
    {
        "ID": "node-a",
        "Status": {"State": "ready", "Addr": "10.0.0.1:4000"},
        "Spec": {"Role": "manager", "Labels": {}},
        "Version": {"Index": 12},
    },
    {
        "ID": "node-w",
        "Status": {"State": "ready", "Addr": "10.0.0.9:4000"},
        "Spec": {"Role": "worker"},
    },
]


async def start_orchestrator(handler) -> test_utils.TestServer:
    app = web.Application()
    app.router.add_get("/nodes", handler)

    server = test_utils.TestServer(app, host="127.0.0.1")
    await server.start_server()

    return server


def unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestListManagers:
    @pytest.mark.asyncio
    async def test_decodes_nodes(self):
        async def nodes(request: web.Request):
            return web.json_response(NODES_BODY)

        server = await start_orchestrator(nodes)
        client = SwarmMembershipClient(str(server.make_url("/nodes")), timeout=5.0)

        try:
            managers = await client.list_managers()

        finally:
            await client.close()
            await server.close()

        assert [node.id for node in managers] == ["node-a", "node-w"]
        assert managers[0].status.addr == "10.0.0.1:4000"
        assert managers[0].is_ready_manager
        assert not managers[1].is_ready_manager

    @pytest.mark.asyncio
    async def test_error_status(self):
        async def nodes(request: web.Request):
            return web.Response(status=503, text="swarm unavailable")

        server = await start_orchestrator(nodes)
        client = SwarmMembershipClient(str(server.make_url("/nodes")), timeout=5.0)

        try:
            with pytest.raises(MembershipError) as exc_info:
                await client.list_managers()

        finally:
            await client.close()
            await server.close()

        assert exc_info.value.context["status"] == 503
        assert not exc_info.value.is_fatal

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        async def nodes(request: web.Request):
            return web.json_response({"message": "not a list"})

        server = await start_orchestrator(nodes)
        client = SwarmMembershipClient(str(server.make_url("/nodes")), timeout=5.0)

        try:
            with pytest.raises(MembershipError, match="Malformed membership response"):
                await client.list_managers()

        finally:
            await client.close()
            await server.close()

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        client = SwarmMembershipClient(
            f"http://127.0.0.1:{unused_port()}/nodes",
            timeout=5.0,
        )

        try:
            with pytest.raises(MembershipError, match="Membership request failed"):
                await client.list_managers()

        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_session_reused_between_calls(self):
        calls = 0

        async def nodes(request: web.Request):
            nonlocal calls
            calls += 1
            return web.json_response([])

        server = await start_orchestrator(nodes)
        client = SwarmMembershipClient(str(server.make_url("/nodes")), timeout=5.0)

        try:
            assert await client.list_managers() == []
            session = client._get_session()
            assert await client.list_managers() == []
            assert client._get_session() is session

        finally:
            await client.close()
            await server.close()

        assert calls == 2


class TestFromEnv:
    def test_plain_http_skips_tls(self, env_factory):
        client = SwarmMembershipClient.from_env(
            env_factory(
                QUORUM_MEMBERSHIP_URL="http://127.0.0.1:2375/nodes",
                QUORUM_MEMBERSHIP_TIMEOUT="3s",
            )
        )

        assert client.url == "http://127.0.0.1:2375/nodes"
        assert client._ssl_context is None
        assert client._timeout == 3.0

    def test_missing_certificates(self, env_factory, tmp_path):
        with pytest.raises(SetupError, match="Failed to load TLS certificates"):
            SwarmMembershipClient.from_env(
                env_factory(QUORUM_TLS_DIRECTORY=str(tmp_path))
            )
