"""
Pytest configuration for swarm-quorum tests.

Async tests run under pytest-asyncio (``asyncio_mode = "auto"`` in
pyproject.toml); they are still marked explicitly.
"""

import tempfile
from typing import Callable, Generator

import pytest

from swarm_quorum.env import Env
from swarm_quorum.models import Node, NodeSpec, NodeStatus

from tests.unit.mocks import MockMembershipSource, MockMessenger


@pytest.fixture
def temp_log_directory() -> Generator[str, None, None]:
    with tempfile.TemporaryDirectory() as temp_directory:
        yield temp_directory


@pytest.fixture
def env_factory() -> Callable[..., Env]:
    def create_env(**overrides) -> Env:
        values = {
            "SERVICE_ID": "test-service",
            "LOCAL_ADDR": "10.0.0.1:4000",
            "QUORUM_CYCLE_INTERVAL": "0s",
            "QUORUM_CYCLE_JITTER": "0s",
            "QUORUM_COLLECTION_TIMEOUT": "0.05s",
        }
        values.update(overrides)
        return Env(**values)

    return create_env


@pytest.fixture
def node_factory() -> Callable[..., Node]:
    def create_node(
        node_id: str,
        addr: str,
        role: str = "manager",
        state: str = "ready",
    ) -> Node:
        return Node(
            id=node_id,
            status=NodeStatus(state=state, addr=addr),
            spec=NodeSpec(role=role),
        )

    return create_node


@pytest.fixture
def three_managers(node_factory) -> list[Node]:
    """Self (A) plus two peers (B, C)."""
    return [
        node_factory("node-a", "10.0.0.1:4000"),
        node_factory("node-b", "10.0.0.2:4000"),
        node_factory("node-c", "10.0.0.3:4000"),
    ]


@pytest.fixture
def mock_messenger() -> MockMessenger:
    return MockMessenger()


@pytest.fixture
def mock_membership(three_managers) -> MockMembershipSource:
    return MockMembershipSource(snapshots=[three_managers])
