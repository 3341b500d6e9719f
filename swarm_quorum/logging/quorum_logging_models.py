from typing import Any

from .models import Entry, LogLevel


class CoordinatorTrace(Entry, kw_only=True):
    node_id: str
    node_host: str
    node_port: int
    level: LogLevel = LogLevel.TRACE

class CoordinatorDebug(Entry, kw_only=True):
    node_id: str
    node_host: str
    node_port: int
    level: LogLevel = LogLevel.DEBUG

class CoordinatorInfo(Entry, kw_only=True):
    node_id: str
    node_host: str
    node_port: int
    level: LogLevel = LogLevel.INFO

class CoordinatorWarning(Entry, kw_only=True):
    node_id: str
    node_host: str
    node_port: int
    level: LogLevel = LogLevel.WARN

class CoordinatorError(Entry, kw_only=True):
    node_id: str
    node_host: str
    node_port: int
    error: dict[str, Any] | None = None
    level: LogLevel = LogLevel.ERROR

class MessengerWarning(Entry, kw_only=True):
    local_host: str
    local_port: int
    remote_host: str
    remote_port: int
    level: LogLevel = LogLevel.WARN

class QuorumDecision(Entry, kw_only=True):
    node_id: str
    outcome: str
    peer_count: int
    threshold: int
    confirmations: int
    elapsed: float
    level: LogLevel = LogLevel.INFO
