from __future__ import annotations

import os
import pathlib
from typing import Callable, Dict, Literal, Union

from pydantic import BaseModel, StrictBool, StrictInt, StrictStr, field_validator

from .time_parser import TimeParser

PrimaryType = Union[str, int, float, bytes, bool]


def to_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Env(BaseModel):
    SERVICE_ID: StrictStr
    CPU_THRESHOLD: StrictInt = 800000000
    LOCAL_ADDR: StrictStr = "0.0.0.0:4000"

    # Identity
    QUORUM_ADVERTISE_ADDR: StrictStr | None = None
    QUORUM_NODE_ID: StrictStr | None = None

    # Membership source
    QUORUM_MEMBERSHIP_URL: StrictStr = "https://localhost:2376/nodes"
    QUORUM_MEMBERSHIP_TIMEOUT: StrictStr = "10s"
    QUORUM_TLS_DIRECTORY: StrictStr = "/tls"
    QUORUM_TLS_CA_FILE: StrictStr = "ca.pem"
    QUORUM_TLS_CERT_FILE: StrictStr = "client-cert.pem"
    QUORUM_TLS_KEY_FILE: StrictStr = "client-key.pem"

    # Decision cycle
    QUORUM_CYCLE_INTERVAL: StrictStr = "10s"
    QUORUM_CYCLE_JITTER: StrictStr = "1s"
    QUORUM_COLLECTION_TIMEOUT: StrictStr = "5s"
    QUORUM_MAX_DATAGRAM_SIZE: StrictInt = 1024
    QUORUM_AUTO_CONFIRM: StrictBool = True

    # Logging
    QUORUM_LOG_LEVEL: Literal[
        "trace", "debug", "info", "warn", "error", "critical", "fatal"
    ] = "info"
    QUORUM_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    QUORUM_LOGS_PATH: StrictStr | None = None

    @field_validator(
        "QUORUM_MEMBERSHIP_TIMEOUT",
        "QUORUM_CYCLE_INTERVAL",
        "QUORUM_CYCLE_JITTER",
        "QUORUM_COLLECTION_TIMEOUT",
    )
    @classmethod
    def validate_duration(cls, value: str) -> str:
        TimeParser(value)
        return value

    @field_validator("QUORUM_LOGS_PATH")
    @classmethod
    def validate_logs_path(cls, value: str | None) -> str | None:
        # A directory, or a JSON lines file
        if value and pathlib.Path(value).suffix not in ("", ".json"):
            raise ValueError("QUORUM_LOGS_PATH must be a directory or a .json file")

        return value

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "SERVICE_ID": str,
            "CPU_THRESHOLD": int,
            "LOCAL_ADDR": str,
            "QUORUM_ADVERTISE_ADDR": str,
            "QUORUM_NODE_ID": str,
            "QUORUM_MEMBERSHIP_URL": str,
            "QUORUM_MEMBERSHIP_TIMEOUT": str,
            "QUORUM_TLS_DIRECTORY": str,
            "QUORUM_TLS_CA_FILE": str,
            "QUORUM_TLS_CERT_FILE": str,
            "QUORUM_TLS_KEY_FILE": str,
            "QUORUM_CYCLE_INTERVAL": str,
            "QUORUM_CYCLE_JITTER": str,
            "QUORUM_COLLECTION_TIMEOUT": str,
            "QUORUM_MAX_DATAGRAM_SIZE": int,
            "QUORUM_AUTO_CONFIRM": to_bool,
            "QUORUM_LOG_LEVEL": str,
            "QUORUM_LOG_OUTPUT": str,
            "QUORUM_LOGS_PATH": str,
        }

    @property
    def advertise_addr(self) -> str:
        return self.QUORUM_ADVERTISE_ADDR or self.LOCAL_ADDR

    def get_tls_paths(self) -> dict:
        """Get the certificate file locations used by the membership client."""
        return {
            'ca_path': os.path.join(self.QUORUM_TLS_DIRECTORY, self.QUORUM_TLS_CA_FILE),
            'cert_path': os.path.join(self.QUORUM_TLS_DIRECTORY, self.QUORUM_TLS_CERT_FILE),
            'key_path': os.path.join(self.QUORUM_TLS_DIRECTORY, self.QUORUM_TLS_KEY_FILE),
        }
