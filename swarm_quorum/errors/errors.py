"""
Errors raised around the scaling decision cycle.

Each error type fixes a category (what failed) and a severity. Only
FATAL errors end the process; TRANSIENT ones are absorbed by the cycle
or message they occurred in.
"""

from enum import Enum, auto
from typing import Any, ClassVar


class ErrorSeverity(Enum):
    TRANSIENT = auto()
    FATAL = auto()


class ErrorCategory(Enum):
    SETUP = auto()
    NETWORK = auto()
    PROTOCOL = auto()


class QuorumError(Exception):
    category: ClassVar[ErrorCategory]
    severity: ClassVar[ErrorSeverity]

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        **context: Any,
    ):
        self.message = message
        self.cause = cause
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        text = f"[{self.category.name}/{self.severity.name}] {self.message}"
        if self.context:
            text += f" {self.context}"

        if self.cause is not None:
            cause_text = str(self.cause)
            cause_type = type(self.cause).__name__
            text += (
                f" (caused by {cause_type}: {cause_text})"
                if cause_text
                else f" (caused by {cause_type})"
            )

        return text

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, context={self.context!r})"

    @property
    def is_fatal(self) -> bool:
        return self.severity == ErrorSeverity.FATAL

    def to_dict(self) -> dict[str, Any]:
        """Flattened form attached to structured log entries."""
        return {
            'error_type': type(self).__name__,
            'message': self.message,
            'category': self.category.name,
            'severity': self.severity.name,
            'context': self.context,
            'cause': str(self.cause) if self.cause else None,
        }


class SetupError(QuorumError):
    """Configuration, certificates or socket binding. Raised before the loop starts."""

    category = ErrorCategory.SETUP
    severity = ErrorSeverity.FATAL


class MembershipError(QuorumError):
    """
    The membership source could not produce a snapshot. Network errors,
    TLS failures, non-2xx responses and malformed bodies all abandon the
    current cycle the same way.
    """

    category = ErrorCategory.NETWORK
    severity = ErrorSeverity.TRANSIENT


class MessageDecodeError(QuorumError):
    """A datagram is not one of the three protocol messages."""

    category = ErrorCategory.PROTOCOL
    severity = ErrorSeverity.TRANSIENT
