from .errors import (
    ErrorCategory as ErrorCategory,
    ErrorSeverity as ErrorSeverity,
    MembershipError as MembershipError,
    MessageDecodeError as MessageDecodeError,
    QuorumError as QuorumError,
    SetupError as SetupError,
)
