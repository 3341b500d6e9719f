from .cycle import (
    CoordinatorState as CoordinatorState,
    CycleOutcome as CycleOutcome,
    CycleResult as CycleResult,
)
from .message import (
    MESSAGE_TYPES as MESSAGE_TYPES,
    Confirmation as Confirmation,
    Message as Message,
    Proposal as Proposal,
    ScaleComplete as ScaleComplete,
    decode_message as decode_message,
    encode_message as encode_message,
)
from .node import (
    ManagerAddress as ManagerAddress,
    Node as Node,
    NodeRole as NodeRole,
    NodeSpec as NodeSpec,
    NodeState as NodeState,
    NodeStatus as NodeStatus,
)
