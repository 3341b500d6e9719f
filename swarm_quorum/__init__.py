from .coordinator import (
    ConfirmationTally as ConfirmationTally,
    QuorumCoordinator as QuorumCoordinator,
    quorum_threshold as quorum_threshold,
)
from .env import Env as Env, load_env as load_env
from .membership import (
    MembershipSource as MembershipSource,
    SwarmMembershipClient as SwarmMembershipClient,
    select_manager_addresses as select_manager_addresses,
)
from .messaging import QuorumMessenger as QuorumMessenger
