from .confirmation_tally import (
    ConfirmationTally as ConfirmationTally,
    quorum_threshold as quorum_threshold,
)
from .quorum_coordinator import QuorumCoordinator as QuorumCoordinator
