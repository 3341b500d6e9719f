from .quorum_messenger import QuorumMessenger as QuorumMessenger
from .udp_socket_protocol import UDPSocketProtocol as UDPSocketProtocol
