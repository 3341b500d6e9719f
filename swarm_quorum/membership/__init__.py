from .manager_filter import select_manager_addresses as select_manager_addresses
from .membership_source import MembershipSource as MembershipSource
from .swarm_membership_client import SwarmMembershipClient as SwarmMembershipClient
from .tls import create_client_ssl_context as create_client_ssl_context
