"""Repository ports."""

from accessgraph.application.ports.repositories.access_repository import AccessRepository
from accessgraph.application.ports.repositories.delegation_repository import (
    DelegationRepository,
)
from accessgraph.application.ports.repositories.membership_repository import (
    MembershipRepository,
)
from accessgraph.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from accessgraph.application.ports.repositories.role_repository import RoleRepository

__all__ = [
    "AccessRepository",
    "DelegationRepository",
    "MembershipRepository",
    "PermissionRepository",
    "RoleRepository",
]
