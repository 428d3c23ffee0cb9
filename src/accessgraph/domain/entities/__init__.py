"""Domain entities."""

from accessgraph.domain.entities.access import Access
from accessgraph.domain.entities.delegation import Delegation
from accessgraph.domain.entities.membership import Membership
from accessgraph.domain.entities.permission import Permission
from accessgraph.domain.entities.role import Role

__all__ = [
    "Access",
    "Delegation",
    "Membership",
    "Permission",
    "Role",
]
