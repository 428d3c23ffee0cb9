"""Application services - catalogs, indexes, resolvers and the reconciler."""

from accessgraph.application.services.access_index import AccessIndex
from accessgraph.application.services.access_resolver import AccessResolver
from accessgraph.application.services.delegation_index import DelegationIndex
from accessgraph.application.services.membership_index import MembershipIndex
from accessgraph.application.services.permission_catalog import PermissionCatalog
from accessgraph.application.services.permission_resolver import PermissionResolver
from accessgraph.application.services.reconciler import Reconciler
from accessgraph.application.services.role_catalog import RoleCatalog

__all__ = [
    "AccessIndex",
    "AccessResolver",
    "DelegationIndex",
    "MembershipIndex",
    "PermissionCatalog",
    "PermissionResolver",
    "Reconciler",
    "RoleCatalog",
]
