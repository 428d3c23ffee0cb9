"""Access resolver - does an actor reach a resource?"""

from datetime import datetime

from accessgraph.application.services.access_index import AccessIndex
from accessgraph.application.services.membership_index import MembershipIndex
from accessgraph.application.services.permission_resolver import PermissionResolver
from accessgraph.domain.entities import Access
from accessgraph.domain.value_objects import EntityRef
from accessgraph.logging import get_logger

logger = get_logger(__name__)


class AccessResolver:
    """Unions direct, role-mediated and permission-mediated access entries.

    The candidate entities are the actor, each active role and each
    effective permission. Effective permissions already include those held
    through roles, so actor -> role -> permission -> resource is covered
    without recursion.
    """

    def __init__(
        self,
        memberships: MembershipIndex,
        permissions: PermissionResolver,
        accesses: AccessIndex,
        role_type: str,
        permission_type: str,
    ) -> None:
        self._memberships = memberships
        self._permissions = permissions
        self._accesses = accesses
        self._role_type = role_type
        self._permission_type = permission_type

    async def candidate_entities(self, actor: EntityRef, now: datetime) -> list[EntityRef]:
        role_ids = await self._memberships.active_roles(actor, now)
        permissions = await self._permissions.effective_permissions(actor, now)
        candidates = [
            actor,
            *(EntityRef(self._role_type, role_id) for role_id in sorted(role_ids, key=str)),
            *(EntityRef(self._permission_type, p.id) for p in permissions),
        ]
        return list(dict.fromkeys(candidates))

    async def has_access(self, actor: EntityRef, resource: EntityRef, now: datetime) -> bool:
        candidates = await self.candidate_entities(actor, now)
        granted = await self._accesses.any_active_for_resource(candidates, resource, now)
        logger.debug("Access check", actor=str(actor), resource=str(resource), granted=granted)
        return granted

    async def all_access(
        self, actor: EntityRef, now: datetime, resource_type: str | None = None
    ) -> list[Access]:
        """Active access rows reachable by the actor, deduplicated by row id."""
        candidates = await self.candidate_entities(actor, now)
        rows = await self._accesses.active_for_entities(candidates, now, resource_type)
        return list({a.id: a for a in rows}.values())

    async def accessible_ids(
        self, actor: EntityRef, resource_type: str, now: datetime
    ) -> list[str]:
        """Resource ids of ``resource_type`` the actor can reach, first seen first."""
        rows = await self.all_access(actor, now, resource_type)
        return list(dict.fromkeys(a.resource.id for a in rows))
