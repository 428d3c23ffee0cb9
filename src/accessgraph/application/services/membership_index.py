"""Membership index - which actor is an active member of which role."""

from datetime import datetime
from uuid import UUID

from accessgraph.application.ports.repositories import MembershipRepository
from accessgraph.domain.entities import Membership
from accessgraph.domain.temporal import is_active
from accessgraph.domain.value_objects import EntityRef


class MembershipIndex:
    """Expiry-aware reads over actor -> role memberships."""

    def __init__(self, memberships: MembershipRepository) -> None:
        self._memberships = memberships

    async def active(self, actor: EntityRef, now: datetime) -> list[Membership]:
        rows = await self._memberships.list_by_member(actor)
        return [m for m in rows if is_active(m.expires_at, now)]

    async def active_roles(self, actor: EntityRef, now: datetime) -> set[UUID]:
        """Ids of every role the actor is an active member of."""
        return {m.role_id for m in await self.active(actor, now)}

    async def active_for_role(
        self, actor: EntityRef, role_id: UUID, now: datetime
    ) -> list[Membership]:
        rows = await self._memberships.list_for_role(actor, role_id)
        return [m for m in rows if is_active(m.expires_at, now)]

    async def is_member(self, actor: EntityRef, role_id: UUID, now: datetime) -> bool:
        return await self.count_active(actor, role_id, now) > 0

    async def count_active(self, actor: EntityRef, role_id: UUID, now: datetime) -> int:
        """Number of stacked active memberships of actor in role."""
        return len(await self.active_for_role(actor, role_id, now))
