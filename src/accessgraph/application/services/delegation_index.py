"""Delegation index - which actor directly holds which permission."""

from collections.abc import Iterable
from datetime import datetime
from typing import Any
from uuid import UUID

from accessgraph.application.ports.repositories import DelegationRepository
from accessgraph.domain.entities import Delegation
from accessgraph.domain.temporal import is_active
from accessgraph.domain.value_objects import EntityRef


class DelegationIndex:
    """Expiry-aware reads over actor -> permission delegations.

    Roles are ordinary members here: a permission granted to a role is a
    delegation whose member is the role's entity reference.

    An empty ``context`` matches every delegation; otherwise only delegations
    whose stored context equals it are kept.
    """

    def __init__(self, delegations: DelegationRepository) -> None:
        self._delegations = delegations

    async def active(
        self, actor: EntityRef, now: datetime, context: dict[str, Any] | None = None
    ) -> list[Delegation]:
        rows = await self._delegations.list_by_member(actor)
        return [d for d in rows if _usable(d, now, context)]

    async def active_permissions(
        self, actor: EntityRef, now: datetime, context: dict[str, Any] | None = None
    ) -> set[UUID]:
        return {d.permission_id for d in await self.active(actor, now, context)}

    async def active_permissions_for(
        self,
        actors: Iterable[EntityRef],
        now: datetime,
        context: dict[str, Any] | None = None,
    ) -> set[UUID]:
        """Union of directly held permissions over several members, one query."""
        members = list(dict.fromkeys(actors))
        if not members:
            return set()
        rows = await self._delegations.list_by_members(members)
        return {d.permission_id for d in rows if _usable(d, now, context)}

    async def active_for_permission(
        self, actor: EntityRef, permission_id: UUID, now: datetime
    ) -> list[Delegation]:
        rows = await self._delegations.list_for_permission(actor, permission_id)
        return [d for d in rows if is_active(d.expires_at, now)]

    async def count_active(
        self, actor: EntityRef, permission_id: UUID, now: datetime
    ) -> int:
        return len(await self.active_for_permission(actor, permission_id, now))


def _usable(delegation: Delegation, now: datetime, context: dict[str, Any] | None) -> bool:
    if not is_active(delegation.expires_at, now):
        return False
    return not context or delegation.context == context
