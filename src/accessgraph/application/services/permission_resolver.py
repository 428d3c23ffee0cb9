"""Permission resolver - effective permission set and hierarchical matching."""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from accessgraph.application.services.delegation_index import DelegationIndex
from accessgraph.application.services.membership_index import MembershipIndex
from accessgraph.application.services.permission_catalog import PermissionCatalog
from accessgraph.domain.entities import Permission
from accessgraph.domain.value_objects import EntityRef
from accessgraph.logging import get_logger

logger = get_logger(__name__)


class PermissionResolver:
    """Computes what an actor holds, directly and through its active roles.

    Role parents are never consulted: a role contributes exactly the
    permissions delegated to it. A non-empty ``context`` restricts every
    lookup to delegations stored with exactly that context.
    """

    def __init__(
        self,
        catalog: PermissionCatalog,
        memberships: MembershipIndex,
        delegations: DelegationIndex,
        role_type: str,
    ) -> None:
        self._catalog = catalog
        self._memberships = memberships
        self._delegations = delegations
        self._role_type = role_type

    async def individual_permissions(
        self, actor: EntityRef, now: datetime, context: dict[str, Any] | None = None
    ) -> list[Permission]:
        """Permissions delegated to the actor itself."""
        ids = await self._delegations.active_permissions(actor, now, context)
        return _sorted(await self._catalog.get_many(ids))

    async def role_permissions(self, actor: EntityRef, now: datetime) -> list[Permission]:
        """Permissions delegated to the actor's active roles, deduplicated."""
        role_ids = await self._memberships.active_roles(actor, now)
        role_refs = [EntityRef(self._role_type, role_id) for role_id in role_ids]
        ids = await self._delegations.active_permissions_for(role_refs, now)
        return _sorted(await self._catalog.get_many(ids))

    async def effective_permissions(
        self, actor: EntityRef, now: datetime, context: dict[str, Any] | None = None
    ) -> list[Permission]:
        """Direct and role-mediated permissions, deduplicated by id."""
        role_ids = await self._memberships.active_roles(actor, now)
        members = [actor, *(EntityRef(self._role_type, role_id) for role_id in role_ids)]
        ids = await self._delegations.active_permissions_for(members, now, context)
        return _sorted(await self._catalog.get_many(ids))

    async def has_permission(
        self,
        actor: EntityRef,
        slug: str,
        now: datetime,
        context: dict[str, Any] | None = None,
    ) -> bool:
        permissions = await self.effective_permissions(actor, now, context)
        granted = _matches(permissions, slug)
        logger.debug(
            "Permission check",
            actor=str(actor),
            permission=slug,
            context=context,
            granted=granted,
        )
        return granted

    async def has_any_permission(
        self,
        actor: EntityRef,
        slugs: Iterable[str],
        now: datetime,
        context: dict[str, Any] | None = None,
    ) -> bool:
        slugs = list(slugs)
        if not slugs:
            return False
        permissions = await self.effective_permissions(actor, now, context)
        return any(_matches(permissions, slug) for slug in slugs)

    async def has_all_permissions(
        self,
        actor: EntityRef,
        slugs: Iterable[str],
        now: datetime,
        context: dict[str, Any] | None = None,
    ) -> bool:
        slugs = list(slugs)
        if not slugs:
            return True
        permissions = await self.effective_permissions(actor, now, context)
        return all(_matches(permissions, slug) for slug in slugs)


def _matches(permissions: list[Permission], slug: str) -> bool:
    if not slug:
        return False
    return any(p.grants(slug) for p in permissions)


def _sorted(permissions: list[Permission]) -> list[Permission]:
    unique = {p.id: p for p in permissions}
    return sorted(unique.values(), key=lambda p: p.slug)
