"""Reconciler - idempotent assign, remove, sync and extend of roles and permissions."""

from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

from accessgraph.application.ports.repositories import (
    DelegationRepository,
    MembershipRepository,
)
from accessgraph.application.services.delegation_index import DelegationIndex
from accessgraph.application.services.membership_index import MembershipIndex
from accessgraph.application.services.permission_catalog import (
    PermissionCatalog,
    PermissionLike,
)
from accessgraph.application.services.role_catalog import RoleCatalog, RoleLike
from accessgraph.domain.entities import Delegation, Membership
from accessgraph.domain.value_objects import EntityRef
from accessgraph.logging import get_logger

logger = get_logger(__name__)


class Reconciler:
    """Writes memberships and delegations.

    ``max_concurrent`` caps how many active rows an actor may hold for the
    same target: the default of 1 makes assignment idempotent, higher values
    allow stacked time-boxed grants and a negative value disables the cap.
    """

    def __init__(
        self,
        roles: RoleCatalog,
        permissions: PermissionCatalog,
        membership_index: MembershipIndex,
        delegation_index: DelegationIndex,
        memberships: MembershipRepository,
        delegations: DelegationRepository,
    ) -> None:
        self._roles = roles
        self._permissions = permissions
        self._membership_index = membership_index
        self._delegation_index = delegation_index
        self._memberships = memberships
        self._delegations = delegations

    # --- roles ---

    async def assign_role(
        self,
        actor: EntityRef,
        role: RoleLike,
        now: datetime,
        max_concurrent: int = 1,
        context: dict[str, Any] | None = None,
        expires_at: datetime | None = None,
    ) -> Membership | None:
        """Add a membership unless the stacking limit is reached (then None)."""
        resolved = await self._roles.resolve(role, now, create=True)
        if max_concurrent >= 0:
            await self._memberships.lock(actor, resolved.id)
            count = await self._membership_index.count_active(actor, resolved.id, now)
            if count >= max_concurrent:
                return None
        membership = Membership(
            id=uuid4(),
            role_id=resolved.id,
            member=actor,
            context=context,
            expires_at=expires_at,
            created_at=now,
            updated_at=now,
        )
        await self._memberships.create(membership)
        logger.info(
            "Role assigned",
            actor=str(actor),
            role=resolved.slug,
            expires_at=expires_at.isoformat() if expires_at else None,
        )
        return membership

    async def remove_role(self, actor: EntityRef, role: RoleLike, now: datetime) -> int:
        """Delete every membership of actor in role; nothing to delete is not an error."""
        resolved = await self._roles.resolve(role, now, create=False)
        if resolved is None:
            return 0
        count = await self._memberships.delete_for_role(actor, resolved.id)
        if count:
            logger.info("Role removed", actor=str(actor), role=resolved.slug, count=count)
        return count

    async def sync_roles(
        self, actor: EntityRef, roles: Iterable[RoleLike], now: datetime
    ) -> None:
        """Make the actor's active roles equal ``roles``, keeping unchanged rows."""
        target_ids: list[UUID] = []
        for value in roles:
            target_ids.append((await self._roles.resolve(value, now, create=True)).id)
        wanted = set(target_ids)

        active = await self._membership_index.active(actor, now)
        stale = [m.id for m in active if m.role_id not in wanted]
        if stale:
            await self._memberships.delete_many(stale)

        present = {m.role_id for m in active}
        missing = [role_id for role_id in dict.fromkeys(target_ids) if role_id not in present]
        for role_id in missing:
            await self._memberships.create(
                Membership(
                    id=uuid4(),
                    role_id=role_id,
                    member=actor,
                    created_at=now,
                    updated_at=now,
                )
            )
        logger.info("Roles synced", actor=str(actor), removed=len(stale), created=len(missing))

    async def extend_or_add_role(
        self, actor: EntityRef, role: RoleLike, hours: float, now: datetime
    ) -> Membership | None:
        """Push an expiring membership out by ``hours`` or start a timed one.

        A permanent membership stays permanent. With several stacked active
        memberships the one expiring last is extended.
        """
        if hours <= 0:
            return None
        resolved = await self._roles.resolve(role, now, create=True)
        await self._memberships.lock(actor, resolved.id)
        active = await self._membership_index.active_for_role(actor, resolved.id, now)

        for membership in active:
            if membership.expires_at is None:
                return membership

        delta = timedelta(hours=hours)
        if active:
            membership = max(active, key=lambda m: m.expires_at)
            membership.expires_at = membership.expires_at + delta
            membership.updated_at = now
            await self._memberships.update(membership)
            logger.info(
                "Role extended",
                actor=str(actor),
                role=resolved.slug,
                expires_at=membership.expires_at.isoformat(),
            )
            return membership

        return await self.assign_role(
            actor, resolved, now, max_concurrent=-1, expires_at=now + delta
        )

    # --- permissions ---

    async def assign_permission(
        self,
        actor: EntityRef,
        permission: PermissionLike,
        now: datetime,
        max_concurrent: int = 1,
        context: dict[str, Any] | None = None,
        expires_at: datetime | None = None,
    ) -> Delegation | None:
        """Delegate a permission unless the stacking limit is reached (then None)."""
        resolved = await self._permissions.resolve(permission, now, create=True)
        if max_concurrent >= 0:
            await self._delegations.lock(actor, resolved.id)
            count = await self._delegation_index.count_active(actor, resolved.id, now)
            if count >= max_concurrent:
                return None
        delegation = Delegation(
            id=uuid4(),
            permission_id=resolved.id,
            member=actor,
            context=context,
            expires_at=expires_at,
            created_at=now,
            updated_at=now,
        )
        await self._delegations.create(delegation)
        logger.info("Permission assigned", actor=str(actor), permission=resolved.slug)
        return delegation

    async def remove_permission(
        self, actor: EntityRef, permission: PermissionLike, now: datetime
    ) -> int:
        """Delete the actor's own delegations of a permission; role grants are untouched."""
        resolved = await self._permissions.resolve(permission, now, create=False)
        if resolved is None:
            return 0
        count = await self._delegations.delete_for_permission(actor, resolved.id)
        if count:
            logger.info(
                "Permission removed", actor=str(actor), permission=resolved.slug, count=count
            )
        return count

    async def sync_permissions(
        self, actor: EntityRef, permissions: Iterable[PermissionLike], now: datetime
    ) -> None:
        """Make the actor's directly held permissions equal ``permissions``."""
        target_ids: list[UUID] = []
        for value in permissions:
            target_ids.append((await self._permissions.resolve(value, now, create=True)).id)
        wanted = set(target_ids)

        active = await self._delegation_index.active(actor, now)
        stale = [d.id for d in active if d.permission_id not in wanted]
        if stale:
            await self._delegations.delete_many(stale)

        present = {d.permission_id for d in active}
        missing = [pid for pid in dict.fromkeys(target_ids) if pid not in present]
        for permission_id in missing:
            await self._delegations.create(
                Delegation(
                    id=uuid4(),
                    permission_id=permission_id,
                    member=actor,
                    created_at=now,
                    updated_at=now,
                )
            )
        logger.info(
            "Permissions synced", actor=str(actor), removed=len(stale), created=len(missing)
        )
