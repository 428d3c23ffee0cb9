"""Authorization engine - one unit of work and one evaluation time per session."""

from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from accessgraph.application.dto.engine_config import EngineConfig
from accessgraph.application.ports import Clock, UnitOfWork, UnitOfWorkFactory
from accessgraph.application.services import (
    AccessIndex,
    AccessResolver,
    DelegationIndex,
    MembershipIndex,
    PermissionCatalog,
    PermissionResolver,
    Reconciler,
    RoleCatalog,
)
from accessgraph.application.services.permission_catalog import PermissionLike
from accessgraph.application.services.references import resolve_resource
from accessgraph.application.services.role_catalog import RoleLike
from accessgraph.domain.entities import Access, Delegation, Membership, Permission, Role
from accessgraph.domain.exceptions import InvalidReference
from accessgraph.domain.temporal import utc_now
from accessgraph.domain.value_objects import EntityRef

Entity = EntityRef | Role | Permission


class EngineSession:
    """All engine operations bound to one unit of work and one ``now``."""

    def __init__(self, uow: UnitOfWork, config: EngineConfig, now: datetime) -> None:
        self._uow = uow
        self._config = config
        self._now = now
        types = config.entity_types

        self.roles_catalog = RoleCatalog(uow.roles, types.role)
        self.permissions_catalog = PermissionCatalog(uow.permissions, types.permission)
        self.membership_index = MembershipIndex(uow.memberships)
        self.delegation_index = DelegationIndex(uow.delegations)
        self.access_index = AccessIndex(uow.accesses)
        self.permission_resolver = PermissionResolver(
            self.permissions_catalog,
            self.membership_index,
            self.delegation_index,
            types.role,
        )
        self.access_resolver = AccessResolver(
            self.membership_index,
            self.permission_resolver,
            self.access_index,
            types.role,
            types.permission,
        )
        self.reconciler = Reconciler(
            self.roles_catalog,
            self.permissions_catalog,
            self.membership_index,
            self.delegation_index,
            uow.memberships,
            uow.delegations,
        )

    @property
    def now(self) -> datetime:
        return self._now

    def entity(self, value: Entity) -> EntityRef:
        """Entity reference for an actor, a Role or a Permission."""
        if isinstance(value, EntityRef):
            return value
        if isinstance(value, Role):
            return self.roles_catalog.ref(value)
        if isinstance(value, Permission):
            return self.permissions_catalog.ref(value)
        raise InvalidReference("entity", value, "unsupported value kind")

    # --- catalogs ---

    async def create_role(
        self,
        name: str,
        slug: str | None = None,
        description: str | None = None,
        parent: Role | None = None,
    ) -> Role:
        return await self.roles_catalog.create(
            name, self._now, slug=slug, description=description, parent=parent
        )

    async def find_role(self, slug: str) -> Role | None:
        return await self.roles_catalog.find(slug)

    async def role_children(self, role: Role) -> list[Role]:
        return await self.roles_catalog.children(role)

    async def role_parent(self, role: Role) -> Role | None:
        return await self.roles_catalog.parent(role)

    async def set_role_parent(self, role: Role, parent: Role | None) -> Role:
        return await self.roles_catalog.set_parent(role, parent, self._now)

    async def get_or_create_permission(
        self, slug: str, description: str | None = None
    ) -> Permission:
        return await self.permissions_catalog.get_or_create(slug, self._now, description)

    async def find_permission(self, slug: str) -> Permission | None:
        return await self.permissions_catalog.find(slug)

    # --- roles ---

    async def roles(self, actor: Entity) -> list[Role]:
        role_ids = await self.membership_index.active_roles(self.entity(actor), self._now)
        return sorted(await self.roles_catalog.get_many(role_ids), key=lambda r: r.slug)

    async def has_role(self, actor: Entity, role: RoleLike) -> bool:
        resolved = await self.roles_catalog.resolve(role, self._now, create=False)
        if resolved is None:
            return False
        return await self.membership_index.is_member(self.entity(actor), resolved.id, self._now)

    async def has_any_role(self, actor: Entity, roles: Iterable[RoleLike]) -> bool:
        for role in roles:
            if await self.has_role(actor, role):
                return True
        return False

    async def has_all_roles(self, actor: Entity, roles: Iterable[RoleLike]) -> bool:
        for role in roles:
            if not await self.has_role(actor, role):
                return False
        return True

    async def assign_role(
        self,
        actor: Entity,
        role: RoleLike,
        max_concurrent: int = 1,
        context: dict[str, Any] | None = None,
        expires_at: datetime | None = None,
    ) -> Membership | None:
        return await self.reconciler.assign_role(
            self.entity(actor), role, self._now, max_concurrent, context, expires_at
        )

    async def remove_role(self, actor: Entity, role: RoleLike) -> int:
        return await self.reconciler.remove_role(self.entity(actor), role, self._now)

    async def sync_roles(self, actor: Entity, roles: Iterable[RoleLike]) -> None:
        await self.reconciler.sync_roles(self.entity(actor), roles, self._now)

    async def extend_or_add_role(
        self, actor: Entity, role: RoleLike, hours: float
    ) -> Membership | None:
        return await self.reconciler.extend_or_add_role(
            self.entity(actor), role, hours, self._now
        )

    # --- permissions ---

    async def permissions(
        self, actor: Entity, context: dict[str, Any] | None = None
    ) -> list[Permission]:
        return await self.permission_resolver.effective_permissions(
            self.entity(actor), self._now, context
        )

    async def individual_permissions(
        self, actor: Entity, context: dict[str, Any] | None = None
    ) -> list[Permission]:
        return await self.permission_resolver.individual_permissions(
            self.entity(actor), self._now, context
        )

    async def role_permissions(self, actor: Entity) -> list[Permission]:
        return await self.permission_resolver.role_permissions(self.entity(actor), self._now)

    async def has_permission(
        self, actor: Entity, slug: str, context: dict[str, Any] | None = None
    ) -> bool:
        """A non-empty ``context`` only counts delegations stored with exactly it."""
        return await self.permission_resolver.has_permission(
            self.entity(actor), slug, self._now, context
        )

    async def has_any_permission(
        self, actor: Entity, slugs: Iterable[str], context: dict[str, Any] | None = None
    ) -> bool:
        return await self.permission_resolver.has_any_permission(
            self.entity(actor), slugs, self._now, context
        )

    async def has_all_permissions(
        self, actor: Entity, slugs: Iterable[str], context: dict[str, Any] | None = None
    ) -> bool:
        return await self.permission_resolver.has_all_permissions(
            self.entity(actor), slugs, self._now, context
        )

    async def assign_permission(
        self,
        actor: Entity,
        permission: PermissionLike,
        max_concurrent: int = 1,
        context: dict[str, Any] | None = None,
        expires_at: datetime | None = None,
    ) -> Delegation | None:
        return await self.reconciler.assign_permission(
            self.entity(actor), permission, self._now, max_concurrent, context, expires_at
        )

    async def remove_permission(self, actor: Entity, permission: PermissionLike) -> int:
        return await self.reconciler.remove_permission(
            self.entity(actor), permission, self._now
        )

    async def sync_permissions(
        self, actor: Entity, permissions: Iterable[PermissionLike]
    ) -> None:
        await self.reconciler.sync_permissions(self.entity(actor), permissions, self._now)

    # --- access ---

    async def grant_access(
        self,
        entity: Entity,
        resource: EntityRef,
        context: dict[str, Any] | None = None,
        expires_at: datetime | None = None,
    ) -> Access:
        return await self.access_index.grant(
            self.entity(entity), resolve_resource(resource), self._now, context, expires_at
        )

    async def revoke_access(
        self, entity: Entity, resource: EntityRef | str, resource_id: Any | None = None
    ) -> int:
        return await self.access_index.revoke(
            self.entity(entity), resolve_resource(resource, resource_id)
        )

    async def revoke_all_access(self, entity: Entity, resource_type: str | None = None) -> int:
        return await self.access_index.revoke_all(self.entity(entity), resource_type)

    async def direct_access(
        self, entity: Entity, resource_type: str | None = None
    ) -> list[Access]:
        """Active rows owned by the entity itself, nothing inherited."""
        return await self.access_index.active(self.entity(entity), self._now, resource_type)

    async def expired_access(
        self, entity: Entity, resource_type: str | None = None
    ) -> list[Access]:
        return await self.access_index.expired(self.entity(entity), self._now, resource_type)

    async def sync_access(
        self,
        entity: Entity,
        resource_type: str,
        resource_ids: Iterable[Any],
        context: dict[str, Any] | None = None,
        expires_at: datetime | None = None,
    ) -> None:
        await self.access_index.sync(
            self.entity(entity), resource_type, resource_ids, self._now, context, expires_at
        )

    async def has_access(
        self, actor: Entity, resource: EntityRef | str, resource_id: Any | None = None
    ) -> bool:
        return await self.access_resolver.has_access(
            self.entity(actor), resolve_resource(resource, resource_id), self._now
        )

    async def all_access(self, actor: Entity, resource_type: str | None = None) -> list[Access]:
        return await self.access_resolver.all_access(self.entity(actor), self._now, resource_type)

    async def accessible_ids(self, actor: Entity, resource_type: str) -> list[str]:
        return await self.access_resolver.accessible_ids(
            self.entity(actor), resource_type, self._now
        )


class AuthorizationEngine:
    """Entry point; each call without an explicit session runs in its own."""

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        config: EngineConfig | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._config = config or EngineConfig()
        self._clock = clock

    @property
    def config(self) -> EngineConfig:
        return self._config

    @asynccontextmanager
    async def session(self) -> AsyncIterator[EngineSession]:
        """Open one unit of work and fix ``now`` for everything run inside it."""
        async with self._uow_factory() as uow:
            yield EngineSession(uow, self._config, self._clock())

    async def has_permission(
        self, actor: Entity, slug: str, context: dict[str, Any] | None = None
    ) -> bool:
        async with self.session() as session:
            return await session.has_permission(actor, slug, context)

    async def permissions(self, actor: Entity) -> list[Permission]:
        async with self.session() as session:
            return await session.permissions(actor)

    async def has_role(self, actor: Entity, role: RoleLike) -> bool:
        async with self.session() as session:
            return await session.has_role(actor, role)

    async def has_access(
        self, actor: Entity, resource: EntityRef | str, resource_id: Any | None = None
    ) -> bool:
        async with self.session() as session:
            return await session.has_access(actor, resource, resource_id)

    async def all_access(self, actor: Entity, resource_type: str | None = None) -> list[Access]:
        async with self.session() as session:
            return await session.all_access(actor, resource_type)

    async def accessible_ids(self, actor: Entity, resource_type: str) -> list[str]:
        async with self.session() as session:
            return await session.accessible_ids(actor, resource_type)

    async def assign_role(
        self, actor: Entity, role: RoleLike, max_concurrent: int = 1, **kwargs: Any
    ) -> Membership | None:
        async with self.session() as session:
            return await session.assign_role(actor, role, max_concurrent, **kwargs)

    async def remove_role(self, actor: Entity, role: RoleLike) -> int:
        async with self.session() as session:
            return await session.remove_role(actor, role)

    async def sync_roles(self, actor: Entity, roles: Iterable[RoleLike]) -> None:
        async with self.session() as session:
            await session.sync_roles(actor, roles)

    async def extend_or_add_role(
        self, actor: Entity, role: RoleLike, hours: float
    ) -> Membership | None:
        async with self.session() as session:
            return await session.extend_or_add_role(actor, role, hours)

    async def assign_permission(
        self, actor: Entity, permission: PermissionLike, max_concurrent: int = 1, **kwargs: Any
    ) -> Delegation | None:
        async with self.session() as session:
            return await session.assign_permission(actor, permission, max_concurrent, **kwargs)

    async def remove_permission(self, actor: Entity, permission: PermissionLike) -> int:
        async with self.session() as session:
            return await session.remove_permission(actor, permission)

    async def sync_permissions(
        self, actor: Entity, permissions: Iterable[PermissionLike]
    ) -> None:
        async with self.session() as session:
            await session.sync_permissions(actor, permissions)

    async def grant_access(self, entity: Entity, resource: EntityRef, **kwargs: Any) -> Access:
        async with self.session() as session:
            return await session.grant_access(entity, resource, **kwargs)

    async def revoke_access(
        self, entity: Entity, resource: EntityRef | str, resource_id: Any | None = None
    ) -> int:
        async with self.session() as session:
            return await session.revoke_access(entity, resource, resource_id)

    async def revoke_all_access(self, entity: Entity, resource_type: str | None = None) -> int:
        async with self.session() as session:
            return await session.revoke_all_access(entity, resource_type)

    async def sync_access(
        self, entity: Entity, resource_type: str, resource_ids: Iterable[Any], **kwargs: Any
    ) -> None:
        async with self.session() as session:
            await session.sync_access(entity, resource_type, resource_ids, **kwargs)
