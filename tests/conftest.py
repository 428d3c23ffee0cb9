"""Pytest fixtures for accessgraph tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest

from accessgraph.application.engine import AuthorizationEngine
from accessgraph.domain.entities import Access, Delegation, Membership, Permission, Role
from accessgraph.domain.value_objects import EntityRef


# --- Fake repositories ---


class FakeRoleRepository:
    """In-memory role repository; slugs are unique."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Role] = {}
        self.get_or_create_calls = 0

    async def get_by_id(self, role_id: UUID) -> Role | None:
        return self._by_id.get(role_id)

    async def get_by_slug(self, slug: str) -> Role | None:
        return next((r for r in self._by_id.values() if r.slug == slug), None)

    async def list_by_ids(self, role_ids: list[UUID]) -> list[Role]:
        return [self._by_id[i] for i in role_ids if i in self._by_id]

    async def list_children(self, parent_id: UUID) -> list[Role]:
        children = [r for r in self._by_id.values() if r.parent_id == parent_id]
        return sorted(children, key=lambda r: r.slug)

    async def slug_exists(self, slug: str) -> bool:
        return any(r.slug == slug for r in self._by_id.values())

    async def get_or_create(self, role: Role) -> Role:
        self.get_or_create_calls += 1
        existing = await self.get_by_slug(role.slug)
        if existing:
            return existing
        self._by_id[role.id] = role
        return role

    async def create(self, role: Role) -> Role:
        self._by_id[role.id] = role
        return role

    async def update(self, role: Role) -> None:
        self._by_id[role.id] = role

    def add_role(self, role: Role) -> None:
        self._by_id[role.id] = role


class FakePermissionRepository:
    """In-memory permission repository; slugs are unique."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Permission] = {}
        self.get_or_create_calls = 0

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        return self._by_id.get(permission_id)

    async def get_by_slug(self, slug: str) -> Permission | None:
        return next((p for p in self._by_id.values() if p.slug == slug), None)

    async def list_by_ids(self, permission_ids: list[UUID]) -> list[Permission]:
        return [self._by_id[i] for i in permission_ids if i in self._by_id]

    async def get_or_create(self, permission: Permission) -> Permission:
        self.get_or_create_calls += 1
        existing = await self.get_by_slug(permission.slug)
        if existing:
            return existing
        self._by_id[permission.id] = permission
        return permission


class FakeMembershipRepository:
    """In-memory actor -> role links."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Membership] = {}
        self.locks: list[tuple[EntityRef, UUID]] = []

    async def list_by_member(self, member: EntityRef) -> list[Membership]:
        return [m for m in self._by_id.values() if m.member == member]

    async def list_for_role(self, member: EntityRef, role_id: UUID) -> list[Membership]:
        return [
            m for m in self._by_id.values() if m.member == member and m.role_id == role_id
        ]

    async def lock(self, member: EntityRef, role_id: UUID) -> None:
        self.locks.append((member, role_id))

    async def create(self, membership: Membership) -> Membership:
        self._by_id[membership.id] = membership
        return membership

    async def update(self, membership: Membership) -> None:
        self._by_id[membership.id] = membership

    async def delete_for_role(self, member: EntityRef, role_id: UUID) -> int:
        doomed = [m.id for m in await self.list_for_role(member, role_id)]
        return await self.delete_many(doomed)

    async def delete_many(self, membership_ids: list[UUID]) -> int:
        count = 0
        for membership_id in membership_ids:
            if self._by_id.pop(membership_id, None):
                count += 1
        return count


class FakeDelegationRepository:
    """In-memory actor -> permission links."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Delegation] = {}
        self.list_by_members_calls = 0

    async def list_by_member(self, member: EntityRef) -> list[Delegation]:
        return [d for d in self._by_id.values() if d.member == member]

    async def list_by_members(self, members: list[EntityRef]) -> list[Delegation]:
        self.list_by_members_calls += 1
        wanted = set(members)
        return [d for d in self._by_id.values() if d.member in wanted]

    async def list_for_permission(
        self, member: EntityRef, permission_id: UUID
    ) -> list[Delegation]:
        return [
            d
            for d in self._by_id.values()
            if d.member == member and d.permission_id == permission_id
        ]

    async def lock(self, member: EntityRef, permission_id: UUID) -> None:
        pass

    async def create(self, delegation: Delegation) -> Delegation:
        self._by_id[delegation.id] = delegation
        return delegation

    async def delete_for_permission(self, member: EntityRef, permission_id: UUID) -> int:
        doomed = [d.id for d in await self.list_for_permission(member, permission_id)]
        return await self.delete_many(doomed)

    async def delete_many(self, delegation_ids: list[UUID]) -> int:
        count = 0
        for delegation_id in delegation_ids:
            if self._by_id.pop(delegation_id, None):
                count += 1
        return count


class FakeAccessRepository:
    """In-memory entity -> resource links; (entity, resource) is unique."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Access] = {}

    async def get(self, entity: EntityRef, resource: EntityRef) -> Access | None:
        return next(
            (
                a
                for a in self._by_id.values()
                if a.entity == entity and a.resource == resource
            ),
            None,
        )

    async def get_or_create(self, access: Access) -> Access:
        existing = await self.get(access.entity, access.resource)
        if existing:
            return existing
        self._by_id[access.id] = access
        return access

    async def create(self, access: Access) -> Access:
        if await self.get(access.entity, access.resource):
            raise ValueError(f"Duplicate access {access.entity} -> {access.resource}")
        self._by_id[access.id] = access
        return access

    async def list_by_entity(
        self, entity: EntityRef, resource_type: str | None = None
    ) -> list[Access]:
        return await self.list_by_entities([entity], resource_type)

    async def list_by_entities(
        self, entities: list[EntityRef], resource_type: str | None = None
    ) -> list[Access]:
        wanted = set(entities)
        return [
            a
            for a in self._by_id.values()
            if a.entity in wanted
            and (resource_type is None or a.resource.type == resource_type)
        ]

    async def list_for_resource(
        self, entities: list[EntityRef], resource: EntityRef
    ) -> list[Access]:
        wanted = set(entities)
        return [
            a for a in self._by_id.values() if a.entity in wanted and a.resource == resource
        ]

    async def delete_for_resource(self, entity: EntityRef, resource: EntityRef) -> int:
        doomed = [a.id for a in await self.list_for_resource([entity], resource)]
        return await self.delete_many(doomed)

    async def delete_by_entity(
        self, entity: EntityRef, resource_type: str | None = None
    ) -> int:
        doomed = [a.id for a in await self.list_by_entity(entity, resource_type)]
        return await self.delete_many(doomed)

    async def delete_many(self, access_ids: list[UUID]) -> int:
        count = 0
        for access_id in access_ids:
            if self._by_id.pop(access_id, None):
                count += 1
        return count


class FakeUnitOfWork:
    """In-memory UnitOfWork for tests."""

    def __init__(self) -> None:
        self._roles = FakeRoleRepository()
        self._permissions = FakePermissionRepository()
        self._memberships = FakeMembershipRepository()
        self._delegations = FakeDelegationRepository()
        self._accesses = FakeAccessRepository()
        self.commits = 0
        self.rollbacks = 0

    @property
    def roles(self) -> FakeRoleRepository:
        return self._roles

    @property
    def permissions(self) -> FakePermissionRepository:
        return self._permissions

    @property
    def memberships(self) -> FakeMembershipRepository:
        return self._memberships

    @property
    def delegations(self) -> FakeDelegationRepository:
        return self._delegations

    @property
    def accesses(self) -> FakeAccessRepository:
        return self._accesses

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


class FakeClock:
    """Settable clock; ``advance`` moves time forward."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# --- Fixtures ---


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def clock(now: datetime) -> FakeClock:
    return FakeClock(now)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(uow: FakeUnitOfWork):
    """Factory returning async context manager over the shared FakeUnitOfWork."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield uow

    return _factory


@pytest.fixture
def engine(uow_factory, clock: FakeClock) -> AuthorizationEngine:
    return AuthorizationEngine(unit_of_work_factory=uow_factory, clock=clock)


@pytest.fixture
def user() -> EntityRef:
    return EntityRef("User", 1)
