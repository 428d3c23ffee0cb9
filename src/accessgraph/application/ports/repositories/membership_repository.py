"""Membership repository port."""

from typing import Protocol
from uuid import UUID

from accessgraph.domain.entities import Membership
from accessgraph.domain.value_objects import EntityRef


class MembershipRepository(Protocol):
    """Port for actor -> role links. Rows are returned regardless of expiry."""

    async def list_by_member(self, member: EntityRef) -> list[Membership]: ...

    async def list_for_role(self, member: EntityRef, role_id: UUID) -> list[Membership]: ...

    async def lock(self, member: EntityRef, role_id: UUID) -> None:
        """Serialize concurrent writers for (member, role) until commit."""
        ...

    async def create(self, membership: Membership) -> Membership: ...

    async def update(self, membership: Membership) -> None: ...

    async def delete_for_role(self, member: EntityRef, role_id: UUID) -> int: ...

    async def delete_many(self, membership_ids: list[UUID]) -> int: ...
