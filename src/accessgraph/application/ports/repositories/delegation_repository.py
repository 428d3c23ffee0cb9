"""Delegation repository port."""

from typing import Protocol
from uuid import UUID

from accessgraph.domain.entities import Delegation
from accessgraph.domain.value_objects import EntityRef


class DelegationRepository(Protocol):
    """Port for actor -> permission links. Rows are returned regardless of expiry."""

    async def list_by_member(self, member: EntityRef) -> list[Delegation]: ...

    async def list_by_members(self, members: list[EntityRef]) -> list[Delegation]: ...

    async def list_for_permission(
        self, member: EntityRef, permission_id: UUID
    ) -> list[Delegation]: ...

    async def lock(self, member: EntityRef, permission_id: UUID) -> None:
        """Serialize concurrent writers for (member, permission) until commit."""
        ...

    async def create(self, delegation: Delegation) -> Delegation: ...

    async def delete_for_permission(self, member: EntityRef, permission_id: UUID) -> int: ...

    async def delete_many(self, delegation_ids: list[UUID]) -> int: ...
