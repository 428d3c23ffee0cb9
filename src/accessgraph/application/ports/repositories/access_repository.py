"""Access repository port."""

from typing import Protocol
from uuid import UUID

from accessgraph.domain.entities import Access
from accessgraph.domain.value_objects import EntityRef


class AccessRepository(Protocol):
    """Port for entity -> resource links. Rows are returned regardless of expiry."""

    async def get(self, entity: EntityRef, resource: EntityRef) -> Access | None: ...

    async def get_or_create(self, access: Access) -> Access:
        """Insert unless (entity, resource) exists; return the surviving row."""
        ...

    async def create(self, access: Access) -> Access: ...

    async def list_by_entity(
        self, entity: EntityRef, resource_type: str | None = None
    ) -> list[Access]: ...

    async def list_by_entities(
        self, entities: list[EntityRef], resource_type: str | None = None
    ) -> list[Access]: ...

    async def list_for_resource(
        self, entities: list[EntityRef], resource: EntityRef
    ) -> list[Access]: ...

    async def delete_for_resource(self, entity: EntityRef, resource: EntityRef) -> int: ...

    async def delete_by_entity(
        self, entity: EntityRef, resource_type: str | None = None
    ) -> int: ...

    async def delete_many(self, access_ids: list[UUID]) -> int: ...
