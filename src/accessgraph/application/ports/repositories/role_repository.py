"""Role repository port."""

from typing import Protocol
from uuid import UUID

from accessgraph.domain.entities import Role


class RoleRepository(Protocol):
    """Port for role persistence."""

    async def get_by_id(self, role_id: UUID) -> Role | None: ...

    async def get_by_slug(self, slug: str) -> Role | None: ...

    async def list_by_ids(self, role_ids: list[UUID]) -> list[Role]: ...

    async def list_children(self, parent_id: UUID) -> list[Role]: ...

    async def slug_exists(self, slug: str) -> bool: ...

    async def get_or_create(self, role: Role) -> Role:
        """Insert unless the slug exists; return the surviving row."""
        ...

    async def create(self, role: Role) -> Role: ...

    async def update(self, role: Role) -> None: ...
