"""Permission repository port."""

from typing import Protocol
from uuid import UUID

from accessgraph.domain.entities import Permission


class PermissionRepository(Protocol):
    """Port for permission catalog persistence."""

    async def get_by_id(self, permission_id: UUID) -> Permission | None: ...

    async def get_by_slug(self, slug: str) -> Permission | None: ...

    async def list_by_ids(self, permission_ids: list[UUID]) -> list[Permission]: ...

    async def get_or_create(self, permission: Permission) -> Permission:
        """Insert unless the slug exists; return the surviving row."""
        ...
