"""Permission catalog - canonical permission rows keyed by slug."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from accessgraph.application.ports.repositories import PermissionRepository
from accessgraph.application.services.references import coerce_uuid, extract_id
from accessgraph.domain.entities import Permission
from accessgraph.domain.exceptions import InvalidReference
from accessgraph.domain.value_objects import EntityRef
from accessgraph.logging import get_logger

logger = get_logger(__name__)

PermissionLike = Permission | EntityRef | UUID | str | Any


class PermissionCatalog:
    """Get-or-create and lookup of permissions by exact slug."""

    def __init__(self, permissions: PermissionRepository, permission_type: str) -> None:
        self._permissions = permissions
        self._permission_type = permission_type

    async def get_or_create(
        self, slug: str, now: datetime, description: str | None = None
    ) -> Permission:
        """Return the permission with ``slug``, creating it on first reference."""
        if not isinstance(slug, str) or not slug:
            raise InvalidReference("permission", slug, "slug must be a non-empty string")
        existing = await self._permissions.get_by_slug(slug)
        if existing:
            return existing
        permission = await self._permissions.get_or_create(
            Permission(
                id=uuid4(),
                slug=slug,
                description=description,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("Permission created", permission_id=str(permission.id), slug=slug)
        return permission

    async def find(self, slug: str) -> Permission | None:
        return await self._permissions.get_by_slug(slug)

    async def get(self, permission_id: UUID) -> Permission | None:
        return await self._permissions.get_by_id(permission_id)

    async def get_many(self, permission_ids: set[UUID] | list[UUID]) -> list[Permission]:
        if not permission_ids:
            return []
        return await self._permissions.list_by_ids(sorted(permission_ids, key=str))

    def ref(self, permission: Permission | UUID) -> EntityRef:
        """Entity reference under which a permission holds access entries."""
        permission_id = permission.id if isinstance(permission, Permission) else permission
        return EntityRef(self._permission_type, permission_id)

    async def resolve(
        self, value: PermissionLike, now: datetime, create: bool = True
    ) -> Permission | None:
        """Resolve a caller-supplied permission reference.

        Accepts a Permission, an EntityRef of the permission type, a UUID, a
        slug string, or a mapping/object carrying an ``id``. Unknown ids and
        unsupported kinds raise InvalidReference. An unknown slug is created
        when ``create`` is set and resolves to None otherwise.
        """
        if isinstance(value, Permission):
            return value
        if isinstance(value, str):
            if create:
                return await self.get_or_create(value, now)
            if not value:
                raise InvalidReference("permission", value, "slug must be a non-empty string")
            return await self.find(value)
        if isinstance(value, EntityRef):
            if value.type != self._permission_type:
                raise InvalidReference("permission", value, "entity is not a permission")
            raw_id: Any = value.id
        elif isinstance(value, UUID):
            raw_id = value
        else:
            raw_id = extract_id(value)
            if raw_id is None:
                raise InvalidReference("permission", value, "unsupported value kind")

        permission = await self.get(coerce_uuid("permission", raw_id))
        if not permission:
            raise InvalidReference("permission", value, "no such permission")
        return permission
