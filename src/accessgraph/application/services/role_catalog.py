"""Role catalog - role rows, unique slugs and the structural role tree."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from accessgraph.application.ports.repositories import RoleRepository
from accessgraph.application.services.references import coerce_uuid, extract_id
from accessgraph.domain.entities import Role
from accessgraph.domain.exceptions import InvalidReference, ValidationError
from accessgraph.domain.value_objects import (
    EntityRef,
    canonical_slug,
    slugify,
    unique_slug_candidates,
)
from accessgraph.logging import get_logger

logger = get_logger(__name__)

RoleLike = Role | EntityRef | UUID | str | Any


class RoleCatalog:
    """Create, look up and resolve roles."""

    def __init__(self, roles: RoleRepository, role_type: str) -> None:
        self._roles = roles
        self._role_type = role_type

    async def create(
        self,
        name: str,
        now: datetime,
        slug: str | None = None,
        description: str | None = None,
        parent: Role | None = None,
    ) -> Role:
        """Create a role; its slug is made unique by suffixing ``-1``, ``-2``, ..."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Role name is required")
        base = slugify(slug or name)
        if not base:
            raise ValidationError(f"Cannot derive a slug from {slug or name!r}")

        unique = await self._first_free_slug(base)
        role = Role(
            id=uuid4(),
            name=name,
            slug=unique,
            description=description,
            parent_id=parent.id if parent else None,
            created_at=now,
            updated_at=now,
        )
        await self._roles.create(role)
        logger.info("Role created", role_id=str(role.id), slug=role.slug)
        return role

    async def _first_free_slug(self, base: str) -> str:
        candidates = unique_slug_candidates(base)
        slug = next(candidates)
        while await self._roles.slug_exists(slug):
            slug = next(candidates)
        return slug

    async def get_or_create(self, slug: str, now: datetime) -> Role:
        """Return the role stored under ``slug``, creating one named after it if absent.

        Unlike ``create`` the slug is never suffixed.
        """
        role = await self.find(slug)
        if role:
            return role
        canonical = canonical_slug(slug)
        if not canonical:
            raise ValidationError(f"Cannot derive a slug from {slug!r}")
        candidate = Role(
            id=uuid4(),
            name=slug.strip(),
            slug=canonical,
            created_at=now,
            updated_at=now,
        )
        role = await self._roles.get_or_create(candidate)
        if role.id == candidate.id:
            logger.info("Role created", role_id=str(role.id), slug=role.slug)
        return role

    async def find(self, slug: str) -> Role | None:
        if not isinstance(slug, str) or not slug:
            raise InvalidReference("role", slug, "slug must be a non-empty string")
        role = await self._roles.get_by_slug(slug)
        if role:
            return role
        normalized = canonical_slug(slug)
        if normalized and normalized != slug:
            return await self._roles.get_by_slug(normalized)
        return None

    async def get(self, role_id: UUID) -> Role | None:
        return await self._roles.get_by_id(role_id)

    async def get_many(self, role_ids: set[UUID] | list[UUID]) -> list[Role]:
        if not role_ids:
            return []
        return await self._roles.list_by_ids(sorted(role_ids, key=str))

    async def parent(self, role: Role) -> Role | None:
        if role.parent_id is None:
            return None
        return await self._roles.get_by_id(role.parent_id)

    async def children(self, role: Role) -> list[Role]:
        return await self._roles.list_children(role.id)

    async def set_parent(self, role: Role, parent: Role | None, now: datetime) -> Role:
        """Re-parent ``role``; the tree is informational and must stay acyclic."""
        if parent is not None:
            ancestor: Role | None = parent
            while ancestor is not None:
                if ancestor.id == role.id:
                    raise ValidationError(f"Role {role.slug!r} cannot be its own ancestor")
                ancestor = await self.parent(ancestor)
        role.parent_id = parent.id if parent else None
        role.updated_at = now
        await self._roles.update(role)
        return role

    def ref(self, role: Role | UUID) -> EntityRef:
        """Entity reference under which a role holds permissions and access."""
        role_id = role.id if isinstance(role, Role) else role
        return EntityRef(self._role_type, role_id)

    async def resolve(self, value: RoleLike, now: datetime, create: bool = True) -> Role | None:
        """Resolve a caller-supplied role reference.

        Accepts a Role, an EntityRef of the role type, a UUID, a slug string,
        or a mapping/object carrying an ``id``. Unknown ids and unsupported
        kinds raise InvalidReference. An unknown slug is created when
        ``create`` is set and resolves to None otherwise.
        """
        if isinstance(value, Role):
            return value
        if isinstance(value, str):
            if create:
                return await self.get_or_create(value, now)
            return await self.find(value)
        if isinstance(value, EntityRef):
            if value.type != self._role_type:
                raise InvalidReference("role", value, "entity is not a role")
            raw_id: Any = value.id
        elif isinstance(value, UUID):
            raw_id = value
        else:
            raw_id = extract_id(value)
            if raw_id is None:
                raise InvalidReference("role", value, "unsupported value kind")

        role = await self.get(coerce_uuid("role", raw_id))
        if not role:
            raise InvalidReference("role", value, "no such role")
        return role
