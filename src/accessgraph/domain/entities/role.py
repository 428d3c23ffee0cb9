"""Role entity for RBAC."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class Role:
    """Role - named group of permissions that actors can be members of.

    ``parent_id`` forms a structural tree only; resolution never walks it.
    """

    id: UUID
    name: str
    slug: str
    created_at: datetime
    updated_at: datetime
    description: str | None = None
    parent_id: UUID | None = None
