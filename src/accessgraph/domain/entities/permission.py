"""Permission entity - canonical record keyed by hierarchical slug."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from accessgraph.domain.value_objects import PermissionSlug


@dataclass
class Permission:
    """Permission - dot-separated slug such as ``lection.45.quiz`` or ``*``."""

    id: UUID
    slug: str
    created_at: datetime
    updated_at: datetime
    description: str | None = None

    def grants(self, query: str) -> bool:
        return PermissionSlug(self.slug).grants(query)
