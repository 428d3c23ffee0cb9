"""Domain value objects."""

from accessgraph.domain.value_objects.entity_ref import EntityRef
from accessgraph.domain.value_objects.permission_slug import (
    WILDCARD,
    PermissionSlug,
    slug_grants,
)
from accessgraph.domain.value_objects.role_slug import (
    canonical_slug,
    slugify,
    unique_slug_candidates,
)

__all__ = [
    "WILDCARD",
    "EntityRef",
    "PermissionSlug",
    "canonical_slug",
    "slug_grants",
    "slugify",
    "unique_slug_candidates",
]
