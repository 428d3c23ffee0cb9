"""Access entity - entity may reach a resource."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from accessgraph.domain.temporal import is_active
from accessgraph.domain.value_objects import EntityRef


@dataclass
class Access:
    """Access - entity (actor, role or permission) may reach resource."""

    id: UUID
    entity: EntityRef
    resource: EntityRef
    created_at: datetime
    updated_at: datetime
    context: dict[str, Any] | None = None
    expires_at: datetime | None = None

    def is_active(self, now: datetime) -> bool:
        return is_active(self.expires_at, now)
