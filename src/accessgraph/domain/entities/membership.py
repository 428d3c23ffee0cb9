"""Membership entity - actor is member of a role."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from accessgraph.domain.temporal import is_active
from accessgraph.domain.value_objects import EntityRef


@dataclass
class Membership:
    """Membership - timed link between an actor and a role."""

    id: UUID
    role_id: UUID
    member: EntityRef
    created_at: datetime
    updated_at: datetime
    context: dict[str, Any] | None = None
    expires_at: datetime | None = None

    def is_active(self, now: datetime) -> bool:
        return is_active(self.expires_at, now)
