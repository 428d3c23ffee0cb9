"""Delegation entity - actor directly holds a permission."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from accessgraph.domain.temporal import is_active
from accessgraph.domain.value_objects import EntityRef


@dataclass
class Delegation:
    """Delegation - timed link between an actor (possibly a role) and a permission."""

    id: UUID
    permission_id: UUID
    member: EntityRef
    created_at: datetime
    updated_at: datetime
    context: dict[str, Any] | None = None
    expires_at: datetime | None = None

    def is_active(self, now: datetime) -> bool:
        return is_active(self.expires_at, now)
