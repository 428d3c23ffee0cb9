"""Polymorphic reference to an actor or resource."""

from dataclasses import dataclass
from uuid import UUID

from accessgraph.domain.exceptions import InvalidReference


@dataclass(frozen=True)
class EntityRef:
    """(type, id) pair identifying any actor or resource.

    ``type`` is an opaque discriminator ("User", "Role", "Article", ...) that is
    only ever compared for equality. ``id`` is normalized to ``str`` so that
    integer, UUID and string keys of the same entity compare equal.
    """

    type: str
    id: str | int | UUID

    def __post_init__(self) -> None:
        if not self.type:
            raise InvalidReference("entity", self.type, "type must not be empty")
        if self.id is None or self.id == "":
            raise InvalidReference("entity", self.id, "id must not be empty")
        if not isinstance(self.id, str):
            object.__setattr__(self, "id", str(self.id))

    def __str__(self) -> str:
        return f"{self.type}#{self.id}"
