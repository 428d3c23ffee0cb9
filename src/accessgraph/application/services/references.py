"""Helpers turning loosely typed caller arguments into identifiers."""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from accessgraph.domain.exceptions import InvalidReference
from accessgraph.domain.value_objects import EntityRef


def coerce_uuid(kind: str, value: Any) -> UUID:
    """Parse ``value`` as a UUID or raise InvalidReference."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise InvalidReference(kind, value, "not a valid id") from exc


def extract_id(value: Any) -> Any | None:
    """Return the ``id`` carried by a mapping or object, or None."""
    if isinstance(value, Mapping):
        return value.get("id")
    return getattr(value, "id", None)


def resolve_resource(resource: EntityRef | str, resource_id: Any | None = None) -> EntityRef:
    """Build a resource reference from an EntityRef or a type name plus id.

    A bare type name without an id is a caller bug, not a "no access" answer.
    """
    if isinstance(resource, EntityRef):
        if resource_id is not None:
            raise InvalidReference("resource", resource, "id given twice")
        return resource
    if isinstance(resource, str) and resource:
        if resource_id is None or resource_id == "":
            raise InvalidReference(
                "resource", resource, "an id must be provided with a type name"
            )
        return EntityRef(resource, resource_id)
    raise InvalidReference("resource", resource, "unsupported value kind")
