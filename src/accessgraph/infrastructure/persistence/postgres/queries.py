"""SQL helpers shared by the PostgreSQL repositories.

Column names are fixed; only table names are configurable and are always
composed with ``psycopg.sql.Identifier``.
"""

from typing import Any
from uuid import UUID

from psycopg import sql

from accessgraph.domain.value_objects import EntityRef


def table_query(template: str, table: str) -> sql.Composed:
    """Compose ``template`` with its ``{table}`` placeholder quoted as an identifier."""
    return sql.SQL(template).format(table=sql.Identifier(table))


def pair_in_arrays(type_col: str, id_col: str) -> str:
    """Condition matching rows whose (type, id) pair is in two parallel text arrays."""
    return f"({type_col}, {id_col}) IN (SELECT * FROM unnest(%s::text[], %s::text[]))"


def ref_arrays(refs: list[EntityRef]) -> tuple[list[str], list[str]]:
    """Split references into parallel type/id arrays for ``pair_in_arrays``."""
    unique = list(dict.fromkeys(refs))
    return [r.type for r in unique], [r.id for r in unique]


def type_filter(resource_type: str | None, column: str = "resource_type") -> tuple[str, list[Any]]:
    """Optional ``AND column = %s`` clause with its parameter."""
    if resource_type is None:
        return "", []
    return f" AND {column} = %s", [resource_type]


def advisory_lock_key(table: str, member: EntityRef, target_id: UUID) -> str:
    """Text key hashed into a transaction-scoped advisory lock."""
    return f"{table}:{member.type}:{member.id}:{target_id}"


ADVISORY_LOCK = "SELECT pg_advisory_xact_lock(hashtextextended(%s, 0))"
