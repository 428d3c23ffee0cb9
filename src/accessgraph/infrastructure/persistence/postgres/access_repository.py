"""PostgreSQL access repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from accessgraph.domain.entities import Access
from accessgraph.domain.value_objects import EntityRef
from accessgraph.infrastructure.persistence.postgres.queries import (
    pair_in_arrays,
    ref_arrays,
    table_query,
    type_filter,
)

_COLUMNS = (
    "id, entity_type, entity_id, resource_type, resource_id, "
    "context, expires_at, created_at, updated_at"
)
_VALUES = "%s, %s, %s, %s, %s, %s, %s, %s, %s"


def _row_to_access(r: tuple) -> Access:
    return Access(
        id=r[0],
        entity=EntityRef(r[1], r[2]),
        resource=EntityRef(r[3], r[4]),
        context=r[5],
        expires_at=r[6],
        created_at=r[7],
        updated_at=r[8],
    )


def _access_params(access: Access) -> tuple:
    return (
        access.id,
        access.entity.type,
        access.entity.id,
        access.resource.type,
        access.resource.id,
        Jsonb(access.context) if access.context is not None else None,
        access.expires_at,
        access.created_at,
        access.updated_at,
    )


class PostgresAccessRepository:
    """Access repository implementation."""

    def __init__(self, conn: AsyncConnection, table: str = "accesses") -> None:
        self._conn = conn
        self._table = table

    async def get(self, entity: EntityRef, resource: EntityRef) -> Access | None:
        """Get the access row for (entity, resource)."""
        cur = await self._conn.execute(
            table_query(
                f"SELECT {_COLUMNS} FROM {{table}} "
                "WHERE entity_type = %s AND entity_id = %s "
                "AND resource_type = %s AND resource_id = %s",
                self._table,
            ),
            (entity.type, entity.id, resource.type, resource.id),
        )
        r = await cur.fetchone()
        return _row_to_access(r) if r else None

    async def get_or_create(self, access: Access) -> Access:
        """Insert unless (entity, resource) exists; a concurrent insert wins."""
        cur = await self._conn.execute(
            table_query(
                f"INSERT INTO {{table}} ({_COLUMNS}) VALUES ({_VALUES}) "
                "ON CONFLICT (entity_type, entity_id, resource_type, resource_id) "
                f"DO NOTHING RETURNING {_COLUMNS}",
                self._table,
            ),
            _access_params(access),
        )
        r = await cur.fetchone()
        if r:
            return _row_to_access(r)
        existing = await self.get(access.entity, access.resource)
        if existing is None:
            raise LookupError(f"Access {access.entity} -> {access.resource} vanished after conflict")
        return existing

    async def create(self, access: Access) -> Access:
        """Create access."""
        await self._conn.execute(
            table_query(f"INSERT INTO {{table}} ({_COLUMNS}) VALUES ({_VALUES})", self._table),
            _access_params(access),
        )
        return access

    async def list_by_entity(
        self, entity: EntityRef, resource_type: str | None = None
    ) -> list[Access]:
        """List access rows owned by one entity."""
        return await self.list_by_entities([entity], resource_type)

    async def list_by_entities(
        self, entities: list[EntityRef], resource_type: str | None = None
    ) -> list[Access]:
        """List access rows owned by any of the entities."""
        types, ids = ref_arrays(entities)
        clause, params = type_filter(resource_type)
        cur = await self._conn.execute(
            table_query(
                f"SELECT {_COLUMNS} FROM {{table}} "
                f"WHERE {pair_in_arrays('entity_type', 'entity_id')}{clause} "
                "ORDER BY created_at, id",
                self._table,
            ),
            (types, ids, *params),
        )
        return [_row_to_access(r) for r in await cur.fetchall()]

    async def list_for_resource(
        self, entities: list[EntityRef], resource: EntityRef
    ) -> list[Access]:
        """List rows linking any of the entities to one resource."""
        types, ids = ref_arrays(entities)
        cur = await self._conn.execute(
            table_query(
                f"SELECT {_COLUMNS} FROM {{table}} "
                "WHERE resource_type = %s AND resource_id = %s "
                f"AND {pair_in_arrays('entity_type', 'entity_id')}",
                self._table,
            ),
            (resource.type, resource.id, types, ids),
        )
        return [_row_to_access(r) for r in await cur.fetchall()]

    async def delete_for_resource(self, entity: EntityRef, resource: EntityRef) -> int:
        """Delete the row for (entity, resource)."""
        cur = await self._conn.execute(
            table_query(
                "DELETE FROM {table} WHERE entity_type = %s AND entity_id = %s "
                "AND resource_type = %s AND resource_id = %s",
                self._table,
            ),
            (entity.type, entity.id, resource.type, resource.id),
        )
        return cur.rowcount

    async def delete_by_entity(
        self, entity: EntityRef, resource_type: str | None = None
    ) -> int:
        """Delete all rows owned by an entity, optionally of one resource type."""
        clause, params = type_filter(resource_type)
        cur = await self._conn.execute(
            table_query(
                f"DELETE FROM {{table}} WHERE entity_type = %s AND entity_id = %s{clause}",
                self._table,
            ),
            (entity.type, entity.id, *params),
        )
        return cur.rowcount

    async def delete_many(self, access_ids: list[UUID]) -> int:
        """Delete access rows by id."""
        cur = await self._conn.execute(
            table_query("DELETE FROM {table} WHERE id = ANY(%s)", self._table),
            (list(access_ids),),
        )
        return cur.rowcount
