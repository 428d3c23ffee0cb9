"""PostgreSQL permission repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from accessgraph.domain.entities import Permission
from accessgraph.infrastructure.persistence.postgres.queries import table_query

_COLUMNS = "id, slug, description, created_at, updated_at"


def _row_to_permission(r: tuple) -> Permission:
    return Permission(
        id=r[0],
        slug=r[1],
        description=r[2],
        created_at=r[3],
        updated_at=r[4],
    )


class PostgresPermissionRepository:
    """Permission repository implementation."""

    def __init__(self, conn: AsyncConnection, table: str = "permissions") -> None:
        self._conn = conn
        self._table = table

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        """Get permission by id."""
        cur = await self._conn.execute(
            table_query(f"SELECT {_COLUMNS} FROM {{table}} WHERE id = %s", self._table),
            (permission_id,),
        )
        r = await cur.fetchone()
        return _row_to_permission(r) if r else None

    async def get_by_slug(self, slug: str) -> Permission | None:
        """Get permission by slug."""
        cur = await self._conn.execute(
            table_query(f"SELECT {_COLUMNS} FROM {{table}} WHERE slug = %s", self._table),
            (slug,),
        )
        r = await cur.fetchone()
        return _row_to_permission(r) if r else None

    async def list_by_ids(self, permission_ids: list[UUID]) -> list[Permission]:
        """List permissions by ids."""
        cur = await self._conn.execute(
            table_query(
                f"SELECT {_COLUMNS} FROM {{table}} WHERE id = ANY(%s) ORDER BY slug",
                self._table,
            ),
            (list(permission_ids),),
        )
        return [_row_to_permission(r) for r in await cur.fetchall()]

    async def get_or_create(self, permission: Permission) -> Permission:
        """Insert unless the slug exists; a concurrent insert wins and is returned."""
        cur = await self._conn.execute(
            table_query(
                f"INSERT INTO {{table}} ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s) "
                f"ON CONFLICT (slug) DO NOTHING RETURNING {_COLUMNS}",
                self._table,
            ),
            (
                permission.id,
                permission.slug,
                permission.description,
                permission.created_at,
                permission.updated_at,
            ),
        )
        r = await cur.fetchone()
        if r:
            return _row_to_permission(r)
        existing = await self.get_by_slug(permission.slug)
        if existing is None:
            raise LookupError(f"Permission {permission.slug!r} vanished after conflict")
        return existing
