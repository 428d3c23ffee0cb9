"""PostgreSQL role repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from accessgraph.domain.entities import Role
from accessgraph.infrastructure.persistence.postgres.queries import table_query

_COLUMNS = "id, name, slug, description, parent_id, created_at, updated_at"
_VALUES = "%s, %s, %s, %s, %s, %s, %s"


def _row_to_role(r: tuple) -> Role:
    return Role(
        id=r[0],
        name=r[1],
        slug=r[2],
        description=r[3],
        parent_id=r[4],
        created_at=r[5],
        updated_at=r[6],
    )


def _role_params(role: Role) -> tuple:
    return (
        role.id,
        role.name,
        role.slug,
        role.description,
        role.parent_id,
        role.created_at,
        role.updated_at,
    )


class PostgresRoleRepository:
    """Role repository implementation."""

    def __init__(self, conn: AsyncConnection, table: str = "roles") -> None:
        self._conn = conn
        self._table = table

    async def get_by_id(self, role_id: UUID) -> Role | None:
        """Get role by id."""
        cur = await self._conn.execute(
            table_query(f"SELECT {_COLUMNS} FROM {{table}} WHERE id = %s", self._table),
            (role_id,),
        )
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def get_by_slug(self, slug: str) -> Role | None:
        """Get role by slug."""
        cur = await self._conn.execute(
            table_query(f"SELECT {_COLUMNS} FROM {{table}} WHERE slug = %s", self._table),
            (slug,),
        )
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def list_by_ids(self, role_ids: list[UUID]) -> list[Role]:
        """List roles by ids."""
        cur = await self._conn.execute(
            table_query(
                f"SELECT {_COLUMNS} FROM {{table}} WHERE id = ANY(%s) ORDER BY slug",
                self._table,
            ),
            (list(role_ids),),
        )
        return [_row_to_role(r) for r in await cur.fetchall()]

    async def list_children(self, parent_id: UUID) -> list[Role]:
        """List direct children of a role."""
        cur = await self._conn.execute(
            table_query(
                f"SELECT {_COLUMNS} FROM {{table}} WHERE parent_id = %s ORDER BY slug",
                self._table,
            ),
            (parent_id,),
        )
        return [_row_to_role(r) for r in await cur.fetchall()]

    async def slug_exists(self, slug: str) -> bool:
        """Check whether a slug is taken."""
        cur = await self._conn.execute(
            table_query("SELECT 1 FROM {table} WHERE slug = %s", self._table),
            (slug,),
        )
        return await cur.fetchone() is not None

    async def get_or_create(self, role: Role) -> Role:
        """Insert unless the slug exists; a concurrent insert wins."""
        cur = await self._conn.execute(
            table_query(
                f"INSERT INTO {{table}} ({_COLUMNS}) VALUES ({_VALUES}) "
                f"ON CONFLICT (slug) DO NOTHING RETURNING {_COLUMNS}",
                self._table,
            ),
            _role_params(role),
        )
        r = await cur.fetchone()
        if r:
            return _row_to_role(r)
        existing = await self.get_by_slug(role.slug)
        if existing is None:
            raise LookupError(f"Role {role.slug!r} vanished after conflict")
        return existing

    async def create(self, role: Role) -> Role:
        """Create role."""
        await self._conn.execute(
            table_query(f"INSERT INTO {{table}} ({_COLUMNS}) VALUES ({_VALUES})", self._table),
            _role_params(role),
        )
        return role

    async def update(self, role: Role) -> None:
        """Update role."""
        await self._conn.execute(
            table_query(
                "UPDATE {table} SET name=%s, description=%s, parent_id=%s, updated_at=%s "
                "WHERE id=%s",
                self._table,
            ),
            (role.name, role.description, role.parent_id, role.updated_at, role.id),
        )
