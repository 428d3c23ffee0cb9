"""PostgreSQL membership repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from accessgraph.domain.entities import Membership
from accessgraph.domain.value_objects import EntityRef
from accessgraph.infrastructure.persistence.postgres.queries import (
    ADVISORY_LOCK,
    advisory_lock_key,
    table_query,
)

_COLUMNS = (
    "id, role_id, member_type, member_id, context, expires_at, created_at, updated_at"
)


def _row_to_membership(r: tuple) -> Membership:
    return Membership(
        id=r[0],
        role_id=r[1],
        member=EntityRef(r[2], r[3]),
        context=r[4],
        expires_at=r[5],
        created_at=r[6],
        updated_at=r[7],
    )


class PostgresMembershipRepository:
    """Membership repository implementation (role_members table)."""

    def __init__(self, conn: AsyncConnection, table: str = "role_members") -> None:
        self._conn = conn
        self._table = table

    async def list_by_member(self, member: EntityRef) -> list[Membership]:
        """List all memberships of a member, expired included."""
        cur = await self._conn.execute(
            table_query(
                f"SELECT {_COLUMNS} FROM {{table}} "
                "WHERE member_type = %s AND member_id = %s ORDER BY created_at, id",
                self._table,
            ),
            (member.type, member.id),
        )
        return [_row_to_membership(r) for r in await cur.fetchall()]

    async def list_for_role(self, member: EntityRef, role_id: UUID) -> list[Membership]:
        """List memberships of a member in one role."""
        cur = await self._conn.execute(
            table_query(
                f"SELECT {_COLUMNS} FROM {{table}} "
                "WHERE member_type = %s AND member_id = %s AND role_id = %s "
                "ORDER BY created_at, id",
                self._table,
            ),
            (member.type, member.id, role_id),
        )
        return [_row_to_membership(r) for r in await cur.fetchall()]

    async def lock(self, member: EntityRef, role_id: UUID) -> None:
        """Take a transaction-scoped advisory lock on (member, role)."""
        await self._conn.execute(
            ADVISORY_LOCK, (advisory_lock_key(self._table, member, role_id),)
        )

    async def create(self, membership: Membership) -> Membership:
        """Create membership."""
        await self._conn.execute(
            table_query(
                f"INSERT INTO {{table}} ({_COLUMNS}) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s)",
                self._table,
            ),
            (
                membership.id,
                membership.role_id,
                membership.member.type,
                membership.member.id,
                Jsonb(membership.context) if membership.context is not None else None,
                membership.expires_at,
                membership.created_at,
                membership.updated_at,
            ),
        )
        return membership

    async def update(self, membership: Membership) -> None:
        """Update expiry of a membership."""
        await self._conn.execute(
            table_query(
                "UPDATE {table} SET expires_at=%s, updated_at=%s WHERE id=%s", self._table
            ),
            (membership.expires_at, membership.updated_at, membership.id),
        )

    async def delete_for_role(self, member: EntityRef, role_id: UUID) -> int:
        """Delete memberships of a member in one role."""
        cur = await self._conn.execute(
            table_query(
                "DELETE FROM {table} WHERE member_type = %s AND member_id = %s AND role_id = %s",
                self._table,
            ),
            (member.type, member.id, role_id),
        )
        return cur.rowcount

    async def delete_many(self, membership_ids: list[UUID]) -> int:
        """Delete memberships by id."""
        cur = await self._conn.execute(
            table_query("DELETE FROM {table} WHERE id = ANY(%s)", self._table),
            (list(membership_ids),),
        )
        return cur.rowcount
