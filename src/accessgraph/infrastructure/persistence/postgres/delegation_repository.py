"""PostgreSQL delegation repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from accessgraph.domain.entities import Delegation
from accessgraph.domain.value_objects import EntityRef
from accessgraph.infrastructure.persistence.postgres.queries import (
    ADVISORY_LOCK,
    advisory_lock_key,
    pair_in_arrays,
    ref_arrays,
    table_query,
)

_COLUMNS = (
    "id, permission_id, member_type, member_id, context, expires_at, created_at, updated_at"
)


def _row_to_delegation(r: tuple) -> Delegation:
    return Delegation(
        id=r[0],
        permission_id=r[1],
        member=EntityRef(r[2], r[3]),
        context=r[4],
        expires_at=r[5],
        created_at=r[6],
        updated_at=r[7],
    )


class PostgresDelegationRepository:
    """Delegation repository implementation (permission_members table)."""

    def __init__(self, conn: AsyncConnection, table: str = "permission_members") -> None:
        self._conn = conn
        self._table = table

    async def list_by_member(self, member: EntityRef) -> list[Delegation]:
        """List all delegations held by a member, expired included."""
        return await self.list_by_members([member])

    async def list_by_members(self, members: list[EntityRef]) -> list[Delegation]:
        """List delegations held by any of the members."""
        types, ids = ref_arrays(members)
        cur = await self._conn.execute(
            table_query(
                f"SELECT {_COLUMNS} FROM {{table}} "
                f"WHERE {pair_in_arrays('member_type', 'member_id')} "
                "ORDER BY created_at, id",
                self._table,
            ),
            (types, ids),
        )
        return [_row_to_delegation(r) for r in await cur.fetchall()]

    async def list_for_permission(
        self, member: EntityRef, permission_id: UUID
    ) -> list[Delegation]:
        """List delegations of one permission to a member."""
        cur = await self._conn.execute(
            table_query(
                f"SELECT {_COLUMNS} FROM {{table}} "
                "WHERE member_type = %s AND member_id = %s AND permission_id = %s "
                "ORDER BY created_at, id",
                self._table,
            ),
            (member.type, member.id, permission_id),
        )
        return [_row_to_delegation(r) for r in await cur.fetchall()]

    async def lock(self, member: EntityRef, permission_id: UUID) -> None:
        """Take a transaction-scoped advisory lock on (member, permission)."""
        await self._conn.execute(
            ADVISORY_LOCK, (advisory_lock_key(self._table, member, permission_id),)
        )

    async def create(self, delegation: Delegation) -> Delegation:
        """Create delegation."""
        await self._conn.execute(
            table_query(
                f"INSERT INTO {{table}} ({_COLUMNS}) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s)",
                self._table,
            ),
            (
                delegation.id,
                delegation.permission_id,
                delegation.member.type,
                delegation.member.id,
                Jsonb(delegation.context) if delegation.context is not None else None,
                delegation.expires_at,
                delegation.created_at,
                delegation.updated_at,
            ),
        )
        return delegation

    async def delete_for_permission(self, member: EntityRef, permission_id: UUID) -> int:
        """Delete delegations of one permission to a member."""
        cur = await self._conn.execute(
            table_query(
                "DELETE FROM {table} "
                "WHERE member_type = %s AND member_id = %s AND permission_id = %s",
                self._table,
            ),
            (member.type, member.id, permission_id),
        )
        return cur.rowcount

    async def delete_many(self, delegation_ids: list[UUID]) -> int:
        """Delete delegations by id."""
        cur = await self._conn.execute(
            table_query("DELETE FROM {table} WHERE id = ANY(%s)", self._table),
            (list(delegation_ids),),
        )
        return cur.rowcount
