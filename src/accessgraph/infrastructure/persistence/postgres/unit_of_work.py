"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg_pool import AsyncConnectionPool

from accessgraph.application.dto.engine_config import TableNames
from accessgraph.infrastructure.persistence.postgres.access_repository import (
    PostgresAccessRepository,
)
from accessgraph.infrastructure.persistence.postgres.delegation_repository import (
    PostgresDelegationRepository,
)
from accessgraph.infrastructure.persistence.postgres.membership_repository import (
    PostgresMembershipRepository,
)
from accessgraph.infrastructure.persistence.postgres.permission_repository import (
    PostgresPermissionRepository,
)
from accessgraph.infrastructure.persistence.postgres.role_repository import (
    PostgresRoleRepository,
)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction."""

    def __init__(self, pool: AsyncConnectionPool, tables: TableNames | None = None) -> None:
        self._pool = pool
        self._tables = tables or TableNames()
        self._conn: object | None = None
        self._conn_cm: object | None = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self._roles = PostgresRoleRepository(self._conn, self._tables.roles)
        self._permissions = PostgresPermissionRepository(self._conn, self._tables.permissions)
        self._memberships = PostgresMembershipRepository(self._conn, self._tables.role_members)
        self._delegations = PostgresDelegationRepository(
            self._conn, self._tables.permission_members
        )
        self._accesses = PostgresAccessRepository(self._conn, self._tables.accesses)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def roles(self) -> PostgresRoleRepository:
        return self._roles

    @property
    def permissions(self) -> PostgresPermissionRepository:
        return self._permissions

    @property
    def memberships(self) -> PostgresMembershipRepository:
        return self._memberships

    @property
    def delegations(self) -> PostgresDelegationRepository:
        return self._delegations

    @property
    def accesses(self) -> PostgresAccessRepository:
        return self._accesses

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool, tables: TableNames | None = None) -> object:
    """Create UnitOfWork factory (async context manager)."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        uow = PostgresUnitOfWork(pool, tables)
        async with uow:
            try:
                yield uow
                await uow.commit()
            except BaseException:
                await uow.rollback()
                raise

    return factory
