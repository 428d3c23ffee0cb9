"""Unit of Work port - transactional boundary."""

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from accessgraph.application.ports.repositories.access_repository import AccessRepository
from accessgraph.application.ports.repositories.delegation_repository import (
    DelegationRepository,
)
from accessgraph.application.ports.repositories.membership_repository import (
    MembershipRepository,
)
from accessgraph.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from accessgraph.application.ports.repositories.role_repository import RoleRepository


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def roles(self) -> RoleRepository: ...

    @property
    def permissions(self) -> PermissionRepository: ...

    @property
    def memberships(self) -> MembershipRepository: ...

    @property
    def delegations(self) -> DelegationRepository: ...

    @property
    def accesses(self) -> AccessRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    def __call__(self) -> AbstractAsyncContextManager[UnitOfWork]: ...
