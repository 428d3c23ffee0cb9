"""Engine configuration DTOs."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EntityTypes:
    """Discriminators under which roles and permissions appear as entities."""

    role: str = "Role"
    permission: str = "Permission"


@dataclass(frozen=True)
class TableNames:
    """Storage table names, overridable per deployment."""

    roles: str = "roles"
    permissions: str = "permissions"
    role_members: str = "role_members"
    permission_members: str = "permission_members"
    accesses: str = "accesses"


@dataclass(frozen=True)
class EngineConfig:
    """Explicit configuration handed to the engine at construction."""

    entity_types: EntityTypes = field(default_factory=EntityTypes)
    table_names: TableNames = field(default_factory=TableNames)
