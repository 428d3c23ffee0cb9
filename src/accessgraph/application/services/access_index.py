"""Access index - entity -> resource grants."""

from collections.abc import Iterable
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from accessgraph.application.ports.repositories import AccessRepository
from accessgraph.domain.entities import Access
from accessgraph.domain.temporal import is_active
from accessgraph.domain.value_objects import EntityRef
from accessgraph.logging import get_logger

logger = get_logger(__name__)


class AccessIndex:
    """Grant, revoke, list and sync the access rows owned by one entity."""

    def __init__(self, accesses: AccessRepository) -> None:
        self._accesses = accesses

    async def grant(
        self,
        entity: EntityRef,
        resource: EntityRef,
        now: datetime,
        context: dict[str, Any] | None = None,
        expires_at: datetime | None = None,
    ) -> Access:
        """Get-or-create on (entity, resource).

        An existing row is returned as is: context and expiry only apply to a
        freshly created row.
        """
        existing = await self._accesses.get(entity, resource)
        if existing:
            return existing
        access = await self._accesses.get_or_create(
            _new_access(entity, resource, now, context, expires_at)
        )
        logger.info("Access granted", entity=str(entity), resource=str(resource))
        return access

    async def revoke(self, entity: EntityRef, resource: EntityRef) -> int:
        count = await self._accesses.delete_for_resource(entity, resource)
        if count:
            logger.info("Access revoked", entity=str(entity), resource=str(resource))
        return count

    async def revoke_all(self, entity: EntityRef, resource_type: str | None = None) -> int:
        count = await self._accesses.delete_by_entity(entity, resource_type)
        logger.info(
            "Access revoked", entity=str(entity), resource_type=resource_type, count=count
        )
        return count

    async def active(
        self, entity: EntityRef, now: datetime, resource_type: str | None = None
    ) -> list[Access]:
        rows = await self._accesses.list_by_entity(entity, resource_type)
        return [a for a in rows if is_active(a.expires_at, now)]

    async def expired(
        self, entity: EntityRef, now: datetime, resource_type: str | None = None
    ) -> list[Access]:
        rows = await self._accesses.list_by_entity(entity, resource_type)
        return [a for a in rows if not is_active(a.expires_at, now)]

    async def active_for_entities(
        self,
        entities: list[EntityRef],
        now: datetime,
        resource_type: str | None = None,
    ) -> list[Access]:
        if not entities:
            return []
        rows = await self._accesses.list_by_entities(entities, resource_type)
        return [a for a in rows if is_active(a.expires_at, now)]

    async def any_active_for_resource(
        self, entities: list[EntityRef], resource: EntityRef, now: datetime
    ) -> bool:
        if not entities:
            return False
        rows = await self._accesses.list_for_resource(entities, resource)
        return any(is_active(a.expires_at, now) for a in rows)

    async def sync(
        self,
        entity: EntityRef,
        resource_type: str,
        target_ids: Iterable[Any],
        now: datetime,
        context: dict[str, Any] | None = None,
        expires_at: datetime | None = None,
    ) -> None:
        """Make the entity's active grants of ``resource_type`` equal ``target_ids``.

        Rows already active for a target are kept untouched. An expired row for
        a target occupies the (entity, resource) key, so it is replaced by a
        fresh one. Other resource types are not touched.
        """
        targets = list(dict.fromkeys(str(i) for i in target_ids))
        wanted = set(targets)
        rows = await self._accesses.list_by_entity(entity, resource_type)

        stale: list[UUID] = []
        present: set[str] = set()
        for row in rows:
            active = is_active(row.expires_at, now)
            if row.resource.id in wanted and active:
                present.add(row.resource.id)
            elif row.resource.id in wanted or active:
                stale.append(row.id)

        if stale:
            await self._accesses.delete_many(stale)
        created = 0
        for resource_id in targets:
            if resource_id in present:
                continue
            await self._accesses.create(
                _new_access(
                    entity, EntityRef(resource_type, resource_id), now, context, expires_at
                )
            )
            created += 1
        logger.info(
            "Access synced",
            entity=str(entity),
            resource_type=resource_type,
            removed=len(stale),
            created=created,
        )


def _new_access(
    entity: EntityRef,
    resource: EntityRef,
    now: datetime,
    context: dict[str, Any] | None,
    expires_at: datetime | None,
) -> Access:
    return Access(
        id=uuid4(),
        entity=entity,
        resource=resource,
        context=context,
        expires_at=expires_at,
        created_at=now,
        updated_at=now,
    )
