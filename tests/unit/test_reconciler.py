"""Unit tests for role and permission assignment, sync and extension."""

from datetime import timedelta

import pytest

from accessgraph.domain.value_objects import EntityRef

from tests.conftest import FakeUnitOfWork

ALICE = EntityRef("User", 1)


# --- assign / remove ---


@pytest.mark.asyncio
async def test_assign_role_is_idempotent(engine, uow: FakeUnitOfWork) -> None:
    first = await engine.assign_role(ALICE, "learner")
    second = await engine.assign_role(ALICE, "learner")

    assert first is not None
    assert second is None
    assert len(uow.memberships._by_id) == 1
    assert len(uow.roles._by_id) == 1


@pytest.mark.asyncio
async def test_assign_role_takes_lock(engine, uow: FakeUnitOfWork) -> None:
    membership = await engine.assign_role(ALICE, "learner")
    assert uow.memberships.locks == [(ALICE, membership.role_id)]


@pytest.mark.asyncio
async def test_assign_role_stacking(engine, clock, uow: FakeUnitOfWork) -> None:
    """max_concurrent bounds how many active rows may stack."""
    expires = clock.now + timedelta(hours=1)
    assert await engine.assign_role(ALICE, "trial", 2, expires_at=expires)
    assert await engine.assign_role(ALICE, "trial", 2, expires_at=expires)
    assert await engine.assign_role(ALICE, "trial", 2, expires_at=expires) is None
    assert len(uow.memberships._by_id) == 2


@pytest.mark.asyncio
async def test_assign_role_unlimited(engine, uow: FakeUnitOfWork) -> None:
    for _ in range(3):
        assert await engine.assign_role(ALICE, "trial", -1)
    assert len(uow.memberships._by_id) == 3


@pytest.mark.asyncio
async def test_assign_role_after_expiry(engine, clock) -> None:
    """An expired membership does not count against the limit."""
    await engine.assign_role(ALICE, "learner", expires_at=clock.now + timedelta(hours=1))
    clock.advance(hours=1)

    assert await engine.assign_role(ALICE, "learner") is not None
    assert await engine.has_role(ALICE, "learner")


@pytest.mark.asyncio
async def test_assign_role_keeps_context(engine) -> None:
    membership = await engine.assign_role(ALICE, "learner", context={"course": 45})
    assert membership.context == {"course": 45}


@pytest.mark.asyncio
async def test_remove_role(engine) -> None:
    await engine.assign_role(ALICE, "learner", -1)
    await engine.assign_role(ALICE, "learner", -1)

    assert await engine.remove_role(ALICE, "learner") == 2
    assert not await engine.has_role(ALICE, "learner")


@pytest.mark.asyncio
async def test_remove_unknown_role_is_noop(engine, uow: FakeUnitOfWork) -> None:
    assert await engine.remove_role(ALICE, "ghost") == 0
    assert uow.roles._by_id == {}


@pytest.mark.asyncio
async def test_remove_permission_keeps_role_grants(engine) -> None:
    """Only the actor's own delegation goes; the role still grants it."""
    async with engine.session() as session:
        editor = await session.create_role("Editor")
        await session.assign_permission(editor, "blog")
        await session.assign_role(ALICE, editor)
        await session.assign_permission(ALICE, "blog")

        assert await session.remove_permission(ALICE, "blog") == 1
        assert await session.individual_permissions(ALICE) == []
        assert await session.has_permission(ALICE, "blog")


@pytest.mark.asyncio
async def test_remove_unknown_permission_is_noop(engine) -> None:
    assert await engine.remove_permission(ALICE, "never.created") == 0


@pytest.mark.asyncio
async def test_assign_permission_is_idempotent(engine, uow: FakeUnitOfWork) -> None:
    assert await engine.assign_permission(ALICE, "blog")
    assert await engine.assign_permission(ALICE, "blog") is None
    assert len(uow.delegations._by_id) == 1


# --- sync ---


@pytest.mark.asyncio
async def test_sync_roles_preserves_identity(engine, uow: FakeUnitOfWork) -> None:
    kept = await engine.assign_role(ALICE, "learner")
    await engine.assign_role(ALICE, "editor")

    await engine.sync_roles(ALICE, ["learner", "reviewer"])

    async with engine.session() as session:
        assert [r.slug for r in await session.roles(ALICE)] == ["learner", "reviewer"]
    assert kept.id in uow.memberships._by_id


@pytest.mark.asyncio
async def test_sync_roles_empty_removes_all(engine) -> None:
    await engine.assign_role(ALICE, "learner")
    await engine.sync_roles(ALICE, [])

    async with engine.session() as session:
        assert await session.roles(ALICE) == []


@pytest.mark.asyncio
async def test_sync_roles_deduplicates_targets(engine, uow: FakeUnitOfWork) -> None:
    await engine.sync_roles(ALICE, ["learner", "learner"])
    assert len(uow.memberships._by_id) == 1


@pytest.mark.asyncio
async def test_sync_permissions(engine, uow: FakeUnitOfWork) -> None:
    kept = await engine.assign_permission(ALICE, "blog")
    await engine.assign_permission(ALICE, "lection")

    await engine.sync_permissions(ALICE, ["blog", "article"])

    async with engine.session() as session:
        slugs = [p.slug for p in await session.individual_permissions(ALICE)]
    assert slugs == ["article", "blog"]
    assert kept.id in uow.delegations._by_id


# --- extend ---


@pytest.mark.asyncio
async def test_extend_pushes_expiry(engine, clock) -> None:
    """24h left plus 24h more gives about 48h from now."""
    start = clock.now
    await engine.assign_role(ALICE, "learner", expires_at=start + timedelta(hours=24))

    membership = await engine.extend_or_add_role(ALICE, "learner", 24)
    assert membership.expires_at == start + timedelta(hours=48)


@pytest.mark.asyncio
async def test_extend_keeps_permanent(engine) -> None:
    original = await engine.assign_role(ALICE, "learner")

    membership = await engine.extend_or_add_role(ALICE, "learner", 24)
    assert membership.id == original.id
    assert membership.expires_at is None


@pytest.mark.asyncio
async def test_extend_adds_when_absent(engine, clock) -> None:
    membership = await engine.extend_or_add_role(ALICE, "learner", 12)
    assert membership.expires_at == clock.now + timedelta(hours=12)
    assert await engine.has_role(ALICE, "learner")


@pytest.mark.asyncio
async def test_extend_adds_after_expiry(engine, clock, uow: FakeUnitOfWork) -> None:
    await engine.assign_role(ALICE, "learner", expires_at=clock.now + timedelta(hours=1))
    clock.advance(hours=2)

    membership = await engine.extend_or_add_role(ALICE, "learner", 5)
    assert membership.expires_at == clock.now + timedelta(hours=5)
    assert len(uow.memberships._by_id) == 2


@pytest.mark.asyncio
async def test_extend_latest_of_stacked(engine, clock) -> None:
    short = await engine.assign_role(
        ALICE, "trial", -1, expires_at=clock.now + timedelta(hours=1)
    )
    long = await engine.assign_role(
        ALICE, "trial", -1, expires_at=clock.now + timedelta(hours=10)
    )

    membership = await engine.extend_or_add_role(ALICE, "trial", 2)
    assert membership.id == long.id
    assert membership.expires_at == clock.now + timedelta(hours=12)
    assert short.expires_at == clock.now + timedelta(hours=1)


@pytest.mark.asyncio
@pytest.mark.parametrize("hours", [0, -3])
async def test_extend_non_positive_hours(engine, uow: FakeUnitOfWork, hours) -> None:
    assert await engine.extend_or_add_role(ALICE, "learner", hours) is None
    assert uow.memberships._by_id == {}


@pytest.mark.asyncio
async def test_assign_long_role_slug_is_idempotent(engine, uow: FakeUnitOfWork) -> None:
    slug = "course-instructor-assistant-level-two"

    assert await engine.assign_role(ALICE, slug) is not None
    assert await engine.assign_role(ALICE, slug) is None
    assert await engine.has_role(ALICE, slug)
    assert len(uow.roles._by_id) == 1
    assert len(uow.memberships._by_id) == 1
