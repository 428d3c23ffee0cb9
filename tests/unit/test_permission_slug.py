"""Unit tests for hierarchical permission matching."""

from uuid import uuid4

import pytest

from accessgraph.domain.entities import Permission
from accessgraph.domain.exceptions import InvalidReference
from accessgraph.domain.value_objects import WILDCARD, PermissionSlug, slug_grants


@pytest.mark.parametrize(
    ("held", "query", "expected"),
    [
        ("lection", "lection", True),
        ("lection", "lection.45", True),
        ("lection", "lection.45.quiz", True),
        ("lection.45", "lection", False),
        ("lection.45", "lection.46", False),
        ("lection", "lection-old", False),
        ("lection", "lectionary", False),
        ("lection.45.quiz", "lection.45.quiz", True),
        (WILDCARD, "anything.at.all", True),
        (WILDCARD, "lection", True),
    ],
)
def test_slug_grants(held: str, query: str, expected: bool) -> None:
    assert slug_grants(held, query) is expected


def test_grants_delegates_to_rule() -> None:
    assert PermissionSlug("lection").grants("lection.1")
    assert not PermissionSlug("lection.1").grants("lection")


def test_empty_slug_rejected() -> None:
    with pytest.raises(InvalidReference):
        PermissionSlug("")


def test_permission_entity_grants(now) -> None:
    permission = Permission(id=uuid4(), slug="lection", created_at=now, updated_at=now)
    assert permission.grants("lection.45.quiz")
    assert not permission.grants("lectionary")
