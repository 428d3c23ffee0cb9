"""Hierarchical permission slugs and the matching rule."""

from dataclasses import dataclass

from accessgraph.domain.exceptions import InvalidReference

WILDCARD = "*"
SEPARATOR = "."


def slug_grants(held: str, query: str) -> bool:
    """Whether holding permission ``held`` satisfies a check for ``query``.

    ``lection`` grants ``lection`` and ``lection.45.quiz`` but neither
    ``lection-old`` nor ``lectionary``; ``lection.45`` never grants ``lection``.
    """
    if held == WILDCARD:
        return True
    return query == held or query.startswith(held + SEPARATOR)


@dataclass(frozen=True)
class PermissionSlug:
    """Dot-separated permission path, e.g. ``lection.45.quiz``."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise InvalidReference("permission", self.value, "slug must not be empty")

    def grants(self, query: str) -> bool:
        return slug_grants(self.value, query)

    def __str__(self) -> str:
        return self.value
