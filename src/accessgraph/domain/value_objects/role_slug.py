"""Role slug derivation."""

import re
from collections.abc import Iterator

MAX_SLUG_LENGTH = 32

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lowercase, collapse every non-alphanumeric run into a single dash."""
    candidate = _SLUG_PATTERN.sub("-", value.lower()).strip("-")
    return re.sub(r"-{2,}", "-", candidate)


def canonical_slug(value: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Slug a role named ``value`` is stored under, before any uniqueness suffix."""
    return slugify(value)[:max_length]


def unique_slug_candidates(base: str, max_length: int = MAX_SLUG_LENGTH) -> Iterator[str]:
    """Yield ``base``, ``base-1``, ``base-2``, ... each fitting ``max_length``."""
    yield base[:max_length]
    suffix = 1
    while True:
        tail = f"-{suffix}"
        yield base[: max_length - len(tail)] + tail
        suffix += 1
