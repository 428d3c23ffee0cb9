"""Expiry predicate shared by memberships, delegations and access grants."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(UTC)


def is_active(expires_at: datetime | None, now: datetime) -> bool:
    """A relation is active while it has no expiry or expires strictly after now."""
    return expires_at is None or expires_at > now


def is_expired(expires_at: datetime | None, now: datetime) -> bool:
    return not is_active(expires_at, now)
