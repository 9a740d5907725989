"""Datetime utilities for consistent timezone handling across the application."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as an aware datetime.

    Returns:
        Current datetime in UTC timezone.
    """
    return datetime.now(timezone.utc)


def utc_now_naive() -> datetime:
    """Get current UTC time as naive datetime for database operations.

    Returns:
        Current datetime in UTC as naive datetime (no timezone info).

    Note:
        Columns are TIMESTAMP WITHOUT TIME ZONE, so every stored timestamp goes
        through this function.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_month_naive(now: datetime | None = None) -> datetime:
    """Return the first instant of the month containing ``now`` (naive UTC)."""
    now = now or utc_now_naive()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def epoch_millis(now: datetime | None = None) -> int:
    """Milliseconds since the Unix epoch for ``now`` (defaults to the current time)."""
    now = now or utc_now()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return int(now.timestamp() * 1000)


def to_utc_naive(value: datetime) -> datetime:
    """Convert a datetime to naive UTC. Naive input is assumed to already be UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
