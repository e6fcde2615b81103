"""
Time helpers shared by the store, the engine's trend bucketing and the
service layer.
"""

from __future__ import annotations

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    Naive datetimes are assumed to already be in UTC (SQLite stores
    timestamps without an offset when the writer omitted one).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_day(value: datetime) -> date:
    """Calendar day (UTC) a timestamp falls on."""
    return ensure_utc(value).date()


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z`` for UTC.

    Args:
        raw: e.g. ``"2026-03-01T12:00:00Z"``, ``"2026-03-01 12:00:00+00:00"``
            or a bare date ``"2026-03-01"`` (midnight UTC).

    Returns:
        Aware UTC ``datetime``.

    Raises:
        ValueError: If ``raw`` is not a recognisable ISO-8601 value.
    """
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))
