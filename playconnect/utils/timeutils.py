"""
UTC time helpers
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Aware UTC now"""
    return datetime.now(timezone.utc)


def utcnow_naive() -> datetime:
    """Naive UTC now, for SQL DateTime columns"""
    return utcnow().replace(tzinfo=None)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_naive_utc(value: datetime) -> datetime:
    return as_utc(value).replace(tzinfo=None)


def to_iso_z(value: datetime) -> str:
    """Millisecond ISO-8601 with a ``Z`` suffix, the format event dates are stored in"""
    return as_utc(value).strftime("%Y-%m-%dT%H:%M:%S.") + f"{as_utc(value).microsecond // 1000:03d}Z"


def parse_instant(value: str | datetime) -> datetime:
    """Parse an ISO-8601 instant (a trailing ``Z`` is accepted) into aware UTC"""
    if isinstance(value, datetime):
        return as_utc(value)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))
