from datetime import date, datetime, timedelta, timezone
from typing import Iterator


def utc_now() -> datetime:
    """Current UTC time, timezone-aware."""
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_iso_millis(value: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision: 2026-10-17T03:05:00.000Z"""
    value = ensure_aware(value).astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (accepts trailing Z) into an aware datetime."""
    if value.endswith("Z") or value.endswith("z"):
        value = value[:-1] + "+00:00"
    return ensure_aware(datetime.fromisoformat(value))


def calendar_day(value: datetime, tz: timezone) -> date:
    """Calendar day containing the instant, in the attendance timezone."""
    return ensure_aware(value).astimezone(tz).date()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day in [start, end] inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
