"""Report-age cutoff using calendar-month arithmetic.

The cutoff subtracts from the month field and lets an out-of-range day spill
into the following month, so March 31 minus six months is October 1 rather
than September 30. This is not the same as a fixed number of days.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone


def subtract_months(moment: datetime, months: int) -> datetime:
    """Move *moment* back by *months* calendar months."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    first_of_month = moment.replace(year=year, month=month + 1, day=1)
    return first_of_month + timedelta(days=moment.day - 1)


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def retention_cutoff(now: datetime, months: int = 6) -> datetime:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return subtract_months(now, months)


def is_expired(created_at: str | None, now: datetime, months: int = 6) -> bool:
    """True when *created_at* is strictly older than the retention cutoff.

    Unparseable timestamps are never expired.
    """
    created = parse_timestamp(created_at)
    if created is None:
        return False
    return created < retention_cutoff(now, months)


def filter_recent(reports: Iterable[dict], now: datetime, months: int = 6) -> list[dict]:
    """Drop reports created before the cutoff, keeping upstream order."""
    return [r for r in reports if not is_expired(r.get("created_at"), now, months)]
