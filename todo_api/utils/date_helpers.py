# todo_api/utils/date_helpers.py

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    # naive UTC, the way DateTime columns store it
    return datetime.now(timezone.utc).replace(tzinfo=None)


def next_timestamp(previous: Optional[datetime] = None) -> datetime:
    """
    Current UTC time, pushed one microsecond past `previous` when the clock
    has not moved on (coarse clocks can repeat a value between two writes).
    """
    now = utc_now()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def parse_due_date(value: Optional[str]) -> Optional[date]:
    """
    Calendar date of an ISO-8601 date or datetime string, or None when the
    string does not parse. Time of day and offset are dropped.
    """
    if not value:
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def format_due_date(value: Optional[str]) -> Optional[str]:
    """
    Storage form of a due date: plain YYYY-MM-DD, the calendar date the
    client wrote (offsets are not converted). None for empty input.
    """
    parsed = parse_due_date(value)
    return parsed.isoformat() if parsed else None


def format_timestamp(value: datetime) -> str:
    # stored naive UTC -> "...Z"
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"
