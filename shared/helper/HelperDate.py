"""Normalisation of the date representations found in stored documents."""

from datetime import datetime, timedelta
from typing import Any

import pytz


def format_iso(dt: datetime) -> str:
    """Format a datetime as UTC ISO-8601 with millisecond precision and a ``Z`` suffix.

    Naive datetimes are taken to be UTC, which is how MongoDB hands them out.
    """
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    dt = dt.astimezone(pytz.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def _parse_iso(raw: str) -> datetime | None:
    try:
        return datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def normalize_date(value: Any) -> str | None:
    """Convert a stored date into an ISO-8601 string.

    Accepted inputs:
      - ``None`` → ``None``
      - ``datetime`` → ``"2024-01-01T00:00:00.000Z"``
      - Extended-JSON wrapper ``{"$date": "2024-01-01T00:00:00Z"}``,
        ``{"$date": 1704067200000}`` or ``{"$date": {"$numberLong": "1704067200000"}}``
        → ``"2024-01-01T00:00:00.000Z"``
      - plain strings pass through unchanged

    Args:
        value (Any): The raw date value.

    Returns:
        str | None: The normalised date string, or None when no date is present.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return format_iso(value)
    if isinstance(value, dict):
        if "$date" not in value:
            return None
        inner = value["$date"]
        if isinstance(inner, dict):
            inner = inner.get("$numberLong")
        if isinstance(inner, str) and not inner.lstrip("-").isdigit():
            parsed = _parse_iso(inner)
            return format_iso(parsed) if parsed else inner
        if inner is None:
            return None
        millis = int(inner)
        return format_iso(datetime.fromtimestamp(millis // 1000, tz=pytz.utc) + timedelta(milliseconds=millis % 1000))
    if isinstance(value, str):
        return value
    return str(value)
