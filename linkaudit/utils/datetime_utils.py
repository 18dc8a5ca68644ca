from datetime import datetime
from typing import Optional


def now_local() -> datetime:
    """Return the current time as a timezone-aware local datetime."""
    return datetime.now().astimezone()


def format_timestamp(value: Optional[datetime]) -> str:
    """Format a datetime as ISO-8601 with offset and second precision.

    Naive datetimes are assumed to be local time. Returns an empty string for None
    so the value can be written straight into a sheet cell.
    """
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat(timespec="seconds")
