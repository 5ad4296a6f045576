"""Date parsing for upload dates shown by sites."""

from datetime import datetime, timezone


def parse_date_millis(value: str | None, fmt: str = "%Y-%m-%d") -> int:
    """Epoch millis (UTC) of a date string, 0 when missing or unparseable."""
    if not value:
        return 0
    try:
        date = datetime.strptime(value.strip(), fmt)
    except ValueError:
        return 0
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    return int(date.timestamp() * 1000)
