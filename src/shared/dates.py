"""Timestamp helpers.

Record dates are stored as UTC strings in ``DATE_FORMAT`` so that DynamoDB
range conditions compare them correctly as plain strings.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

DATE_FORMAT = '%Y-%m-%dT%H:%M:%SZ'

_INPUT_FORMATS = (
    '%Y-%m-%dT%H:%M:%SZ',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%d',
    '%m/%d/%Y',
    '%d.%m.%Y',
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(DATE_FORMAT)


def window_start(days: int, now: Optional[datetime] = None) -> str:
    """Start of a trailing window of ``days`` days, as a stored timestamp."""
    return format_timestamp((now or utc_now()) - timedelta(days=days))


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse a date or datetime string into an aware UTC datetime."""
    if not value or not isinstance(value, str):
        return None

    value = value.strip()
    for fmt in _INPUT_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
