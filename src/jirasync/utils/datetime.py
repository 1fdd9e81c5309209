"""Utilities for datetime handling."""

from datetime import UTC, datetime

# Timestamp layout used by the Jira REST API, e.g. "2019-09-01T12:34:56.000-0500"
JIRA_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"

# "Since the beginning of time" for full (non-incremental) syncs
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """Normalize a datetime to UTC. Naive values are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_iso(dt: datetime) -> str:
    """Convert datetime to ISO format string."""
    return dt.isoformat()


def from_iso(value: str) -> datetime:
    """Parse ISO format string to datetime."""
    # Handle both 'Z' suffix and explicit timezone
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def parse_jira_datetime(value: str) -> datetime:
    """Parse a Jira timestamp into an aware UTC datetime.

    Raises:
        ValueError: If the value does not match JIRA_DATETIME_FORMAT
    """
    return to_utc(datetime.strptime(value, JIRA_DATETIME_FORMAT))
