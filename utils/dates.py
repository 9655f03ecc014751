from datetime import datetime, timezone


def utcnow():
    """Current UTC time as a naive datetime (how timestamps are stored)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value):
    """Convert an aware datetime to naive UTC; naive values are returned unchanged."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
