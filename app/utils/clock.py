from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC now, the form Mongo hands datetimes back in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
