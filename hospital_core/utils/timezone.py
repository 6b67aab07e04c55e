from datetime import datetime, timezone


def utcnow() -> datetime:
    """
    Naive UTC timestamp.
    DateTime columns are stored without tzinfo, so comparisons stay naive.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
