"""Time helpers for UTC timestamps and the engine's millisecond epoch encoding."""

from datetime import datetime, timedelta, timezone

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Return current UTC datetime with timezone attached."""

    return datetime.now(timezone.utc)


def unix_milli(moment: datetime) -> int:
    """Return whole milliseconds since the Unix epoch, flooring sub-millisecond parts."""

    return (moment - UNIX_EPOCH) // timedelta(milliseconds=1)


def from_unix_milli(ms: int) -> datetime:
    """Return the UTC datetime for a millisecond Unix timestamp.

    Raises OverflowError when the value is outside the datetime range.
    """

    return UNIX_EPOCH + timedelta(milliseconds=ms)
