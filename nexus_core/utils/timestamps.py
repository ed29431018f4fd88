"""Timestamp helpers."""

from datetime import datetime, timezone

from ..constants import TRANSCRIPT_TIME_FORMAT


def local_timestamp(dt: datetime) -> str:
    """Format ``dt`` in the host's local time zone (Polish style)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone().strftime(TRANSCRIPT_TIME_FORMAT)
