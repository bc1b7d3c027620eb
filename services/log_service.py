"""
Log service: build and maintain a room's activity log

The log is newest-first. Entry ids are creation times in epoch-millis,
so they double as the recency key when array order can't be trusted
(e.g. after the newest entry was deleted).
"""
from datetime import datetime
from typing import List, Optional

from models import LogEntry

MAX_LOG_ENTRIES = 20
DEFAULT_TIMESTAMP_FORMAT = "%m/%d/%Y, %I:%M:%S %p"


def format_timestamp(now_ms: int, fmt: str = DEFAULT_TIMESTAMP_FORMAT) -> str:
    """Human-readable local time for an epoch-millis value."""
    return datetime.fromtimestamp(now_ms / 1000).strftime(fmt)


def make_entry(now_ms: int, count: int, username: str, fmt: str = DEFAULT_TIMESTAMP_FORMAT) -> LogEntry:
    return LogEntry(
        id=str(now_ms),
        timestamp=format_timestamp(now_ms, fmt),
        count=count,
        username=username,
    )


def prepend_entry(log: List[LogEntry], entry: LogEntry, limit: int = MAX_LOG_ENTRIES) -> List[LogEntry]:
    """
    Put a new entry on top of the log and drop whatever falls past `limit`

    Dropped entries are not archived anywhere.
    """
    return ([entry] + list(log))[:limit]


def find_entry_index(log: List[LogEntry], entry_id: str) -> Optional[int]:
    for index, entry in enumerate(log):
        if entry.id == entry_id:
            return index
    return None


def _entry_time(entry: LogEntry) -> int:
    try:
        return int(entry.id)
    except ValueError:
        # Not a timestamp id; sorts below every real entry
        return 0


def latest_increment_time(log: List[LogEntry]) -> int:
    """
    Creation time of the most recent remaining entry

    Compares id values rather than taking log[0].

    Returns:
        The numerically largest id, or 0 for an empty log
    """
    if not log:
        return 0
    return max(_entry_time(entry) for entry in log)
