"""
Timestamps and durations for log lines.
"""

import time
from datetime import datetime

NS_PER_MS = 1_000_000


def formatted_now() -> str:
    """Current local time as RFC 3339 with second precision, UTC as ``Z``."""
    stamp = datetime.now().astimezone().isoformat(timespec='seconds')
    if stamp.endswith('+00:00'):
        stamp = stamp[:-6] + 'Z'
    return stamp


def monotonic_ns() -> int:
    return time.monotonic_ns()


def ms_since(start_ns: int) -> int:
    """Whole milliseconds elapsed since ``start_ns``, truncated."""
    return max(monotonic_ns() - start_ns, 0) // NS_PER_MS
