"""Wall-clock time in milliseconds."""

import time


def get_millis() -> int:
    """Return milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000