from __future__ import annotations

import time


def now_ns() -> int:
    """Current time as integer nanoseconds since the epoch.

    Note: Wrapped so tests can patch/mock easier.
    """
    return time.time_ns()
