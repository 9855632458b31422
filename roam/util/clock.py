"""Wall clock abstraction.

Token ages, cookie expiry and rate-limit windows are all measured in whole
UNIX seconds through a ``Clock`` so they can be pinned in tests.
"""

import time


class Clock:
    """System clock."""

    def now(self) -> int:
        """Current UNIX time in seconds."""
        return int(time.time())


class FrozenClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, now: int = 1_700_000_000) -> None:
        self._now = now

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> None:
        self._now += seconds
