"""System clock adapter - Implements Clock protocol with wall-clock seconds."""

import time


class SystemClock:
    """
    Implements Clock protocol via time.time().

    Never returns a value lower than one it already returned, even if the
    wall clock steps backwards.
    """

    def __init__(self) -> None:
        self._last = 0

    def now(self) -> int:
        self._last = max(self._last, int(time.time()))
        return self._last
