import time
from typing import Callable

class FrameClock:
    """
    Monotonic clock for the render loop.

    Elapsed time drives scene animation; millisecond timestamps tag camera
    frames. Both come from the same injectable source so tests can step it.
    """
    __slots__ = ("_now", "_start", "_last_ms")

    def __init__(self, now_func: Callable[[], float] = time.monotonic):
        self._now = now_func
        self._start: float = now_func()
        self._last_ms: int = -1

    @property
    def elapsed_s(self) -> float:
        return self._now() - self._start

    def timestamp_ms(self) -> int:
        """Milliseconds since the clock started, strictly increasing across calls."""
        ms = int((self._now() - self._start) * 1_000)
        # Two frames grabbed within the same millisecond still get distinct stamps
        if ms <= self._last_ms:
            ms = self._last_ms + 1
        self._last_ms = ms
        return ms
