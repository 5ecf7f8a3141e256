"""Delta clock for frame timing."""

import time

from poseforge.constants import MAX_DELTA_TIME


class DeltaClock:
    """Tracks elapsed time between frames.

    A long gap (stalled render loop, lost GPU context) is clamped to
    MAX_DELTA_TIME so the next tick does not see a huge step.
    """

    def __init__(self, max_delta: float = MAX_DELTA_TIME):
        self.max_delta = max_delta
        self.frame_count = 0
        self._last_time = time.perf_counter()

    def get_delta(self) -> float:
        """Return seconds elapsed since last call, clamped to max_delta."""
        now = time.perf_counter()
        dt = now - self._last_time
        self._last_time = now
        self.frame_count += 1
        return min(max(dt, 0.0), self.max_delta)

    def reset(self) -> None:
        self._last_time = time.perf_counter()
