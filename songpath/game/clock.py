"""Frame clock for the per-frame update loop."""

import time


class GameClock:
    """Tracks delta and elapsed time between rendered frames.

    The delta is capped so a stalled frame skips time instead of feeding a
    huge step into the per-frame updates.
    """

    def __init__(self, max_delta: float = 0.1):
        self.max_delta = max_delta
        self.delta_time = 0.0
        self.elapsed_time = 0.0
        self.running = False
        self._last_time = 0.0

    def start(self, timestamp: float | None = None) -> None:
        self._last_time = time.perf_counter() if timestamp is None else timestamp
        self.elapsed_time = 0.0
        self.running = True

    def stop(self) -> None:
        self.running = False

    def tick(self, timestamp: float | None = None) -> float:
        """Advance one frame. ``timestamp`` is in seconds; returns the delta."""
        now = time.perf_counter() if timestamp is None else timestamp
        self.delta_time = min(max(now - self._last_time, 0.0), self.max_delta)
        if self.running:
            self.elapsed_time += self.delta_time
        self._last_time = now
        return self.delta_time
