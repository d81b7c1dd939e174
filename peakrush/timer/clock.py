"""Active-time accumulator.

Canonical elapsed time is ``accumulated + (now - epoch_start)`` while
running and ``accumulated`` while paused.  The accumulator is only
mutated at pause/resume boundaries; ticks never touch it.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ActiveTimeAccumulator:
    epoch_start: float = 0.0
    accumulated_seconds: float = 0.0
    running: bool = False

    @classmethod
    def started_at(cls, now: float) -> ActiveTimeAccumulator:
        return cls(epoch_start=now, accumulated_seconds=0.0, running=True)

    def elapsed(self, now: float) -> float:
        """Active seconds at *now*.  Never negative, never decreasing."""
        if not self.running:
            return self.accumulated_seconds
        return self.accumulated_seconds + max(0.0, now - self.epoch_start)

    def pause(self, now: float) -> None:
        if not self.running:
            return
        self.accumulated_seconds = self.elapsed(now)
        self.running = False

    def resume(self, now: float) -> None:
        if self.running:
            return
        self.epoch_start = now
        self.running = True
