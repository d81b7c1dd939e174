"""Shared test helpers for PeakRush."""

from peakrush.timer.cues import CueType


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def of_type(self, cue_type: CueType) -> list:
        return [item for item in self.items if item.type == cue_type]

    def clear(self):
        self.items.clear()


class FakeClock:
    """Manually advanced clock; call it to read the current time."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now

    def set(self, value: float) -> float:
        self.now = value
        return self.now


def run_ticks(engine, clock, seconds: float, step: float = 1.0) -> None:
    """Advance the clock by *seconds*, ticking every *step*."""
    target = clock.now + seconds
    while clock.now + step <= target + 1e-9:
        clock.advance(step)
        engine.tick()
    if clock.now < target:
        clock.set(target)
        engine.tick()
