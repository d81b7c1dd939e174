"""Error types for the interval timer core.

Only configuration problems are raised.  Everything that can go wrong
while a workout is running (late ticks, clock jumps, stale schedules) is
resolved by fallback rules inside the engine and logged instead.
"""


class TimerError(Exception):
    """Base exception for the timer core."""

    pass


class ConfigurationError(TimerError, ValueError):
    """Raised when a workout or cue-timing configuration is invalid.

    Attributes:
        field: Name of the offending field
        value: The rejected value
    """

    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}={value!r}: {reason}")
