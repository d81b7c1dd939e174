"""Timer package."""

from .config import CueTiming, Intensity, WorkoutConfig
from .cues import CueDescriptor, CueType, schedule
from .delivery import CueDeliveryTracker
from .engine import TimerEngine, TimerState, SUSPENDED_TICK_INTERVAL_MS, TICK_INTERVAL_MS
from .errors import ConfigurationError, TimerError
from .events import CueFired, StateChanged
from .projector import WorkoutState, project

__all__ = [
    "TimerEngine",
    "TimerState",
    "TICK_INTERVAL_MS",
    "SUSPENDED_TICK_INTERVAL_MS",
    "WorkoutConfig",
    "CueTiming",
    "Intensity",
    "WorkoutState",
    "project",
    "CueType",
    "CueDescriptor",
    "schedule",
    "CueDeliveryTracker",
    "StateChanged",
    "CueFired",
    "TimerError",
    "ConfigurationError",
]
