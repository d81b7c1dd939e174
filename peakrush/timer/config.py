"""Immutable workout configuration and cue tuning.

``WorkoutConfig`` is fixed once a workout begins; ``CueTiming`` holds the
lead times and windows that were tuned empirically per interval length,
so they are exposed rather than hard-coded.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import ConfigurationError


class Intensity(Enum):
    LOW = "low"
    HIGH = "high"

    @property
    def opposite(self) -> Intensity:
        return Intensity.HIGH if self is Intensity.LOW else Intensity.LOW

    @property
    def label(self) -> str:
        return self.value.capitalize()


# ── defaults ──────────────────────────────────────────────────────────────

WARNING_LEAD_SECONDS = 3.0
SET_COMPLETION_LEAD_SECONDS = 5.0
COMPLETION_DELAY_SECONDS = 0.0
BRIEF_INTERRUPTION_THRESHOLD_SECONDS = 3.0
DELIVERY_TOLERANCE_SECONDS = 10.0


def _require_number(field: str, value: object) -> None:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(field, value, "must be a number")


@dataclass(frozen=True)
class WorkoutConfig:
    """Phase duration, number of sets and the intensity each set opens with.

    A set is two phases: ``start_intensity`` followed by its opposite.
    """

    phase_duration_seconds: int
    total_sets: int
    start_intensity: Intensity = Intensity.LOW

    def __post_init__(self) -> None:
        _require_number("phase_duration_seconds", self.phase_duration_seconds)
        _require_number("total_sets", self.total_sets)
        if self.phase_duration_seconds <= 0:
            raise ConfigurationError(
                "phase_duration_seconds", self.phase_duration_seconds, "must be > 0"
            )
        if int(self.total_sets) != self.total_sets:
            raise ConfigurationError("total_sets", self.total_sets, "must be an integer")
        if self.total_sets < 1:
            raise ConfigurationError("total_sets", self.total_sets, "must be >= 1")
        if not isinstance(self.start_intensity, Intensity):
            raise ConfigurationError(
                "start_intensity", self.start_intensity, "must be an Intensity"
            )

    @classmethod
    def from_minutes_seconds(
        cls,
        minutes: int,
        seconds: int,
        sets: int,
        start_intensity: Intensity = Intensity.LOW,
    ) -> WorkoutConfig:
        """Build from the ``MM:SS`` form a phase picker produces."""
        return cls(
            phase_duration_seconds=minutes * 60 + seconds,
            total_sets=sets,
            start_intensity=start_intensity,
        )

    @property
    def phase_count(self) -> int:
        return 2 * self.total_sets

    @property
    def total_duration_seconds(self) -> int:
        return self.phase_duration_seconds * self.phase_count


@dataclass(frozen=True)
class CueTiming:
    """Tunable lead times and windows for cue scheduling and delivery."""

    warning_lead_seconds: float = WARNING_LEAD_SECONDS
    set_completion_lead_seconds: float = SET_COMPLETION_LEAD_SECONDS
    completion_delay_seconds: float = COMPLETION_DELAY_SECONDS
    brief_interruption_threshold_seconds: float = BRIEF_INTERRUPTION_THRESHOLD_SECONDS
    delivery_tolerance_seconds: float = DELIVERY_TOLERANCE_SECONDS

    def __post_init__(self) -> None:
        for name in (
            "warning_lead_seconds",
            "set_completion_lead_seconds",
            "completion_delay_seconds",
            "brief_interruption_threshold_seconds",
            "delivery_tolerance_seconds",
        ):
            value = getattr(self, name)
            _require_number(name, value)
            if value < 0:
                raise ConfigurationError(name, value, "must be >= 0")
