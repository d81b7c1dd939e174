"""Closed-form projection of elapsed active time onto workout state.

``project(config, elapsed)`` is the only way workout state is produced.
Nothing is carried between calls, so the same inputs always give the
same state and a long suspension costs exactly one call to catch up.

Phase layout for ``D = phase_duration_seconds``::

    phase_index = floor(elapsed / D)          0 .. 2·total_sets
    set_index   = phase_index // 2 + 1
    intensity   = start_intensity  if phase_index is even
                  opposite         if phase_index is odd
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .config import Intensity, WorkoutConfig


@dataclass(frozen=True)
class WorkoutState:
    set_index: int
    total_sets: int
    phase_index: int
    intensity: Intensity
    phase_remaining_seconds: float
    phase_elapsed_seconds: float
    elapsed_seconds: float
    total_remaining_seconds: float
    completed: bool

    @property
    def is_last_phase_of_set(self) -> bool:
        return self.phase_index % 2 == 1

    @property
    def display_values(self) -> tuple:
        """The fields a display depends on; used for change detection."""
        return (
            self.set_index,
            self.intensity,
            self.phase_remaining_seconds,
            self.completed,
        )


def intensity_for_phase(config: WorkoutConfig, phase_index: int) -> Intensity:
    if phase_index % 2 == 0:
        return config.start_intensity
    return config.start_intensity.opposite


def project(config: WorkoutConfig, elapsed_seconds: float) -> WorkoutState:
    """Workout state after *elapsed_seconds* of active time."""
    elapsed = max(0.0, float(elapsed_seconds))
    duration = config.phase_duration_seconds
    max_phases = config.phase_count
    phase_index = min(int(math.floor(elapsed / duration)), max_phases)

    if phase_index >= max_phases:
        return WorkoutState(
            set_index=config.total_sets,
            total_sets=config.total_sets,
            phase_index=max_phases,
            intensity=intensity_for_phase(config, max_phases - 1),
            phase_remaining_seconds=0.0,
            phase_elapsed_seconds=float(duration),
            elapsed_seconds=elapsed,
            total_remaining_seconds=0.0,
            completed=True,
        )

    phase_elapsed = elapsed - phase_index * duration
    return WorkoutState(
        set_index=phase_index // 2 + 1,
        total_sets=config.total_sets,
        phase_index=phase_index,
        intensity=intensity_for_phase(config, phase_index),
        phase_remaining_seconds=duration - phase_elapsed,
        phase_elapsed_seconds=phase_elapsed,
        elapsed_seconds=elapsed,
        total_remaining_seconds=config.total_duration_seconds - elapsed,
        completed=False,
    )
