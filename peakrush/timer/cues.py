"""Cue scheduling.

``schedule()`` turns a workout position into the complete list of cues
still ahead, each pinned to an absolute due time.  The list is always
regenerated wholesale; callers drop the previous list instead of
patching it.

Boundaries are numbered ``k = 1 .. 2·total_sets`` and sit at elapsed
``k·D``.  Odd ``k`` is the switch inside a set, even ``k`` ends set
``k/2``, and the last one also ends the workout.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .config import CueTiming, WorkoutConfig
from .projector import WorkoutState, intensity_for_phase


class CueType(Enum):
    PHASE_TRANSITION_WARNING = "phase_transition_warning"
    SET_COMPLETION_WARNING = "set_completion_warning"
    WORKOUT_COMPLETE = "workout_complete"

    @property
    def priority(self) -> int:
        return _PRIORITY[self]


_PRIORITY: dict[CueType, int] = {
    CueType.PHASE_TRANSITION_WARNING: 0,
    CueType.SET_COMPLETION_WARNING: 1,
    CueType.WORKOUT_COMPLETE: 1,
}

# Equal due time and priority: announce the set before the workout ends.
_KIND_ORDER: dict[CueType, int] = {
    CueType.PHASE_TRANSITION_WARNING: 0,
    CueType.SET_COMPLETION_WARNING: 1,
    CueType.WORKOUT_COMPLETE: 2,
}

WORKOUT_COMPLETE_TITLE = "Workout Complete!"

DedupKey = tuple[CueType, int]


@dataclass(frozen=True)
class CueDescriptor:
    """A cue pinned to the timeline.

    ``boundary`` and ``set_index`` only order and classify the cue.  What
    gets announced is re-derived from live state at delivery.
    """

    type: CueType
    boundary: int
    set_index: int
    lead_seconds: float
    absolute_due_at: float

    @property
    def priority(self) -> int:
        return self.type.priority

    @property
    def dedup_key(self) -> DedupKey:
        """Key as scheduled.  Delivery uses :func:`live_dedup_key`."""
        return (self.type, _logical_index(self.type, self.boundary, self.set_index))

    @property
    def sort_key(self) -> tuple:
        return (self.absolute_due_at, -self.priority, _KIND_ORDER[self.type])


def _logical_index(cue_type: CueType, boundary: int, set_index: int) -> int:
    if cue_type is CueType.PHASE_TRANSITION_WARNING:
        return boundary
    if cue_type is CueType.SET_COMPLETION_WARNING:
        return set_index
    return 0


def live_dedup_key(cue_type: CueType, live: WorkoutState) -> DedupKey:
    """Dedup key derived from the state at delivery time."""
    if cue_type is CueType.PHASE_TRANSITION_WARNING:
        return (cue_type, live.phase_index + 1)
    if cue_type is CueType.SET_COMPLETION_WARNING:
        return (cue_type, live.set_index)
    return (cue_type, 0)


def payload_text(cue_type: CueType, config: WorkoutConfig, live: WorkoutState) -> str:
    if cue_type is CueType.SET_COMPLETION_WARNING:
        return f"Set {live.set_index} completing in 3, 2, 1, 0"
    if cue_type is CueType.PHASE_TRANSITION_WARNING:
        upcoming = intensity_for_phase(config, live.phase_index + 1)
        return f"{upcoming.label} intensity next"
    return f"You've completed all {config.total_sets} sets. Great job!"


def _boundary_cues(config: WorkoutConfig, boundary: int, timing: CueTiming):
    """Yield ``(type, set_index, lead)`` for the cues at one boundary."""
    set_index = (boundary + 1) // 2
    if boundary % 2 == 1:
        yield CueType.PHASE_TRANSITION_WARNING, set_index, timing.warning_lead_seconds
        return
    yield CueType.SET_COMPLETION_WARNING, set_index, timing.set_completion_lead_seconds
    if boundary == config.phase_count:
        yield CueType.WORKOUT_COMPLETE, set_index, -timing.completion_delay_seconds


def coalesce(cues: list[CueDescriptor], window: float) -> list[CueDescriptor]:
    """Drop lower-priority cues that fall within *window* of a higher one.

    Equal-priority neighbours are distinct events and are both kept.
    *cues* must already be sorted by ``sort_key``.
    """
    kept: list[CueDescriptor] = []
    for cue in cues:
        if kept and cue.absolute_due_at - kept[-1].absolute_due_at < window:
            previous = kept[-1]
            if cue.priority < previous.priority:
                continue
            if cue.priority > previous.priority:
                kept[-1] = cue
                # The promoted cue may now shadow an earlier low-priority one.
                while (
                    len(kept) > 1
                    and kept[-2].priority < cue.priority
                    and cue.absolute_due_at - kept[-2].absolute_due_at < window
                ):
                    del kept[-2]
                continue
        kept.append(cue)
    return kept


def schedule(
    config: WorkoutConfig,
    reference_now: float,
    elapsed_at_reference: float,
    timing: CueTiming | None = None,
) -> list[CueDescriptor]:
    """Every cue still ahead of *elapsed_at_reference*, ordered for delivery.

    Due times are ``reference_now + (b - elapsed) - lead``.  Only cues
    strictly after *reference_now* are returned; anything already due
    belongs to the schedule being replaced.
    """
    timing = timing or CueTiming()
    duration = config.phase_duration_seconds
    first_boundary = max(1, int(math.floor(elapsed_at_reference / duration)) + 1)

    cues: list[CueDescriptor] = []
    for boundary in range(first_boundary, config.phase_count + 1):
        offset = boundary * duration - elapsed_at_reference
        for cue_type, set_index, lead in _boundary_cues(config, boundary, timing):
            due_at = reference_now + offset - lead
            if due_at <= reference_now:
                continue
            cues.append(
                CueDescriptor(
                    type=cue_type,
                    boundary=boundary,
                    set_index=set_index,
                    lead_seconds=lead,
                    absolute_due_at=due_at,
                )
            )

    cues.sort(key=lambda c: c.sort_key)
    return coalesce(cues, timing.delivery_tolerance_seconds)
