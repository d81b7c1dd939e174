"""Interval workout state machine for PeakRush.

States
------
IDLE        Not started, or stopped/reset.
RUNNING     Active time is accumulating.
PAUSED      Active time frozen; no cues pending.
COMPLETED   Every phase of every set has elapsed.

Transitions
-----------
IDLE → RUNNING                  (start)
RUNNING → PAUSED                (pause)
PAUSED → RUNNING                (resume)
RUNNING → COMPLETED             (tick / on_resume observes the end)
Any → IDLE                      (stop / reset)

``suspended`` is orthogonal to the states above: it records that the
host is not delivering regular ticks (backgrounded, throttled).  Active
time keeps accumulating while suspended and the tick source drops to the
coarser ``suspended_tick_interval_ms`` cadence until the host resumes.

Workout state is never stored.  Each call projects the accumulator's
elapsed time through :func:`~peakrush.timer.projector.project`, so a
tick after an hour of silence costs the same as a tick after a second.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable

from loguru import logger
from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .clock import ActiveTimeAccumulator
from .config import CueTiming, WorkoutConfig
from .cues import (
    WORKOUT_COMPLETE_TITLE,
    CueDescriptor,
    CueType,
    live_dedup_key,
    payload_text,
    schedule,
)
from .delivery import CueDeliveryTracker
from .errors import ConfigurationError
from .events import CueFired, StateChanged
from .formatting import format_seconds
from .projector import WorkoutState, project


# ── enums ─────────────────────────────────────────────────────────────────


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 1000
SUSPENDED_TICK_INTERVAL_MS = 5000


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-based interval timer: closed-form state, wall-clock cues.

    Signals
    -------
    state_changed(event: StateChanged)
        Emitted whenever a display value changes.
    cue_fired(event: CueFired)
        Emitted for each cue that survives staleness and dedup checks.
    lifecycle_changed(new_state: TimerState)
        Emitted on every state transition.
    schedule_changed(cues: list[CueDescriptor])
        Emitted when the pending schedule is regenerated or cancelled.
        Handles built from an earlier list are stale from this point.
    """

    state_changed = pyqtSignal(object)
    cue_fired = pyqtSignal(object)
    lifecycle_changed = pyqtSignal(object)
    schedule_changed = pyqtSignal(object)

    def __init__(
        self,
        config: WorkoutConfig,
        parent: QObject | None = None,
        *,
        timing: CueTiming | None = None,
        clock: Callable[[], float] | None = None,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        suspended_tick_interval_ms: int = SUSPENDED_TICK_INTERVAL_MS,
        drive_ticks: bool = True,
    ) -> None:
        super().__init__(parent)
        if not isinstance(config, WorkoutConfig):
            raise ConfigurationError("config", config, "must be a WorkoutConfig")

        # ── configuration ─────────────────────────────────────────────
        self._config: WorkoutConfig = config
        self._timing: CueTiming = timing or CueTiming()
        self._clock: Callable[[], float] = clock or time.monotonic
        self._drive_ticks: bool = drive_ticks

        # ── lifecycle ─────────────────────────────────────────────────
        self._state: TimerState = TimerState.IDLE
        self._suspended: bool = False
        self._suspended_at: float | None = None

        # ── time bookkeeping ──────────────────────────────────────────
        self._accumulator: ActiveTimeAccumulator | None = None
        self._last_now: float | None = None
        self._last_tick_at: float | None = None

        # ── cues ──────────────────────────────────────────────────────
        self._pending: list[CueDescriptor] = []
        self._tracker = CueDeliveryTracker(config.total_sets)
        self._last_display: tuple | None = None

        # ── Qt tick source ────────────────────────────────────────────
        self._tick_interval_ms: int = tick_interval_ms
        self._suspended_tick_interval_ms: int = suspended_tick_interval_ms
        self._tick_source = QTimer(self)
        self._tick_source.setInterval(tick_interval_ms)
        self._tick_source.timeout.connect(self._on_tick_source)
        self._tick_source_starts: int = 0

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def config(self) -> WorkoutConfig:
        return self._config

    @property
    def timing(self) -> CueTiming:
        return self._timing

    @property
    def suspended(self) -> bool:
        return self._suspended

    @property
    def is_running(self) -> bool:
        return self._state == TimerState.RUNNING

    @property
    def elapsed_seconds(self) -> float:
        """Active seconds as of the last observed ``now``."""
        if self._accumulator is None or self._last_now is None:
            return 0.0
        return self._accumulator.elapsed(self._last_now)

    @property
    def workout_state(self) -> WorkoutState:
        """Canonical state as of the last observed ``now``."""
        return project(self._config, self.elapsed_seconds)

    @property
    def pending_cues(self) -> list[CueDescriptor]:
        return list(self._pending)

    @property
    def tick_source_active(self) -> bool:
        return self._tick_source.isActive()

    @property
    def tick_interval_ms(self) -> int:
        """Current tick cadence; coarser while suspended."""
        return self._tick_source.interval()

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, now: float | None = None) -> None:
        """Begin the workout.  Only valid from IDLE."""
        if self._state != TimerState.IDLE:
            return
        now = self._observe(now)
        self._accumulator = ActiveTimeAccumulator.started_at(now)
        self._tracker.clear()
        self._suspended = False
        self._suspended_at = None
        self._last_tick_at = now
        self._last_display = None

        logger.info(
            f"Starting workout: {self._config.total_sets} sets of "
            f"{self._config.phase_duration_seconds}s phases, "
            f"{self._config.start_intensity.value} first"
        )
        self._set_state(TimerState.RUNNING)
        self._reschedule(now)
        self._start_tick_source()
        self._publish_state(self._project(now))

    def pause(self, now: float | None = None) -> None:
        """Freeze active time.  Pending cues are cancelled."""
        if self._state != TimerState.RUNNING:
            return
        now = self._observe(now)
        self._advance(now)
        if self._state != TimerState.RUNNING:
            return

        self._accumulator.pause(now)
        self._tick_source.stop()
        self._cancel_schedule()
        logger.info(f"Paused at {self._accumulator.accumulated_seconds:.1f}s active")
        self._set_state(TimerState.PAUSED)

    def resume(self, now: float | None = None) -> None:
        """Resume from PAUSED with a fresh schedule."""
        if self._state != TimerState.PAUSED:
            return
        now = self._observe(now)
        self._accumulator.resume(now)
        self._last_tick_at = now

        logger.info(f"Resumed at {self._accumulator.accumulated_seconds:.1f}s active")
        self._set_state(TimerState.RUNNING)
        self._reschedule(now)
        self._start_tick_source()
        self._publish_state(self._project(now))

    def stop(self, now: float | None = None) -> None:
        """Abandon the workout and return to IDLE."""
        if self._state == TimerState.IDLE:
            return
        if now is not None:
            self._observe(now)
        self._tick_source.stop()
        self._cancel_schedule()
        self._accumulator = None
        self._tick_source.setInterval(self._tick_interval_ms)
        self._tracker.clear()
        self._suspended = False
        self._suspended_at = None
        self._last_tick_at = None
        self._last_display = None
        logger.info("Workout stopped")
        self._set_state(TimerState.IDLE)

    def reset(self, now: float | None = None) -> None:
        self.stop(now)

    def tick(self, now: float | None = None) -> None:
        """Recompute state and deliver whatever cues are due."""
        if self._state != TimerState.RUNNING:
            return
        now = self._observe(now)
        gap = now - self._last_tick_at if self._last_tick_at is not None else 0.0
        self._last_tick_at = now
        if (
            not self._suspended
            and gap >= self._timing.brief_interruption_threshold_seconds
        ):
            logger.debug(f"Tick arrived {gap:.2f}s after the previous one")
        self._advance(now)

    def on_suspend(self, now: float | None = None) -> None:
        """The host stops ticking.  Active time keeps running."""
        if self._state in (TimerState.IDLE, TimerState.COMPLETED):
            return
        now = self._observe(now)
        self._suspended = True
        self._suspended_at = now
        self._tick_source.setInterval(self._suspended_tick_interval_ms)
        if self._state != TimerState.RUNNING:
            return

        self._advance(now)
        if self._state == TimerState.RUNNING:
            self._reschedule(now)
            logger.info(
                f"Suspended with {len(self._pending)} cues scheduled "
                f"(set {self.workout_state.set_index}/{self._config.total_sets})"
            )

    def on_resume(self, now: float | None = None) -> None:
        """The host ticks again.  State is recomputed, never replayed."""
        if not self._suspended:
            return
        now = self._observe(now)
        gap = now - self._suspended_at if self._suspended_at is not None else 0.0
        self._suspended = False
        self._suspended_at = None
        self._tick_source.setInterval(self._tick_interval_ms)
        if self._state != TimerState.RUNNING:
            return

        self._last_tick_at = now
        if gap < self._timing.brief_interruption_threshold_seconds:
            # Schedule and tick source are still valid; the accumulator
            # never stopped.
            logger.debug(f"Brief interruption ({gap:.2f}s), keeping tick source")
            self._advance(now)
            return

        logger.info(f"Resumed after {gap:.1f}s suspended")
        self._advance(now)
        if self._state == TimerState.RUNNING:
            self._reschedule(now)
            self._restart_tick_source()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — time
    # ══════════════════════════════════════════════════════════════════

    def _observe(self, now: float | None) -> float:
        """Read the clock if needed and clamp any regression."""
        if now is None:
            now = self._clock()
        if self._last_now is not None and now < self._last_now:
            logger.warning(
                f"Clock moved backwards by {self._last_now - now:.3f}s; "
                "clamping to last observed time"
            )
            now = self._last_now
        self._last_now = now
        return now

    def _project(self, now: float) -> WorkoutState:
        return project(self._config, self._accumulator.elapsed(now))

    def _advance(self, now: float) -> None:
        live = self._project(now)
        self._publish_state(live)
        self._deliver_due(now, live)
        if live.completed:
            self._complete(now, live)

    def _complete(self, now: float, live: WorkoutState) -> None:
        # The final set's announcement can fall due before that set is live
        # and be dropped; it still plays, ahead of the completion cue.
        final_set_key = (CueType.SET_COMPLETION_WARNING, self._config.total_sets)
        if self._tracker.last_delivered_at(final_set_key) is None:
            self._fire(CueType.SET_COMPLETION_WARNING, now, live)
        self._fire(CueType.WORKOUT_COMPLETE, now, live)
        self._accumulator.pause(now)
        self._tick_source.stop()
        self._cancel_schedule()
        logger.info(f"Workout complete after {live.elapsed_seconds:.1f}s active")
        self._set_state(TimerState.COMPLETED)

    def _set_state(self, new_state: TimerState) -> None:
        self._state = new_state
        self.lifecycle_changed.emit(new_state)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — cues
    # ══════════════════════════════════════════════════════════════════

    def _reschedule(self, now: float) -> None:
        elapsed = self._accumulator.elapsed(now)
        self._pending = schedule(self._config, now, elapsed, self._timing)
        logger.debug(f"Scheduled {len(self._pending)} cues from {elapsed:.1f}s active")
        self.schedule_changed.emit(list(self._pending))

    def _cancel_schedule(self) -> None:
        if not self._pending:
            return
        self._pending = []
        self.schedule_changed.emit([])

    def _deliver_due(self, now: float, live: WorkoutState) -> None:
        """Deliver due cues against *live* state.

        After a long gap several cues can be due at once.  Announcements
        whose moment has passed are dropped rather than stacked: a phase
        warning only plays while its phase is still running, and only the
        most recent set announcement is considered, and only if its set
        is the live one.
        """
        due = [c for c in self._pending if c.absolute_due_at <= now]
        if not due:
            return
        self._pending = [c for c in self._pending if c.absolute_due_at > now]

        set_cues = [c for c in due if c.type == CueType.SET_COMPLETION_WARNING]
        latest_set_cue = set_cues[-1] if set_cues else None

        for cue in due:
            if cue.type == CueType.WORKOUT_COMPLETE:
                continue  # fired by _complete
            elif cue.type == CueType.PHASE_TRANSITION_WARNING:
                if live.completed or live.phase_index + 1 != cue.boundary:
                    logger.debug(f"Dropping stale phase warning for boundary {cue.boundary}")
                    continue
            elif cue.type == CueType.SET_COMPLETION_WARNING:
                if cue is not latest_set_cue:
                    logger.debug(
                        f"Dropping superseded announcement scheduled for set {cue.set_index}"
                    )
                    continue
                if cue.set_index != live.set_index:
                    logger.debug(
                        f"Dropping announcement scheduled for set {cue.set_index}; "
                        f"live set is {live.set_index}"
                    )
                    continue
            self._fire(cue.type, now, live)

    def _fire(self, cue_type: CueType, now: float, live: WorkoutState) -> bool:
        dedup_key = live_dedup_key(cue_type, live)
        if not self._tracker.should_deliver(
            dedup_key, now, self._timing.delivery_tolerance_seconds
        ):
            return False
        self._tracker.record_delivered(dedup_key, now)

        event = CueFired(
            type=cue_type,
            payload_text=payload_text(cue_type, self._config, live),
            dedup_key=dedup_key,
            fired_at=now,
            title=WORKOUT_COMPLETE_TITLE if cue_type == CueType.WORKOUT_COMPLETE else "",
        )
        logger.info(f"Cue {cue_type.value}: {event.payload_text}")
        self.cue_fired.emit(event)
        return True

    def _publish_state(self, live: WorkoutState) -> None:
        values = live.display_values
        if values == self._last_display:
            return
        self._last_display = values
        self.state_changed.emit(StateChanged(
            set_index=live.set_index,
            total_sets=live.total_sets,
            intensity=live.intensity,
            phase_remaining_seconds=live.phase_remaining_seconds,
            completed=live.completed,
            phase_index=live.phase_index,
            elapsed_seconds=live.elapsed_seconds,
            display_text=format_seconds(live.phase_remaining_seconds),
        ))

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — tick source
    # ══════════════════════════════════════════════════════════════════

    def _start_tick_source(self) -> None:
        if not self._drive_ticks:
            return
        self._tick_source.start()
        self._tick_source_starts += 1

    def _restart_tick_source(self) -> None:
        self._tick_source.stop()
        self._start_tick_source()

    def _on_tick_source(self) -> None:
        self.tick()
