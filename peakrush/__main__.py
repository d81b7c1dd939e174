"""Allow running PeakRush as a module: python -m peakrush.

A headless host: drives a ``TimerEngine`` from the Qt event loop and
logs every display change and cue until the workout completes.
"""

from __future__ import annotations

import argparse
import sys

from loguru import logger
from PyQt6.QtCore import QCoreApplication

from .logger import setup_logger
from .settings import Settings, load_settings, save_settings
from .timer.engine import TimerEngine, TimerState
from .timer.errors import ConfigurationError
from .timer.events import CueFired, StateChanged


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="peakrush",
        description="Run an interval workout of alternating low/high intensity phases.",
    )
    parser.add_argument("--phase", type=int, help="phase duration in seconds")
    parser.add_argument("--minutes", type=int, help="phase duration, minutes part")
    parser.add_argument("--seconds", type=int, help="phase duration, seconds part")
    parser.add_argument("--sets", type=int, help="number of sets")
    parser.add_argument("--start", choices=("low", "high"), help="intensity each set opens with")
    parser.add_argument("--log-level", help="loguru level (DEBUG, INFO, ...)")
    parser.add_argument("--save", action="store_true", help="remember these values as defaults")
    return parser


def apply_args(settings: Settings, args: argparse.Namespace) -> Settings:
    """Overlay command-line values onto saved settings."""
    if args.phase is not None:
        settings.phase_duration_seconds = args.phase
    elif args.minutes is not None or args.seconds is not None:
        settings.phase_duration_seconds = (args.minutes or 0) * 60 + (args.seconds or 0)
    if args.sets is not None:
        settings.total_sets = args.sets
    if args.start is not None:
        settings.start_intensity = args.start
    if args.log_level:
        settings.log_level = args.log_level
    return settings


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = apply_args(load_settings(), args)
    setup_logger(settings.log_level)

    try:
        config = settings.workout_config()
        timing = settings.cue_timing()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(2)

    if args.save:
        save_settings(settings)

    app = QCoreApplication(sys.argv[:1])
    app.setApplicationName("PeakRush")

    engine = TimerEngine(
        config,
        timing=timing,
        tick_interval_ms=settings.tick_interval_ms,
        suspended_tick_interval_ms=settings.suspended_tick_interval_ms,
    )

    def on_state(event: StateChanged) -> None:
        if event.completed:
            return
        logger.info(
            f"Set {event.set_index}/{event.total_sets} "
            f"{event.intensity.label:<4} {event.display_text}"
        )

    def on_cue(event: CueFired) -> None:
        text = f"{event.title} {event.payload_text}" if event.title else event.payload_text
        logger.success(text)

    def on_lifecycle(state: TimerState) -> None:
        if state == TimerState.COMPLETED:
            app.quit()

    engine.state_changed.connect(on_state)
    engine.cue_fired.connect(on_cue)
    engine.lifecycle_changed.connect(on_lifecycle)
    engine.start()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
