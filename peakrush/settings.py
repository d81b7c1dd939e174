"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/PeakRush/settings.json

Usage::

    settings = load_settings()
    settings.total_sets = 8
    save_settings(settings)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from loguru import logger

from .timer.config import (
    BRIEF_INTERRUPTION_THRESHOLD_SECONDS,
    COMPLETION_DELAY_SECONDS,
    DELIVERY_TOLERANCE_SECONDS,
    SET_COMPLETION_LEAD_SECONDS,
    WARNING_LEAD_SECONDS,
    CueTiming,
    Intensity,
    WorkoutConfig,
)
from .timer.engine import SUSPENDED_TICK_INTERVAL_MS, TICK_INTERVAL_MS
from .timer.errors import ConfigurationError


APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "PeakRush"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── workout ───────────────────────────────────────────────────────
    phase_duration_seconds: int = 30
    total_sets: int = 8
    start_intensity: str = Intensity.LOW.value

    # ── cues ──────────────────────────────────────────────────────────
    warning_lead_seconds: float = WARNING_LEAD_SECONDS
    set_completion_lead_seconds: float = SET_COMPLETION_LEAD_SECONDS
    completion_delay_seconds: float = COMPLETION_DELAY_SECONDS
    brief_interruption_threshold_seconds: float = BRIEF_INTERRUPTION_THRESHOLD_SECONDS
    delivery_tolerance_seconds: float = DELIVERY_TOLERANCE_SECONDS

    # ── host ──────────────────────────────────────────────────────────
    tick_interval_ms: int = TICK_INTERVAL_MS
    suspended_tick_interval_ms: int = SUSPENDED_TICK_INTERVAL_MS
    log_level: str = "INFO"

    def workout_config(self) -> WorkoutConfig:
        """Validated workout configuration; raises ``ConfigurationError``."""
        return WorkoutConfig(
            phase_duration_seconds=self.phase_duration_seconds,
            total_sets=self.total_sets,
            start_intensity=_parse_intensity(self.start_intensity),
        )

    def cue_timing(self) -> CueTiming:
        return CueTiming(
            warning_lead_seconds=self.warning_lead_seconds,
            set_completion_lead_seconds=self.set_completion_lead_seconds,
            completion_delay_seconds=self.completion_delay_seconds,
            brief_interruption_threshold_seconds=self.brief_interruption_threshold_seconds,
            delivery_tolerance_seconds=self.delivery_tolerance_seconds,
        )


def _parse_intensity(value: str) -> Intensity:
    try:
        return Intensity(str(value).lower())
    except ValueError:
        raise ConfigurationError("start_intensity", value, "must be 'low' or 'high'") from None


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Could not read settings from {SETTINGS_PATH}: {e}")
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
