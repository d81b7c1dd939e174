"""Payloads emitted to host sinks."""

from __future__ import annotations

from dataclasses import dataclass

from .config import Intensity
from .cues import CueType, DedupKey


@dataclass(frozen=True)
class StateChanged:
    set_index: int
    total_sets: int
    intensity: Intensity
    phase_remaining_seconds: float
    completed: bool
    phase_index: int
    elapsed_seconds: float
    display_text: str


@dataclass(frozen=True)
class CueFired:
    type: CueType
    payload_text: str
    dedup_key: DedupKey
    fired_at: float
    title: str = ""

    @property
    def set_index(self) -> int | None:
        """Announced set for set-completion cues, ``None`` otherwise."""
        if self.type is CueType.SET_COMPLETION_WARNING:
            return self.dedup_key[1]
        return None
