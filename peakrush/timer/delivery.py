"""At-most-once cue delivery.

One tracker replaces every ad hoc "already played" flag.  It answers a
single question per cue: may this key be delivered now?

Two suppression layers apply:

- window: a key delivered less than ``tolerance`` seconds ago is a
  duplicate, whatever its kind;
- once per workout: set-completion and workout-complete keys never
  repeat, except the final set's announcement, which must always get
  its chance to play because nothing follows it.
"""

from __future__ import annotations

from loguru import logger

from .cues import CueType, DedupKey

_ONCE_PER_WORKOUT = (CueType.SET_COMPLETION_WARNING, CueType.WORKOUT_COMPLETE)


class CueDeliveryTracker:
    def __init__(self, total_sets: int) -> None:
        self._total_sets = total_sets
        self._delivered: dict[DedupKey, float] = {}

    def is_exempt(self, dedup_key: DedupKey) -> bool:
        cue_type, index = dedup_key
        return cue_type is CueType.SET_COMPLETION_WARNING and index == self._total_sets

    def last_delivered_at(self, dedup_key: DedupKey) -> float | None:
        return self._delivered.get(dedup_key)

    def should_deliver(self, dedup_key: DedupKey, now: float, tolerance: float) -> bool:
        last = self._delivered.get(dedup_key)
        if last is None:
            return True
        if now - last < tolerance:
            logger.debug(
                f"Suppressing duplicate cue {_describe(dedup_key)}: "
                f"delivered {now - last:.2f}s ago"
            )
            return False
        if dedup_key[0] in _ONCE_PER_WORKOUT and not self.is_exempt(dedup_key):
            logger.debug(f"Suppressing cue {_describe(dedup_key)}: already delivered")
            return False
        return True

    def record_delivered(self, dedup_key: DedupKey, now: float) -> None:
        self._delivered[dedup_key] = now

    def clear(self) -> None:
        self._delivered.clear()

    def __len__(self) -> int:
        return len(self._delivered)


def _describe(dedup_key: DedupKey) -> str:
    cue_type, index = dedup_key
    return f"{cue_type.value}#{index}"
