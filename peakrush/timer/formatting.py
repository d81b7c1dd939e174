"""``MM:SS`` formatting for countdown displays."""

from __future__ import annotations

import math


def format_time(minutes: int, seconds: int) -> str:
    return f"{minutes:02d}:{seconds:02d}"


def format_seconds(total_seconds: float) -> str:
    """Format a countdown, rounding partial seconds up.

    A phase with 9.2 s left reads ``00:10`` so the display only reaches
    ``00:00`` when the phase is actually over.
    """
    whole = max(0, int(math.ceil(round(total_seconds, 6))))
    return format_time(whole // 60, whole % 60)
