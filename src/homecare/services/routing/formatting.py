"""Display helpers for travel durations and distances."""

from __future__ import annotations

import math


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_duration(seconds: float) -> str:
    """Compact duration: "45s", "5m 30s", "5m", "1h 5m", "2h"."""
    if seconds < 60:
        return f"{_round_half_up(seconds)}s"

    minutes = int(seconds // 60)
    remaining_seconds = seconds % 60
    if minutes < 60:
        if remaining_seconds > 0:
            return f"{minutes}m {_round_half_up(remaining_seconds)}s"
        return f"{minutes}m"

    hours = minutes // 60
    remaining_minutes = minutes % 60
    return f"{hours}h {remaining_minutes}m" if remaining_minutes > 0 else f"{hours}h"


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{_round_half_up(meters)}m"
    return f"{meters / 1000:.1f}km"
