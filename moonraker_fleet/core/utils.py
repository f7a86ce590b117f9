"""Core utility functions shared across modules."""

from __future__ import annotations

import math
from typing import Any, Optional


def safe_float(value: Any) -> Optional[float]:
    """Return ``value`` as a float, or ``None`` when it is not numeric.

    Booleans are rejected so that a stray ``true`` never reads as ``1.0``,
    and NaN or infinite values are treated as missing.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(numeric):
        return None
    return numeric


def clamp_non_negative(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return max(value, 0.0)


def format_duration(seconds: float) -> str:
    """Format a duration in seconds for display.

    Returns ``"NaN"`` for NaN input and ``"N/A"`` for negative or infinite
    input. Durations under an hour render as ``MM:SS``; longer ones as
    ``HH:MM:SS`` with the hour field growing past 24 rather than wrapping.
    Fractional seconds are truncated.

    Examples:
        >>> format_duration(59)
        '00:59'
        >>> format_duration(3600)
        '01:00:00'
        >>> format_duration(90000)
        '25:00:00'
    """
    if math.isnan(seconds):
        return "NaN"
    if seconds < 0 or math.isinf(seconds):
        return "N/A"

    total_seconds = int(seconds)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours == 0:
        return f"{minutes:02d}:{secs:02d}"
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
