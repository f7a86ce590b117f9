"""Core primitives for moonraker-fleet."""

from .models import (
    ActiveJob,
    FleetSummary,
    FleetView,
    GCodeMetadata,
    InactiveJob,
    JobInfo,
    LatestJob,
    NormalizedPrinter,
    PrinterStats,
    PrinterView,
    StateInfo,
    VirtualSD,
)
from .utils import clamp_non_negative, format_duration, safe_float

__all__ = [
    "ActiveJob",
    "FleetSummary",
    "FleetView",
    "GCodeMetadata",
    "InactiveJob",
    "JobInfo",
    "LatestJob",
    "NormalizedPrinter",
    "PrinterStats",
    "PrinterView",
    "StateInfo",
    "VirtualSD",
    "clamp_non_negative",
    "format_duration",
    "safe_float",
]
