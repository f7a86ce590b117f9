"""Fleet status derivation for Moonraker-driven 3D printers."""

from .fleet import aggregate, derive_fleet, derive_printer
from .job_progress import estimate_job
from .pause_policy import describe_pause, evaluate_pause
from .printer_state import classify_printer
from .telemetry_normalizer import SnapshotFormatError, normalize_printer, normalize_snapshot

__all__ = [
    "SnapshotFormatError",
    "aggregate",
    "classify_printer",
    "derive_fleet",
    "derive_printer",
    "describe_pause",
    "estimate_job",
    "evaluate_pause",
    "normalize_printer",
    "normalize_snapshot",
]
