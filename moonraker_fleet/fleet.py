"""Fleet-level aggregation and the full derivation pipeline."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Sequence

from .core.models import FleetSummary, FleetView, NormalizedPrinter, PrinterView
from .job_progress import estimate_job
from .pause_policy import describe_pause, evaluate_pause
from .printer_state import classify_printer
from .telemetry_normalizer import normalize_snapshot

__all__ = ["aggregate", "derive_fleet", "derive_printer"]

LOGGER = logging.getLogger(__name__)


def aggregate(printers: Iterable[NormalizedPrinter]) -> FleetSummary:
    """Order printers for display and count them per display label.

    Connected printers come first, disconnected ones last; each group is
    sorted by key. Labels that do not occur have no entry in the counts.
    """
    classified = [(printer, classify_printer(printer)) for printer in printers]

    ordered = sorted(
        classified,
        key=lambda item: (item[1].is_disconnected, item[0].key),
    )

    counts: Dict[str, int] = {}
    for _, info in classified:
        counts[info.label] = counts.get(info.label, 0) + 1

    return FleetSummary(
        printers=tuple(printer for printer, _ in ordered),
        state_counts=counts,
    )


def derive_printer(printer: NormalizedPrinter, now: datetime) -> PrinterView:
    job = evaluate_pause(printer, estimate_job(printer, now))
    return PrinterView(
        printer=printer,
        state=classify_printer(printer),
        job=job,
        pause_warning=describe_pause(job),
    )


def derive_fleet(records: Sequence[Any], now: datetime) -> FleetView:
    """Run the whole derivation pipeline over one polled snapshot.

    Raises:
        SnapshotFormatError: A record cannot be normalized.
    """
    printers = normalize_snapshot(records)
    summary = aggregate(printers)
    views: List[PrinterView] = [derive_printer(p, now) for p in summary.printers]

    LOGGER.debug(
        "Derived fleet view for %d printers: %s",
        len(views),
        ", ".join(f"{label}={count}" for label, count in summary.state_counts.items()),
    )

    return FleetView(generated_at=now, summary=summary, printers=tuple(views))
