"""Job progress estimation for a single printer.

A printer's latest job record is *active* when its G-code metadata UUID is
the UUID of the file currently loaded on the printer. Only active jobs get
timing information. Remaining time is estimated one of two ways, depending
on what the printer reports:

1. Slicer estimate: the loaded file carries ``estimated_time``, so the
   remaining time is the unprinted fraction of that estimate.
2. Extrapolation: without a slicer estimate, the elapsed print duration is
   scaled by the reported progress to predict the total.

When neither applies the remaining time is left unknown (``None``).
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional
from urllib.parse import quote

from . import constants
from .core.models import ActiveJob, InactiveJob, JobInfo, NormalizedPrinter
from .core.utils import clamp_non_negative, format_duration
from .printer_state import Color

__all__ = [
    "build_thumbnail_path",
    "estimate_job",
    "estimate_remaining_seconds",
    "job_status_color",
]

_JOB_STATUS_COLORS: Dict[str, str] = {
    "in_progress": Color.PRIMARY,
    "completed": Color.SUCCESS,
    "cancelled": Color.WARNING,
    "interrupted": Color.DANGER,
    "error": Color.DANGER,
    "klippy_disconnect": Color.DANGER,
    "klippy_shutdown": Color.DANGER,
    "server_exit": Color.DANGER,
}


def job_status_color(status: str) -> str:
    return _JOB_STATUS_COLORS.get(status, Color.SECONDARY)


def build_thumbnail_path(key: str) -> str:
    """Relative aggregator path serving the latest job's thumbnail."""
    return constants.THUMBNAIL_PATH_TEMPLATE.format(key=quote(key, safe=""))


def estimate_job(printer: NormalizedPrinter, now: datetime) -> Optional[JobInfo]:
    """Derive the job card for ``printer``.

    Returns ``None`` when the printer has no latest job, an
    :class:`InactiveJob` when the latest job is not the loaded file, and an
    :class:`ActiveJob` otherwise. ``now`` is recorded as the derivation time
    and serves as the default ETA reference.
    """
    latest = printer.latest_job
    if latest is None:
        return None

    metadata = latest.metadata
    image_url = (
        build_thumbnail_path(printer.key)
        if metadata is not None and metadata.has_thumbnail
        else None
    )

    inactive = InactiveJob(
        id=latest.job_id,
        file_name=latest.file_name,
        status=latest.status,
        status_color=job_status_color(latest.status),
        image_url=image_url,
    )

    if not _is_loaded_job(printer):
        return inactive

    stats = printer.printer_stats
    return ActiveJob(
        id=inactive.id,
        file_name=inactive.file_name,
        status=inactive.status,
        status_color=inactive.status_color,
        observed_at=now,
        image_url=inactive.image_url,
        print_time_text=format_duration(stats.print_duration_sec) if stats else None,
        total_time_text=format_duration(stats.total_duration_sec) if stats else None,
        estimated_remaining_sec=estimate_remaining_seconds(printer),
    )


def estimate_remaining_seconds(printer: NormalizedPrinter) -> Optional[float]:
    """Estimate the seconds left on the loaded job, or ``None`` if unknown."""
    virtual_sd = printer.virtual_sd
    if virtual_sd is None:
        return None

    loaded = printer.loaded_file
    if loaded is not None and loaded.estimated_time_sec is not None:
        estimated = loaded.estimated_time_sec
        remaining = estimated - (virtual_sd.progress * estimated)
        return clamp_non_negative(remaining)

    stats = printer.printer_stats
    if stats is not None and virtual_sd.progress > 0:
        elapsed = stats.print_duration_sec
        remaining = (elapsed / virtual_sd.progress) - elapsed
        return clamp_non_negative(remaining)

    return None


def _is_loaded_job(printer: NormalizedPrinter) -> bool:
    loaded = printer.loaded_file
    latest = printer.latest_job
    if loaded is None or latest is None or latest.metadata is None:
        return False

    loaded_uuid = loaded.uuid
    job_uuid = latest.metadata.uuid
    if loaded_uuid is None or job_uuid is None:
        return False

    return loaded_uuid == job_uuid
