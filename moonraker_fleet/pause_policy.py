"""Auto-pause policy evaluation for unregistered jobs.

A printer that does not allow unregistered prints is paused by the
aggregator once the active job's print duration exceeds the configured
grace period, unless the job has been registered. This module only reports
whether that will happen and how long is left; it never acts on it.
"""

from __future__ import annotations

import dataclasses
from typing import Optional

from .core.models import ActiveJob, JobInfo, NormalizedPrinter
from .core.utils import format_duration

__all__ = ["describe_pause", "evaluate_pause"]


def evaluate_pause(
    printer: NormalizedPrinter, job: Optional[JobInfo]
) -> Optional[JobInfo]:
    """Return ``job`` with the pause flag and countdown filled in.

    Inactive jobs (and ``None``) are returned unchanged.
    """
    if not isinstance(job, ActiveJob):
        return job

    will_pause = (
        not printer.allow_no_registered_print and job.id != printer.registered_job_id
    )

    pause_remaining: Optional[float] = None
    if printer.printer_stats is not None:
        pause_remaining = max(
            printer.no_pause_duration_sec - printer.printer_stats.print_duration_sec,
            0.0,
        )

    return dataclasses.replace(
        job, job_will_pause=will_pause, pause_remaining_sec=pause_remaining
    )


def describe_pause(job: Optional[JobInfo]) -> Optional[str]:
    """Operator-facing warning for a job scheduled to auto-pause."""
    if not isinstance(job, ActiveJob) or not job.job_will_pause:
        return None

    if job.pause_remaining_sec:
        return (
            f"Job will be paused after {format_duration(job.pause_remaining_sec)}, "
            "please register."
        )
    return "Job will be paused, please register."
