"""Domain models for normalized printers and their derived views."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Mapping, Optional, Tuple, Union


@dataclass(slots=True, frozen=True)
class PrinterStats:
    print_duration_sec: float
    total_duration_sec: float
    filament_used: float
    sub_state: str


@dataclass(slots=True, frozen=True)
class VirtualSD:
    progress: float
    is_active: bool


@dataclass(slots=True, frozen=True)
class GCodeMetadata:
    file_name: str
    uuid: Optional[str]
    estimated_time_sec: Optional[float] = None
    has_thumbnail: bool = False


@dataclass(slots=True, frozen=True)
class LatestJob:
    job_id: str
    status: str
    file_name: str
    metadata: Optional[GCodeMetadata] = None


@dataclass(slots=True, frozen=True)
class NormalizedPrinter:
    """Canonical printer record produced from one raw snapshot entry.

    Optional sections are ``None`` when the aggregator did not report them;
    downstream code treats that as "not available", never as zero.
    """

    key: str
    name: str
    url: str
    state: str
    registered_job_id: str = ""
    allow_no_registered_print: bool = True
    no_pause_duration_sec: float = 0.0
    printer_not_open: bool = False
    display_message: Optional[str] = None
    error_message: Optional[str] = None
    last_update_time: Optional[datetime] = None
    printer_stats: Optional[PrinterStats] = None
    virtual_sd: Optional[VirtualSD] = None
    loaded_file: Optional[GCodeMetadata] = None
    latest_job: Optional[LatestJob] = None

    def as_dict(self) -> Dict[str, Any]:
        progress_percent: Optional[float] = None
        if self.virtual_sd is not None and self.virtual_sd.is_active:
            progress_percent = round(self.virtual_sd.progress * 100, 1)

        return {
            "key": self.key,
            "name": self.name,
            "url": self.url,
            "state": self.state,
            "printerNotOpen": self.printer_not_open,
            "displayMessage": self.display_message,
            "errorMessage": self.error_message,
            "lastUpdateTime": (
                self.last_update_time.isoformat(timespec="milliseconds")
                if self.last_update_time is not None
                else None
            ),
            "progressPercent": progress_percent,
        }


@dataclass(slots=True, frozen=True)
class StateInfo:
    label: str
    color: str
    is_in_error: bool = False
    is_disconnected: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "color": self.color,
            "isInError": self.is_in_error,
            "isDisconnected": self.is_disconnected,
        }


@dataclass(slots=True, frozen=True)
class InactiveJob:
    """Latest job record that is not the file currently loaded on the printer."""

    id: str
    file_name: str
    status: str
    status_color: str
    image_url: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return False

    def as_dict(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        return {
            "isActive": False,
            "id": self.id,
            "fileName": self.file_name,
            "status": self.status,
            "statusColor": self.status_color,
            "imageUrl": self.image_url,
        }


@dataclass(slots=True, frozen=True)
class ActiveJob:
    """Latest job record that matches the file currently loaded on the printer."""

    id: str
    file_name: str
    status: str
    status_color: str
    observed_at: datetime
    image_url: Optional[str] = None
    print_time_text: Optional[str] = None
    total_time_text: Optional[str] = None
    estimated_remaining_sec: Optional[float] = None
    job_will_pause: bool = False
    pause_remaining_sec: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return True

    def eta(self, at: Optional[datetime] = None) -> Optional[datetime]:
        """Wall-clock completion time relative to ``at`` (render time).

        Falls back to the derivation timestamp when no reference is given.
        """
        if self.estimated_remaining_sec is None:
            return None
        reference = at or self.observed_at
        return reference + timedelta(seconds=self.estimated_remaining_sec)

    def as_dict(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "isActive": True,
            "id": self.id,
            "fileName": self.file_name,
            "status": self.status,
            "statusColor": self.status_color,
            "imageUrl": self.image_url,
            "printTimeText": self.print_time_text,
            "totalTimeText": self.total_time_text,
            "estimatedRemainingSec": self.estimated_remaining_sec,
            "jobWillPause": self.job_will_pause,
            "pauseRemainingSec": self.pause_remaining_sec,
        }
        if now is not None:
            eta = self.eta(now)
            payload["eta"] = eta.isoformat(timespec="seconds") if eta else None
        return payload


JobInfo = Union[InactiveJob, ActiveJob]


@dataclass(slots=True, frozen=True)
class PrinterView:
    printer: NormalizedPrinter
    state: StateInfo
    job: Optional[JobInfo] = None
    pause_warning: Optional[str] = None

    def as_dict(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        payload = self.printer.as_dict()
        payload["displayState"] = self.state.as_dict()
        payload["job"] = self.job.as_dict(now) if self.job is not None else None
        payload["pauseWarning"] = self.pause_warning
        return payload


@dataclass(slots=True, frozen=True)
class FleetSummary:
    printers: Tuple[NormalizedPrinter, ...]
    state_counts: Mapping[str, int]


@dataclass(slots=True, frozen=True)
class FleetView:
    generated_at: datetime
    summary: FleetSummary
    printers: Tuple[PrinterView, ...]

    def as_dict(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        return {
            "generatedAt": self.generated_at.isoformat(timespec="seconds"),
            "stateCounts": dict(self.summary.state_counts),
            "printers": [view.as_dict(now) for view in self.printers],
        }
