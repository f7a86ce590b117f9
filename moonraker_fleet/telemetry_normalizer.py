"""Normalization helpers for aggregator printer snapshots."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .core.models import (
    GCodeMetadata,
    LatestJob,
    NormalizedPrinter,
    PrinterStats,
    VirtualSD,
)
from .core.utils import safe_float

LOGGER = logging.getLogger(__name__)

REQUIRED_FIELDS = ("key", "name", "url", "state")


class SnapshotFormatError(ValueError):
    """Raised when a raw snapshot record cannot be normalized."""


def normalize_snapshot(records: Iterable[Any]) -> List[NormalizedPrinter]:
    """Normalize every record of one polled fleet snapshot.

    Raises:
        SnapshotFormatError: A record is malformed or two records share a key.
    """
    printers: List[NormalizedPrinter] = []
    seen: set[str] = set()

    for index, raw in enumerate(records):
        printer = normalize_printer(raw, index=index)
        if printer.key in seen:
            raise SnapshotFormatError(
                f"snapshot record {index}: duplicate printer key {printer.key!r}"
            )
        seen.add(printer.key)
        printers.append(printer)

    return printers


def normalize_printer(raw: Any, *, index: Optional[int] = None) -> NormalizedPrinter:
    """Project one raw aggregator record onto :class:`NormalizedPrinter`.

    Args:
        raw: JSON object as returned by ``GET /printers``.
        index: Position of the record in its snapshot, used in error messages.

    Raises:
        SnapshotFormatError: ``raw`` is not an object or lacks a required field.
    """
    label = f"snapshot record {index}" if index is not None else "snapshot record"

    if not isinstance(raw, Mapping):
        raise SnapshotFormatError(f"{label}: expected an object, got {type(raw).__name__}")

    for field_name in REQUIRED_FIELDS:
        value = raw.get(field_name)
        if not isinstance(value, str):
            raise SnapshotFormatError(f"{label}: missing required field {field_name!r}")

    key = raw["key"]
    display_status = _coerce_section(raw, "display_status", key)
    printer_stats = _coerce_section(raw, "printer_stats", key)
    virtual_sd = _coerce_section(raw, "virtual_sd_card", key)
    loaded_file = _coerce_section(raw, "loaded_file", key)
    latest_job = _coerce_section(raw, "latest_job", key)

    registered_job_id = raw.get("registered_job_id")
    allow_no_register = raw.get("allow_no_register_print")

    return NormalizedPrinter(
        key=key,
        name=raw["name"],
        url=raw["url"],
        state=raw["state"].strip().lower(),
        registered_job_id=registered_job_id if isinstance(registered_job_id, str) else "",
        allow_no_registered_print=(
            allow_no_register if isinstance(allow_no_register, bool) else True
        ),
        no_pause_duration_sec=_float_or_zero(raw.get("no_pause_duration")),
        printer_not_open=raw.get("printer_not_open") is True,
        display_message=(
            _clean_text(display_status.get("message")) if display_status else None
        ),
        error_message=_clean_text(raw.get("message")),
        last_update_time=_parse_epoch_millis(raw.get("last_update_time")),
        printer_stats=_build_printer_stats(printer_stats) if printer_stats is not None else None,
        virtual_sd=_build_virtual_sd(virtual_sd) if virtual_sd is not None else None,
        loaded_file=_build_metadata(loaded_file) if loaded_file is not None else None,
        latest_job=_build_latest_job(latest_job, key) if latest_job is not None else None,
    )


# ----------------------------------------------------------------------
# section builders
# ----------------------------------------------------------------------
def _build_printer_stats(section: Dict[str, Any]) -> PrinterStats:
    return PrinterStats(
        print_duration_sec=_float_or_zero(section.get("print_duration")),
        total_duration_sec=_float_or_zero(section.get("total_duration")),
        filament_used=_float_or_zero(section.get("filament_used")),
        sub_state=_text_or_empty(section.get("state")).lower(),
    )


def _build_virtual_sd(section: Dict[str, Any]) -> VirtualSD:
    progress = _float_or_zero(section.get("progress"))
    return VirtualSD(
        progress=max(0.0, min(progress, 1.0)),
        is_active=section.get("is_active") is True,
    )


def _build_metadata(section: Dict[str, Any]) -> GCodeMetadata:
    uuid = _clean_text(section.get("uuid"))
    return GCodeMetadata(
        file_name=_text_or_empty(section.get("filename")),
        uuid=uuid,
        estimated_time_sec=_number_or_none(section.get("estimated_time")),
        has_thumbnail=_has_thumbnail(section.get("thumbnails")),
    )


def _build_latest_job(section: Dict[str, Any], key: str) -> LatestJob:
    metadata = _coerce_section(section, "metadata", key)
    return LatestJob(
        job_id=_text_or_empty(section.get("job_id")),
        status=_text_or_empty(section.get("status")),
        file_name=_text_or_empty(section.get("filename")),
        metadata=_build_metadata(metadata) if metadata is not None else None,
    )


# ----------------------------------------------------------------------
# coercion helpers
# ----------------------------------------------------------------------
def _coerce_section(
    container: Mapping[str, Any], name: str, key: str
) -> Optional[Dict[str, Any]]:
    value = container.get(name)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        LOGGER.warning(
            "Ignoring %s for printer %s: expected an object, got %s",
            name,
            key,
            type(value).__name__,
        )
        return None
    return dict(value)


def _has_thumbnail(entries: Any) -> bool:
    return isinstance(entries, list) and len(entries) > 0


def _number_or_none(value: Any) -> Optional[float]:
    # JSON numbers only; a numeric string is not a slicer estimate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return safe_float(value)


def _clean_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    if not value.strip():
        return None
    return value


def _text_or_empty(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _float_or_zero(value: Any) -> float:
    numeric = safe_float(value)
    return numeric if numeric is not None else 0.0


def _parse_epoch_millis(value: Any) -> Optional[datetime]:
    millis = safe_float(value)
    if millis is None:
        return None
    try:
        return datetime.fromtimestamp(millis / 1000.0, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
