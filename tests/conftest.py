from datetime import datetime, timezone
from typing import Any, Callable, Dict

import pytest

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def _build_raw(**overrides: Any) -> Dict[str, Any]:
    """Aggregator record for a connected, idle printer with no job data."""
    base: Dict[str, Any] = {
        "key": "v400-1",
        "name": "V400 #1",
        "url": "http://10.0.0.11:7125",
        "registered_job_id": "",
        "allow_no_register_print": True,
        "no_pause_duration": 300.0,
        "state": "ready",
        "message": "",
        "last_update_time": 1714564800000,
        "display_status": {"message": "", "progress": 0.0},
        "printer_stats": None,
        "virtual_sd_card": None,
        "loaded_file": None,
        "latest_job": None,
    }
    base.update(overrides)
    return base


def _metadata(uuid: str = "uuid-1", **overrides: Any) -> Dict[str, Any]:
    base: Dict[str, Any] = {
        "filename": "benchy.gcode",
        "uuid": uuid,
        "estimated_time": 600.0,
        "thumbnails": [
            {"width": 32, "height": 32, "size": 1024, "relative_path": ".thumbs/benchy-32x32.png"}
        ],
    }
    base.update(overrides)
    return base


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_raw() -> Callable[..., Dict[str, Any]]:
    return _build_raw


@pytest.fixture
def make_metadata() -> Callable[..., Dict[str, Any]]:
    return _metadata


@pytest.fixture
def printing_raw() -> Dict[str, Any]:
    """Printer halfway through the job that its latest history entry describes."""
    return _build_raw(
        state="printing",
        printer_stats={
            "filename": "benchy.gcode",
            "print_duration": 100.0,
            "total_duration": 130.0,
            "filament_used": 1200.5,
            "state": "printing",
            "message": "",
        },
        virtual_sd_card={"progress": 0.5, "is_active": True},
        loaded_file=_metadata(),
        latest_job={
            "job_id": "0002DD",
            "status": "in_progress",
            "filename": "benchy.gcode",
            "metadata": _metadata(),
        },
    )
