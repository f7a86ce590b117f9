"""Health reporting for the fleet monitor.

The ``/healthz`` payload carries two parts: per-component status (today
only the ``aggregator`` fetch) and a summary of the last fleet view that
was derived successfully, so an operator can tell a stale monitor from a
healthy one at a glance.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from aiohttp import web

from .core.models import FleetView

LOGGER = logging.getLogger(__name__)

HEALTH_PATH = "/healthz"


@dataclass(slots=True)
class ComponentStatus:
    name: str
    healthy: bool
    detail: Optional[str] = None
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "healthy": self.healthy,
            "detail": self.detail,
            "updatedAt": self.updated_at.isoformat(timespec="seconds"),
        }


@dataclass(slots=True, frozen=True)
class FleetPollStatus:
    """What the last successful poll saw."""

    polled_at: datetime
    printer_count: int
    state_counts: Dict[str, int]

    @classmethod
    def from_view(cls, view: FleetView) -> "FleetPollStatus":
        return cls(
            polled_at=view.generated_at,
            printer_count=len(view.printers),
            state_counts=dict(view.summary.state_counts),
        )

    def as_dict(self) -> Dict[str, object]:
        return {
            "lastPollAt": self.polled_at.isoformat(timespec="seconds"),
            "printerCount": self.printer_count,
            "stateCounts": dict(self.state_counts),
        }


class HealthReporter:
    """Tracks component statuses and the last derived fleet view."""

    def __init__(self) -> None:
        self._status: Dict[str, ComponentStatus] = {}
        self._fleet: Optional[FleetPollStatus] = None
        self._lock = asyncio.Lock()

    async def update(
        self, name: str, healthy: bool, detail: Optional[str] = None
    ) -> None:
        async with self._lock:
            self._status[name] = ComponentStatus(
                name=name, healthy=healthy, detail=detail
            )

    async def record_poll(self, view: FleetView) -> None:
        async with self._lock:
            self._fleet = FleetPollStatus.from_view(view)

    async def snapshot(self) -> Dict[str, Any]:
        async with self._lock:
            components = [status.as_dict() for status in self._status.values()]
            fleet = self._fleet.as_dict() if self._fleet is not None else None

        overall = "ok" if all(item["healthy"] for item in components) else "degraded"
        return {"status": overall, "components": components, "fleet": fleet}


class HealthServer:
    """Serves the reporter snapshot on ``/healthz`` (200 when ok, 503 otherwise)."""

    def __init__(self, reporter: HealthReporter, host: str, port: int) -> None:
        self._reporter = reporter
        self._host = host
        self._port = port
        self._runner: Optional[web.AppRunner] = None

    async def start(self) -> None:
        app = web.Application()
        app.router.add_get(HEALTH_PATH, self._handle_healthz)

        self._runner = web.AppRunner(app, access_log=None)
        await self._runner.setup()
        await web.TCPSite(self._runner, self._host, self._port).start()
        LOGGER.info(
            "Fleet health endpoint on http://%s:%s%s", self._host, self._port, HEALTH_PATH
        )

    async def stop(self) -> None:
        if self._runner is None:
            return
        with contextlib.suppress(RuntimeError):
            await self._runner.cleanup()
        self._runner = None

    async def _handle_healthz(self, request: web.Request) -> web.Response:
        snapshot = await self._reporter.snapshot()
        status = 200 if snapshot["status"] == "ok" else 503
        return web.json_response(snapshot, status=status)
