"""Polling loop that re-derives the fleet view on a fixed interval.

Each tick fetches a complete snapshot, runs the derivation pipeline with a
fresh ``now`` and hands the result to the consumer. Ticks are independent:
nothing carries over from one snapshot to the next, so a failed tick is
simply logged and the next one starts from scratch.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional

import aiohttp

from . import constants
from .adapters.aggregator import AggregatorError
from .core.models import FleetView
from .fleet import derive_fleet
from .health import HealthReporter
from .telemetry_normalizer import SnapshotFormatError

LOGGER = logging.getLogger(__name__)

HEALTH_COMPONENT = "aggregator"

FetchCallable = Callable[[], Awaitable[List[Any]]]
ViewCallback = Callable[[FleetView], Awaitable[None] | None]


class FleetPoller:
    """Runs fetch -> derive -> publish on an interval until stopped."""

    def __init__(
        self,
        *,
        fetch: FetchCallable,
        on_view: ViewCallback,
        interval_seconds: float = constants.DEFAULT_POLL_INTERVAL_SECONDS,
        enabled: bool = True,
        stop_event: Optional[asyncio.Event] = None,
        health: Optional[HealthReporter] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize the poller.

        Args:
            fetch: Async function returning the raw snapshot list
            on_view: Consumer invoked with every derived view (sync or async)
            interval_seconds: Seconds between the start of consecutive polls
            enabled: When False, :meth:`start` does nothing
            stop_event: Event signaling shutdown (created if omitted)
            health: Optional reporter updated after every tick
            clock: Source of ``now`` for each derivation (UTC by default)
        """
        self._fetch = fetch
        self._on_view = on_view
        self._interval = max(interval_seconds, constants.MIN_POLL_INTERVAL_SECONDS)
        self._enabled = enabled
        self._stop_event = stop_event or asyncio.Event()
        self._health = health
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the polling task."""
        if not self._enabled:
            LOGGER.info("Fleet polling disabled; not starting")
            return
        if self._task is not None:
            return

        self._stop_event.clear()
        self._task = asyncio.create_task(self._poll_loop())

    async def stop(self) -> None:
        """Stop the polling task."""
        self._stop_event.set()
        if self._task is None:
            return

        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def wait(self) -> None:
        """Wait until the polling task finishes."""
        if self._task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

    async def poll_once(self) -> Optional[FleetView]:
        """Run a single tick. Returns the derived view, or None on failure."""
        try:
            records = await self._fetch()
        except asyncio.CancelledError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, AggregatorError) as exc:
            reason = str(exc) or type(exc).__name__
            LOGGER.warning("Fleet snapshot fetch failed: %s", reason)
            await self._report(False, f"fetch failed: {reason}")
            return None

        try:
            view = derive_fleet(records, self._clock())
        except SnapshotFormatError as exc:
            LOGGER.error("Discarding malformed fleet snapshot: %s", exc)
            await self._report(False, f"malformed snapshot: {exc}")
            return None

        await self._report(True, f"{len(view.printers)} printers")
        if self._health is not None:
            await self._health.record_poll(view)

        result = self._on_view(view)
        if inspect.isawaitable(result):
            await result

        return view

    async def _poll_loop(self) -> None:
        while not self._stop_event.is_set():
            await self.poll_once()

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
                break  # Stop event was set
            except asyncio.TimeoutError:
                continue

    async def _report(self, healthy: bool, detail: str) -> None:
        if self._health is not None:
            await self._health.update(HEALTH_COMPONENT, healthy, detail)
