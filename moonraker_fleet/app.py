"""Main application entry-point for moonraker-fleet."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Callable, Optional, TextIO

from .adapters import AggregatorClient
from .config import FleetConfig, load_config
from .core.models import FleetView
from .health import HealthReporter, HealthServer
from .logging import configure_logging
from .polling import FleetPoller

LOGGER = logging.getLogger(__name__)


def render_view_json(
    view: FleetView, *, api_base: Optional[str] = None, now: Optional[datetime] = None
) -> str:
    """Serialise a fleet view as one JSON line.

    ``now`` is the render-time clock used for ETAs; it defaults to the
    current time rather than the derivation time.
    """
    document = view.as_dict(now or datetime.now(timezone.utc))
    if api_base is not None:
        document["apiBase"] = api_base
    return json.dumps(document, ensure_ascii=False)


class FleetMonitorApp:
    """Coordinates the aggregator client, poll loop and health endpoint.

    The aggregator client can be injected for testing; by default one is
    built from the ``[aggregator]`` section of the configuration.
    """

    def __init__(
        self,
        config: Optional[FleetConfig] = None,
        *,
        client: Optional[AggregatorClient] = None,
        output: Optional[TextIO] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._config = config or load_config()
        self._client = client or AggregatorClient(self._config.aggregator)
        self._output = output or sys.stdout
        self._clock = clock
        self._health = HealthReporter()
        self._health_server: Optional[HealthServer] = None
        self._poller: Optional[FleetPoller] = None

    @property
    def health(self) -> HealthReporter:
        return self._health

    async def run(self, *, once: bool = False) -> bool:
        """Poll until cancelled, or for a single tick when ``once`` is set.

        Returns False when the single tick of a ``once`` run produced no view.
        """

        polling = self._config.polling
        LOGGER.info(
            "moonraker-fleet polling %s every %.1fs (config: %s)",
            self._client.base_url,
            polling.interval_seconds,
            self._config.path,
        )

        self._poller = FleetPoller(
            fetch=self._client.fetch_printers,
            on_view=self._emit,
            interval_seconds=polling.interval_seconds,
            enabled=polling.enabled,
            health=self._health,
            clock=self._clock,
        )

        try:
            if once:
                return await self._poller.poll_once() is not None

            if not self._poller.enabled:
                LOGGER.warning("Polling is disabled in %s; nothing to do", self._config.path)
                return True

            await self._start_health_server()
            self._poller.start()
            await self._poller.wait()
            return True
        finally:
            await self._poller.stop()
            await self._stop_health_server()
            await self._client.aclose()

    @classmethod
    def start(cls, config: Optional[FleetConfig] = None, *, once: bool = False) -> bool:
        instance = cls(config=config)
        configure_logging(
            instance._config.logging.level,
            log_path=instance._config.logging.path,
            log_network=instance._config.logging.log_network,
        )
        try:
            return asyncio.run(instance.run(once=once))
        except KeyboardInterrupt:
            LOGGER.info("moonraker-fleet received shutdown signal")
            return True

    def _emit(self, view: FleetView) -> None:
        self._output.write(render_view_json(view, api_base=self._client.base_url))
        self._output.write("\n")
        self._output.flush()

    async def _start_health_server(self) -> None:
        health = self._config.health
        if not health.enabled:
            return
        self._health_server = HealthServer(self._health, health.host, health.port)
        await self._health_server.start()

    async def _stop_health_server(self) -> None:
        if self._health_server is not None:
            await self._health_server.stop()
            self._health_server = None
