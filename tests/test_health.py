"""Tests for the fleet health endpoint."""

import aiohttp
import pytest

from moonraker_fleet.fleet import derive_fleet
from moonraker_fleet.health import HEALTH_PATH, FleetPollStatus, HealthReporter, HealthServer


@pytest.mark.asyncio
async def test_snapshot_before_first_poll_has_no_fleet():
    reporter = HealthReporter()

    snapshot = await reporter.snapshot()

    assert snapshot == {"status": "ok", "components": [], "fleet": None}


@pytest.mark.asyncio
async def test_failed_component_degrades_status():
    reporter = HealthReporter()

    await reporter.update("aggregator", False, "fetch failed: refused")

    snapshot = await reporter.snapshot()

    assert snapshot["status"] == "degraded"
    [component] = snapshot["components"]
    assert component["name"] == "aggregator"
    assert component["detail"] == "fetch failed: refused"


@pytest.mark.asyncio
async def test_recorded_poll_summarises_fleet(make_raw, now):
    reporter = HealthReporter()
    view = derive_fleet(
        [make_raw(key="a", state="printing"), make_raw(key="b"), make_raw(key="c")], now
    )

    await reporter.update("aggregator", True, "3 printers")
    await reporter.record_poll(view)

    snapshot = await reporter.snapshot()

    assert snapshot["status"] == "ok"
    assert snapshot["fleet"] == {
        "lastPollAt": "2024-05-01T12:00:00+00:00",
        "printerCount": 3,
        "stateCounts": {"Printing": 1, "Ready": 2},
    }


@pytest.mark.asyncio
async def test_fleet_summary_survives_later_failure(make_raw, now):
    reporter = HealthReporter()
    await reporter.record_poll(derive_fleet([make_raw()], now))

    await reporter.update("aggregator", False, "fetch failed: timeout")

    snapshot = await reporter.snapshot()
    assert snapshot["status"] == "degraded"
    assert snapshot["fleet"]["printerCount"] == 1


def test_poll_status_copies_counts(make_raw, now):
    view = derive_fleet([make_raw()], now)

    status = FleetPollStatus.from_view(view)
    view.summary.state_counts["Ready"] = 99

    assert status.state_counts == {"Ready": 1}


@pytest.mark.asyncio
async def test_health_server_reports_fleet(unused_tcp_port, make_raw, now):
    reporter = HealthReporter()
    await reporter.update("aggregator", True, "2 printers")
    await reporter.record_poll(derive_fleet([make_raw(key="a"), make_raw(key="b")], now))

    host = "127.0.0.1"
    server = HealthServer(reporter, host, unused_tcp_port)
    await server.start()

    url = f"http://{host}:{unused_tcp_port}{HEALTH_PATH}"
    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(url) as response:
                payload = await response.json()
                assert response.status == 200
                assert payload["fleet"]["printerCount"] == 2

            await reporter.update("aggregator", False, "fetch failed")
            async with session.get(url) as response:
                assert response.status == 503
    finally:
        await server.stop()
