"""
Tests for the refresh scheduler.
"""

import asyncio
import logging
import time

import pytest

from conftest import StubFeedClient, make_alerts, make_polygon, make_station, upstream_error
from floodwatch.services.monitor import FloodMonitor
from floodwatch.services.scheduler import RefreshScheduler


def make_monitor(**overrides):
    feeds = dict(
        stations=[make_station("a", 2.0)],
        polygons=[make_polygon(1)],
        alerts=make_alerts(3, pub_millis=int(time.time() * 1000)),
    )
    feeds.update(overrides)
    return FloodMonitor(StubFeedClient(**feeds))


async def wait_for_calls(monitor, count, timeout=2.0):
    async def poll():
        while monitor.feeds.calls < count:
            await asyncio.sleep(0.005)
    await asyncio.wait_for(poll(), timeout)


class TestRefreshScheduler:
    """Polling loop lifecycle."""

    @pytest.mark.asyncio
    async def test_start_runs_immediately_and_repeats(self):
        monitor = make_monitor()
        scheduler = RefreshScheduler(monitor, 0.02)

        scheduler.start()
        assert scheduler.running is True
        await wait_for_calls(monitor, 3)
        await scheduler.stop()

        assert scheduler.running is False
        assert len(monitor.history) >= 2

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self):
        scheduler = RefreshScheduler(make_monitor(), 10)
        scheduler.start()
        task = scheduler._task
        scheduler.start()
        assert scheduler._task is task
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        scheduler = RefreshScheduler(make_monitor(), 10)
        await scheduler.stop()
        assert scheduler.running is False

    @pytest.mark.asyncio
    async def test_set_interval_keeps_history(self):
        """Reinstalling the loop does not reset accumulated history."""
        monitor = make_monitor()
        scheduler = RefreshScheduler(monitor, 0.02)
        scheduler.start()
        await wait_for_calls(monitor, 2)

        await scheduler.set_interval(0.01)
        kept = len(monitor.history)
        assert kept >= 1
        assert scheduler.interval == 0.01
        assert scheduler.running is True

        await wait_for_calls(monitor, monitor.feeds.calls + 2)
        await scheduler.stop()
        assert len(monitor.history) > kept

    @pytest.mark.asyncio
    async def test_set_interval_while_stopped(self):
        scheduler = RefreshScheduler(make_monitor(), 30)
        await scheduler.set_interval(60)
        assert scheduler.interval == 60
        assert scheduler.running is False

    @pytest.mark.asyncio
    async def test_failed_cycles_do_not_stop_the_loop(self):
        monitor = make_monitor(polygons=upstream_error("polygons"))
        scheduler = RefreshScheduler(monitor, 0.01)
        scheduler.start()
        await wait_for_calls(monitor, 3)
        assert scheduler.running is True
        await scheduler.stop()
        assert len(monitor.history) == 0

    @pytest.mark.parametrize("seconds", [0, -5])
    def test_rejects_non_positive_interval(self, seconds):
        with pytest.raises(ValueError):
            RefreshScheduler(make_monitor(), seconds)

    @pytest.mark.asyncio
    async def test_set_interval_rejects_non_positive(self):
        scheduler = RefreshScheduler(make_monitor(), 30)
        with pytest.raises(ValueError):
            await scheduler.set_interval(0)
        assert scheduler.interval == 30

    @pytest.mark.asyncio
    async def test_stop_waits_for_running_cycle(self, caplog):
        """A cycle caught mid-flight by stop() finishes and its failure is logged."""

        class SlowFeeds(StubFeedClient):
            async def fetch_polygons(self):
                await asyncio.sleep(0.05)
                return await super().fetch_polygons()

        monitor = FloodMonitor(SlowFeeds(polygons=upstream_error("polygons")))
        scheduler = RefreshScheduler(monitor, 10)
        scheduler.start()
        await wait_for_calls(monitor, 1)
        assert monitor.busy is True

        with caplog.at_level(logging.WARNING):
            await scheduler.stop()

        assert monitor.busy is False
        assert scheduler._inflight is None
        assert "polygons feed failed" in caplog.text
