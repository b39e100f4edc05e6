"""
Unit tests for weather_alerts/alerts/scheduler.py

Tests cover run serialization (timer runs skipped while busy, manual runs
wait), status reporting and job registration.

All tests are fully offline (no DB, no network).
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from weather_alerts.alerts.scheduler import (
    INITIAL_JOB_ID,
    INTERVAL_JOB_ID,
    STATE_IDLE,
    STATE_RUNNING,
    TRIGGER_INTERVAL,
    TRIGGER_MANUAL,
    TRIGGER_STARTUP,
    WeatherCheckScheduler,
)
from weather_alerts.alerts.types import RunResult


class BlockingFanOut:
    """Fan-out stand-in whose runs finish only when released."""

    def __init__(self):
        self.release = asyncio.Event()
        self.started = asyncio.Event()
        self.triggers = []

    async def run(self, trigger: str = "manual") -> RunResult:
        self.triggers.append(trigger)
        self.started.set()
        await self.release.wait()
        return RunResult(sites_checked=3, notifications_sent=1, trigger=trigger)


def _fanout_returning(result: RunResult):
    fanout = MagicMock()
    fanout.run = AsyncMock(return_value=result)
    return fanout


@pytest.mark.unit
class TestRunSerialization:

    @pytest.mark.asyncio
    async def test_manual_run_returns_fanout_result(self):
        fanout = _fanout_returning(RunResult(sites_checked=2, notifications_sent=1, trigger="manual"))
        scheduler = WeatherCheckScheduler(fanout)

        result = await scheduler.run_now()

        assert result.sites_checked == 2
        assert result.alerts_sent == 1
        fanout.run.assert_awaited_once_with(trigger=TRIGGER_MANUAL)

    @pytest.mark.asyncio
    async def test_timer_run_is_skipped_while_busy(self):
        fanout = BlockingFanOut()
        scheduler = WeatherCheckScheduler(fanout)

        first = asyncio.create_task(scheduler.run(TRIGGER_STARTUP))
        await fanout.started.wait()
        assert scheduler.state == STATE_RUNNING

        skipped = await scheduler.run(TRIGGER_INTERVAL)

        assert skipped.skipped is True
        assert skipped.trigger == TRIGGER_INTERVAL
        assert fanout.triggers == [TRIGGER_STARTUP]

        fanout.release.set()
        await first
        assert scheduler.state == STATE_IDLE

    @pytest.mark.asyncio
    async def test_manual_run_waits_for_run_in_progress(self):
        fanout = BlockingFanOut()
        scheduler = WeatherCheckScheduler(fanout)

        first = asyncio.create_task(scheduler.run(TRIGGER_INTERVAL))
        await fanout.started.wait()

        manual = asyncio.create_task(scheduler.run_now())
        await asyncio.sleep(0.01)
        assert not manual.done()
        assert fanout.triggers == [TRIGGER_INTERVAL]

        fanout.release.set()
        await first
        result = await manual

        assert result.skipped is False
        assert fanout.triggers == [TRIGGER_INTERVAL, TRIGGER_MANUAL]

    @pytest.mark.asyncio
    async def test_failed_run_releases_the_lock(self):
        fanout = MagicMock()
        fanout.run = AsyncMock(side_effect=[RuntimeError("boom"), RunResult(trigger="interval")])
        scheduler = WeatherCheckScheduler(fanout)

        with pytest.raises(RuntimeError):
            await scheduler.run(TRIGGER_INTERVAL)

        assert scheduler.state == STATE_IDLE
        result = await scheduler.run(TRIGGER_INTERVAL)
        assert result.skipped is False


@pytest.mark.unit
class TestStatus:

    def test_status_before_any_run(self):
        scheduler = WeatherCheckScheduler(MagicMock(), poll_interval_minutes=15)
        status = scheduler.status()

        assert status["state"] == STATE_IDLE
        assert status["running"] is False
        assert status["poll_interval_minutes"] == 15
        assert status["jobs"] == []
        assert status["last_run_at"] is None
        assert status["last_result"] is None

    @pytest.mark.asyncio
    async def test_status_reports_last_result(self):
        fanout = _fanout_returning(RunResult(sites_checked=4, errors=1, trigger="manual"))
        scheduler = WeatherCheckScheduler(fanout)

        await scheduler.run_now()
        status = scheduler.status()

        assert status["last_run_at"] is not None
        assert status["last_result"]["sites_checked"] == 4
        assert status["last_result"]["errors"] == 1

    @pytest.mark.asyncio
    async def test_start_registers_interval_and_initial_jobs(self):
        scheduler = WeatherCheckScheduler(
            _fanout_returning(RunResult()),
            poll_interval_minutes=30,
            initial_delay_seconds=60,
        )
        scheduler.start()
        try:
            status = scheduler.status()
            assert status["running"] is True
            assert {job["id"] for job in status["jobs"]} == {INTERVAL_JOB_ID, INITIAL_JOB_ID}

            interval_job = scheduler.scheduler.get_job(INTERVAL_JOB_ID)
            assert interval_job.max_instances == 1
            assert interval_job.coalesce is True
        finally:
            scheduler.shutdown()

        assert scheduler.scheduler.running is False
