"""
Weather check scheduler.

Uses APScheduler to trigger a fan-out run on a fixed interval and once
shortly after startup. Manual "check now" requests go through the same
run() entry point, which serializes runs with an asyncio.Lock:

- timer-triggered runs that find a run in progress are skipped
- manual runs wait for the in-progress run, then execute
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from weather_alerts.alerts.fanout import SiteFanOut
from weather_alerts.alerts.types import RunResult

logger = logging.getLogger(__name__)

INTERVAL_JOB_ID = "weather_check_interval"
INITIAL_JOB_ID = "weather_check_initial"

TRIGGER_INTERVAL = "interval"
TRIGGER_STARTUP = "startup"
TRIGGER_MANUAL = "manual"

STATE_IDLE = "idle"
STATE_RUNNING = "running"


class WeatherCheckScheduler:
    """
    Owns the APScheduler instance and the single run entry point.

    Args:
        fanout: Pipeline executed on every run
        poll_interval_minutes: Minutes between scheduled runs
        initial_delay_seconds: Delay before the first run after start()
        scheduler: Optional pre-built AsyncIOScheduler (tests)
    """

    def __init__(
        self,
        fanout: SiteFanOut,
        poll_interval_minutes: int = 30,
        initial_delay_seconds: int = 5,
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self.fanout = fanout
        self.poll_interval_minutes = poll_interval_minutes
        self.initial_delay_seconds = initial_delay_seconds
        self.scheduler = scheduler or AsyncIOScheduler(timezone=timezone.utc)

        self._lock = asyncio.Lock()
        self._state = STATE_IDLE
        self._current_trigger: Optional[str] = None
        self._last_result: Optional[RunResult] = None
        self._last_run_at: Optional[datetime] = None

    @property
    def state(self) -> str:
        return self._state

    async def run(self, trigger: str = TRIGGER_MANUAL) -> RunResult:
        """Execute one fan-out run; the only path by which runs happen."""
        if trigger != TRIGGER_MANUAL and self._lock.locked():
            logger.warning(
                f"Skipping {trigger} weather check: "
                f"{self._current_trigger} run still in progress"
            )
            return RunResult(trigger=trigger, skipped=True)

        async with self._lock:
            self._state = STATE_RUNNING
            self._current_trigger = trigger
            try:
                result = await self.fanout.run(trigger=trigger)
            finally:
                self._state = STATE_IDLE
                self._current_trigger = None

            self._last_result = result
            self._last_run_at = datetime.now(timezone.utc)
            return result

    async def run_now(self) -> RunResult:
        """Manual trigger; waits for any run already in progress."""
        return await self.run(TRIGGER_MANUAL)

    async def _run_interval(self) -> None:
        await self.run(TRIGGER_INTERVAL)

    async def _run_startup(self) -> None:
        await self.run(TRIGGER_STARTUP)

    def start(self) -> None:
        """Register both jobs and start the scheduler (needs a running event loop)."""
        if self.scheduler.running:
            return

        self.scheduler.add_job(
            self._run_interval,
            trigger=IntervalTrigger(minutes=self.poll_interval_minutes),
            id=INTERVAL_JOB_ID,
            name="Job Site Weather Check",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self.scheduler.add_job(
            self._run_startup,
            trigger=DateTrigger(
                run_date=datetime.now(timezone.utc)
                + timedelta(seconds=self.initial_delay_seconds)
            ),
            id=INITIAL_JOB_ID,
            name="Initial Weather Check",
            replace_existing=True,
        )
        self.scheduler.start()
        logger.info(
            f"Weather check scheduler started: every {self.poll_interval_minutes} minutes, "
            f"first check in {self.initial_delay_seconds}s"
        )

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Weather check scheduler stopped")

    def status(self) -> Dict[str, Any]:
        """Current scheduler state for the status endpoint."""
        jobs = []
        if self.scheduler.running:
            for job in self.scheduler.get_jobs():
                jobs.append({
                    "id": job.id,
                    "name": job.name,
                    "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
                    "trigger": str(job.trigger),
                })

        return {
            "state": self._state,
            "running": self.scheduler.running,
            "poll_interval_minutes": self.poll_interval_minutes,
            "jobs": jobs,
            "last_run_at": self._last_run_at.isoformat() if self._last_run_at else None,
            "last_result": self._last_result.to_dict() if self._last_result else None,
        }
