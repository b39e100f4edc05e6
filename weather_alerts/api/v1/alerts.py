"""
Alert endpoints.

History and active-alert views over the alert store, the manual
"check now" trigger, scheduler status and the configured thresholds.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from weather_alerts.alerts.scheduler import WeatherCheckScheduler
from weather_alerts.alerts.store import AlertStore
from weather_alerts.api.deps import get_app_settings, get_scheduler, get_store
from weather_alerts.core.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get("")
def get_alert_history(
    site_id: Optional[int] = Query(None, description="Only alerts for this site"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    store: AlertStore = Depends(get_store),
):
    """Alert history, newest first, with site name and location."""
    return store.list_alert_history(site_id=site_id, limit=limit, offset=offset)


@router.get("/active")
def get_active_alerts(
    store: AlertStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Alerts raised in the active window, warnings first."""
    return store.list_active_alerts(settings.active_alert_window_hours)


@router.post("/check-now")
async def check_now(scheduler: WeatherCheckScheduler = Depends(get_scheduler)):
    """
    Run a weather check immediately and return its summary.

    Waits for any check already in progress. Per-site failures appear only
    as the error count.
    """
    result = await scheduler.run_now()
    return {**result.to_dict(), "alerts_sent": result.alerts_sent}


@router.get("/scheduler")
def get_scheduler_status(scheduler: WeatherCheckScheduler = Depends(get_scheduler)):
    return scheduler.status()


@router.get("/thresholds")
def get_thresholds(settings: Settings = Depends(get_app_settings)):
    """Configured thresholds, cooldown and poll cadence."""
    return {
        "current": settings.current_thresholds().to_dict(),
        "forecast": settings.forecast_thresholds().to_dict(),
        "cooldown_hours": settings.cooldown_hours,
        "poll_interval_minutes": settings.poll_interval_minutes,
    }
