"""
Weather endpoints.

Live conditions snapshots for one site or for every active site. These
read straight from the conditions provider and never create alerts.
"""

import asyncio
import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from weather_alerts.alerts.store import AlertStore
from weather_alerts.alerts.types import SiteRef
from weather_alerts.api.deps import get_provider, get_store
from weather_alerts.core.api_errors import APIError
from weather_alerts.sources.conditions import ConditionsProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/weather", tags=["weather"])


@router.get("/all")
async def get_all_weather(
    store: AlertStore = Depends(get_store),
    provider: ConditionsProvider = Depends(get_provider),
):
    """
    Conditions for every active site.

    A site whose conditions cannot be fetched is reported inline with an
    error message; the other sites are unaffected.
    """
    sites = store.list_active_sites()

    async def one(site: SiteRef):
        entry = {"site": asdict(site)}
        try:
            snapshot = await provider.fetch(site.latitude, site.longitude)
            entry["conditions"] = snapshot.to_dict()
        except APIError as e:
            logger.warning(f"Weather unavailable for {site.name}: {e}")
            entry["error"] = e.message
        return entry

    return await asyncio.gather(*(one(site) for site in sites))


@router.get("/{site_id}")
async def get_site_weather(
    site_id: int,
    store: AlertStore = Depends(get_store),
    provider: ConditionsProvider = Depends(get_provider),
):
    site = store.get_site(site_id)
    if site is None:
        raise HTTPException(status_code=404, detail=f"Site {site_id} not found")

    try:
        snapshot = await provider.fetch(site["latitude"], site["longitude"])
    except APIError as e:
        logger.warning(f"Weather unavailable for site {site_id}: {e}")
        raise HTTPException(status_code=502, detail=e.message)

    return {"site": site, "conditions": snapshot.to_dict()}
