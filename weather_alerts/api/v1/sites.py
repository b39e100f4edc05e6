"""
Job site endpoints.

Thin CRUD over the site registry. Deleting a site deactivates it so its
alert history is kept; inactive sites are no longer polled.
"""

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from weather_alerts.alerts.store import AlertStore
from weather_alerts.api.deps import get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sites", tags=["sites"])


# =============================================================================
# Pydantic Schemas
# =============================================================================


class SiteCreate(BaseModel):
    """Request schema for registering a job site."""

    name: str = Field(..., min_length=1, max_length=255)
    city: Optional[str] = Field(None, max_length=255)
    state: Optional[str] = Field(None, max_length=64)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    manager_name: Optional[str] = Field(None, max_length=255)
    manager_email: Optional[str] = Field(
        None, max_length=1000, description="One address or a comma-separated list"
    )


class SiteUpdate(BaseModel):
    """Request schema for updating a job site. Only provided fields change."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, max_length=255)
    state: Optional[str] = Field(None, max_length=64)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    manager_name: Optional[str] = Field(None, max_length=255)
    manager_email: Optional[str] = Field(None, max_length=1000)


# =============================================================================
# Endpoints
# =============================================================================


@router.get("")
def list_sites(store: AlertStore = Depends(get_store)):
    """List active job sites."""
    return [asdict(site) for site in store.list_active_sites()]


@router.get("/{site_id}")
def get_site(site_id: int, store: AlertStore = Depends(get_store)):
    site = store.get_site(site_id)
    if site is None:
        raise HTTPException(status_code=404, detail=f"Site {site_id} not found")
    return site


@router.post("", status_code=201)
def create_site(body: SiteCreate, store: AlertStore = Depends(get_store)):
    return store.create_site(body.model_dump())


@router.put("/{site_id}")
def update_site(site_id: int, body: SiteUpdate, store: AlertStore = Depends(get_store)):
    site = store.update_site(site_id, body.model_dump(exclude_unset=True))
    if site is None:
        raise HTTPException(status_code=404, detail=f"Site {site_id} not found")
    return site


@router.delete("/{site_id}")
def deactivate_site(site_id: int, store: AlertStore = Depends(get_store)):
    """Soft delete: the site stops being polled, its history is kept."""
    if not store.deactivate_site(site_id):
        raise HTTPException(status_code=404, detail=f"Site {site_id} not found")
    return {"id": site_id, "status": "deactivated"}
