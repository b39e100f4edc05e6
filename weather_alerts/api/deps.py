"""
FastAPI dependencies.

The collaborators are built once in the application lifespan and stored on
app.state; routes pull them from there instead of module-level globals.
"""
from fastapi import Request

from weather_alerts.alerts.scheduler import WeatherCheckScheduler
from weather_alerts.alerts.store import AlertStore
from weather_alerts.core.config import Settings
from weather_alerts.sources.conditions import ConditionsProvider


def get_store(request: Request) -> AlertStore:
    return request.app.state.store


def get_provider(request: Request) -> ConditionsProvider:
    return request.app.state.provider


def get_scheduler(request: Request) -> WeatherCheckScheduler:
    return request.app.state.scheduler


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
