"""
Main FastAPI application.

Builds the alert engine once at startup (store, conditions provider,
dispatcher, fan-out, scheduler), starts the scheduler and serves the
HTTP surface.
"""
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from functools import partial

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weather_alerts.alerts.cooldown import CooldownGate
from weather_alerts.alerts.fanout import SiteFanOut
from weather_alerts.alerts.scheduler import WeatherCheckScheduler
from weather_alerts.alerts.store import AlertStore
from weather_alerts.api.v1 import alerts, sites, weather
from weather_alerts.core.config import Settings, get_settings
from weather_alerts.core.database import check_connection, create_tables, get_session_factory
from weather_alerts.notifications.dispatcher import ResendEmailDispatcher
from weather_alerts.notifications.renderer import render_alert_email
from weather_alerts.sources.conditions import LiveConditionsProvider
from weather_alerts.sources.nws.client import NWSClient
from weather_alerts.sources.open_meteo.client import OpenMeteoClient

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "Job Site Weather Alerts"
VERSION = "0.1.0"


def build_engine_components(settings: Settings, session_factory) -> dict:
    """Construct every collaborator of the alert engine with explicit ownership."""
    client_options = {
        "max_concurrency": settings.max_concurrent_sites,
        "max_retries": settings.max_retries,
        "timeout": settings.http_timeout_seconds,
    }
    provider = LiveConditionsProvider(
        weather_client=OpenMeteoClient(**client_options),
        advisory_client=NWSClient(user_agent=settings.nws_user_agent, **client_options),
    )
    store = AlertStore(session_factory)
    gate = CooldownGate(store, window=timedelta(hours=settings.cooldown_hours))
    dispatcher = ResendEmailDispatcher(
        api_key=settings.resend_api_key,
        sender=settings.email_from,
        timeout=settings.http_timeout_seconds,
    )
    fanout = SiteFanOut(
        store=store,
        provider=provider,
        dispatcher=dispatcher,
        gate=gate,
        current_thresholds=settings.current_thresholds(),
        forecast_thresholds=settings.forecast_thresholds(),
        renderer=partial(render_alert_email, poll_interval_minutes=settings.poll_interval_minutes),
        max_concurrency=settings.max_concurrent_sites,
        site_timeout=settings.site_timeout_seconds,
    )
    scheduler = WeatherCheckScheduler(
        fanout,
        poll_interval_minutes=settings.poll_interval_minutes,
        initial_delay_seconds=settings.initial_check_delay_seconds,
    )
    return {
        "store": store,
        "provider": provider,
        "dispatcher": dispatcher,
        "scheduler": scheduler,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Runs on startup and shutdown. A database that cannot be reached at
    startup is fatal: StartupFatalError propagates and nothing is served
    or scheduled.
    """
    # Startup
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)
    logger.info(f"Starting {SERVICE_NAME}")
    logger.info(f"Poll interval: {settings.poll_interval_minutes} min, cooldown: {settings.cooldown_hours} h")

    create_tables()

    components = build_engine_components(settings, get_session_factory())
    app.state.settings = settings
    for name, component in components.items():
        setattr(app.state, name, component)

    if not settings.is_email_configured():
        logger.warning("Resend API key not configured: alerts will be logged, not emailed")

    components["scheduler"].start()

    yield

    # Shutdown
    components["scheduler"].shutdown()
    await components["provider"].close()
    logger.info("Shutting down")


# Create FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="Weather hazard monitoring and safety alerts for outdoor job sites",
    version=VERSION,
    lifespan=lifespan
)

# CORS middleware (configure as needed)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(sites.router, prefix="/api/v1")
app.include_router(weather.router, prefix="/api/v1")
app.include_router(alerts.router, prefix="/api/v1")


@app.get("/")
def root():
    """Root endpoint with service info."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    """
    Health check endpoint.

    Returns status of the service and database connectivity.
    """
    health_status = {
        "status": "healthy",
        "service": "running",
        "database": "unknown"
    }

    try:
        check_connection()
        health_status["database"] = "connected"
    except Exception as e:
        health_status["status"] = "degraded"
        health_status["database"] = f"error: {str(e)}"
        logger.warning(f"Database health check failed: {e}")

    return health_status
