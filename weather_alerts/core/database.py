"""
Database connection and session management.
"""

import logging
from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from weather_alerts.core.api_errors import StartupFatalError
from weather_alerts.core.config import get_settings
from weather_alerts.core.models import Base

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Singleton engine & session factory: created once, reused everywhere
# ---------------------------------------------------------------------------
_engine = None
_SessionLocal = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str):
    """
    Create an engine for the given URL.

    SQLite (local dev, tests) gets foreign keys switched on so site
    deletes cascade to history and cooldown rows like they do on Postgres.
    """
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,  # Verify connections before using
        echo=False,
    )


def get_engine():
    """
    Get the shared database engine (singleton).

    The engine is created once and reused for the lifetime of the process.
    """
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(settings.database_url)
    return _engine


def create_tables(engine=None):
    """
    Create all tables if they don't exist.

    Idempotent - safe to call multiple times.

    Raises:
        StartupFatalError: If the database cannot be reached
    """
    if engine is None:
        engine = get_engine()

    logger.info("Creating alert tables if they don't exist...")
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        raise StartupFatalError(f"Database unavailable at startup: {e}") from e
    logger.info("Alert tables ready")


def get_session_factory():
    """Get the shared session factory (singleton)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=get_engine()
        )
    return _SessionLocal


def check_connection(engine=None) -> bool:
    """Run SELECT 1; used by the health endpoint."""
    if engine is None:
        engine = get_engine()
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return True
