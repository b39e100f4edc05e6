"""
Alert store.

Persists the site registry, the append-only alert history and per-site
cooldown state. Every public method opens its own short-lived session so
concurrent site tasks never share one; database failures surface as
PersistenceError.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterator, List, Optional

from sqlalchemy import DateTime, bindparam, case, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from weather_alerts.alerts.types import AlertCandidate, SiteRef
from weather_alerts.core.api_errors import PersistenceError
from weather_alerts.core.models import AlertCooldown, AlertHistory, JobSite, utcnow

logger = logging.getLogger(__name__)

# Severity display rank for the active-alerts view: warnings first
SEVERITY_ORDER = case(
    (AlertHistory.severity == "warning", 1),
    (AlertHistory.severity == "watch", 2),
    (AlertHistory.severity == "advisory", 3),
    else_=4,
)

SITE_FIELDS = (
    "name",
    "city",
    "state",
    "latitude",
    "longitude",
    "manager_name",
    "manager_email",
)

_UPSERT_COOLDOWN = text("""
    INSERT INTO alert_cooldowns (site_id, alert_type, last_alerted_at)
    VALUES (:site_id, :alert_type, :at)
    ON CONFLICT (site_id, alert_type) DO UPDATE SET
        last_alerted_at = excluded.last_alerted_at
""").bindparams(bindparam("at", type_=DateTime))


def site_to_dict(site: JobSite) -> Dict[str, Any]:
    return {
        "id": site.id,
        "name": site.name,
        "city": site.city,
        "state": site.state,
        "latitude": site.latitude,
        "longitude": site.longitude,
        "manager_name": site.manager_name,
        "manager_email": site.manager_email,
        "is_active": site.is_active,
        "created_at": site.created_at.isoformat() if site.created_at else None,
        "updated_at": site.updated_at.isoformat() if site.updated_at else None,
    }


def _to_site_ref(site: JobSite) -> SiteRef:
    return SiteRef(
        id=site.id,
        name=site.name,
        latitude=site.latitude,
        longitude=site.longitude,
        city=site.city,
        state=site.state,
        manager_name=site.manager_name,
        manager_email=site.manager_email,
    )


def _history_row_to_dict(row: AlertHistory, site: JobSite) -> Dict[str, Any]:
    return {
        "id": row.id,
        "site_id": row.site_id,
        "site_name": site.name,
        "city": site.city,
        "state": site.state,
        "alert_type": row.alert_type,
        "severity": row.severity,
        "label": row.label,
        "threshold_value": row.threshold_value,
        "actual_value": row.actual_value,
        "description": row.description,
        "conditions": row.conditions_json,
        "forecast": row.forecast_json,
        "email_sent": row.email_sent,
        "email_recipient": row.email_recipient,
        "created_at": row.created_at.isoformat() if row.created_at else None,
    }


class AlertStore:
    """
    Persistence for sites, alert history and cooldowns.

    Args:
        session_factory: Callable returning a new SQLAlchemy Session
        clock: Returns the current naive-UTC time (injectable for tests)
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        clock: Callable[[], datetime] = utcnow,
    ):
        self._session_factory = session_factory
        self._clock = clock

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Store operation '{operation}' failed: {e}")
            raise PersistenceError(operation, e) from e
        finally:
            db.close()

    # -------------------------------------------------------------------------
    # Site registry
    # -------------------------------------------------------------------------

    def list_active_sites(self) -> List[SiteRef]:
        """All sites with is_active set, ordered by name."""
        with self._session("list_active_sites") as db:
            sites = (
                db.query(JobSite)
                .filter(JobSite.is_active.is_(True))
                .order_by(JobSite.name)
                .all()
            )
            return [_to_site_ref(s) for s in sites]

    def get_site(self, site_id: int) -> Optional[Dict[str, Any]]:
        with self._session("get_site") as db:
            site = db.get(JobSite, site_id)
            return site_to_dict(site) if site else None

    def create_site(self, data: Dict[str, Any]) -> Dict[str, Any]:
        with self._session("create_site") as db:
            site = JobSite(**{k: data.get(k) for k in SITE_FIELDS}, is_active=True)
            db.add(site)
            db.commit()
            db.refresh(site)
            logger.info(f"Created job site {site.id} ({site.name})")
            return site_to_dict(site)

    def update_site(self, site_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply the given fields; keys outside the site fields are ignored."""
        with self._session("update_site") as db:
            site = db.get(JobSite, site_id)
            if site is None:
                return None
            for key, value in data.items():
                if key in SITE_FIELDS:
                    setattr(site, key, value)
            db.commit()
            db.refresh(site)
            return site_to_dict(site)

    def deactivate_site(self, site_id: int) -> bool:
        """Soft delete. Returns False if the site does not exist."""
        with self._session("deactivate_site") as db:
            site = db.get(JobSite, site_id)
            if site is None:
                return False
            site.is_active = False
            db.commit()
            logger.info(f"Deactivated job site {site_id}")
            return True

    # -------------------------------------------------------------------------
    # Cooldowns
    # -------------------------------------------------------------------------

    def get_last_alerted(self, site_id: int, alert_type: str) -> Optional[datetime]:
        with self._session("get_last_alerted") as db:
            row = (
                db.query(AlertCooldown)
                .filter(
                    AlertCooldown.site_id == site_id,
                    AlertCooldown.alert_type == alert_type,
                )
                .first()
            )
            return row.last_alerted_at if row else None

    def is_cooldown_active(
        self,
        site_id: int,
        alert_type: str,
        window: timedelta,
        now: Optional[datetime] = None,
    ) -> bool:
        """True while less than `window` has elapsed since the last notification."""
        last = self.get_last_alerted(site_id, alert_type)
        if last is None:
            return False
        now = now or self._clock()
        return now - last < window

    def set_cooldown(
        self, site_id: int, alert_type: str, at: Optional[datetime] = None
    ) -> None:
        """Upsert the last-notified time for (site, type). Last writer wins."""
        with self._session("set_cooldown") as db:
            db.execute(
                _UPSERT_COOLDOWN,
                {"site_id": site_id, "alert_type": alert_type, "at": at or self._clock()},
            )
            db.commit()

    # -------------------------------------------------------------------------
    # Alert history
    # -------------------------------------------------------------------------

    def insert_alert_record(
        self,
        site_id: int,
        candidate: AlertCandidate,
        email_sent: bool,
        email_recipient: str = "",
        conditions: Optional[Dict[str, Any]] = None,
        forecast: Optional[List[Dict[str, Any]]] = None,
    ) -> int:
        """
        Append one audit row for a notification attempt.

        Returns:
            The new record id
        """
        with self._session("insert_alert_record") as db:
            record = AlertHistory(
                site_id=site_id,
                alert_type=candidate.hazard_type.value,
                severity=candidate.severity.value,
                label=candidate.label,
                threshold_value=candidate.threshold,
                actual_value=candidate.actual,
                description=candidate.description,
                conditions_json=conditions,
                forecast_json=forecast,
                email_sent=email_sent,
                email_recipient=email_recipient,
                created_at=self._clock(),
            )
            db.add(record)
            db.commit()
            db.refresh(record)
            return record.id

    def list_alert_history(
        self,
        site_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """History rows joined with their site, newest first."""
        with self._session("list_alert_history") as db:
            query = db.query(AlertHistory, JobSite).join(
                JobSite, AlertHistory.site_id == JobSite.id
            )
            if site_id is not None:
                query = query.filter(AlertHistory.site_id == site_id)
            rows = (
                query.order_by(AlertHistory.created_at.desc(), AlertHistory.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [_history_row_to_dict(row, site) for row, site in rows]

    def list_active_alerts(self, window_hours: float = 4) -> List[Dict[str, Any]]:
        """
        Alerts raised within the last `window_hours`.

        Ordered by severity (warning, watch, advisory) then most recent first.
        """
        since = self._clock() - timedelta(hours=window_hours)
        with self._session("list_active_alerts") as db:
            rows = (
                db.query(AlertHistory, JobSite)
                .join(JobSite, AlertHistory.site_id == JobSite.id)
                .filter(AlertHistory.created_at > since)
                .order_by(SEVERITY_ORDER, AlertHistory.created_at.desc(), AlertHistory.id.desc())
                .all()
            )
            return [_history_row_to_dict(row, site) for row, site in rows]


