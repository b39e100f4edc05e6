"""
SQLAlchemy models for the alert store.

Three tables:
- job_sites: registry of monitored outdoor job sites (managed through CRUD)
- alert_history: append-only audit of every notification attempt
- alert_cooldowns: last-notified timestamp per (site, base hazard type)
"""
from datetime import datetime, timezone
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp; every DateTime column in this schema is naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class JobSite(Base):
    """
    An outdoor job site monitored for weather hazards.

    Only sites with is_active set are polled. Deactivation is a soft delete
    so alert history stays attached to the site.
    """
    __tablename__ = "job_sites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    city = Column(String(255), nullable=True)
    state = Column(String(64), nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    manager_name = Column(String(255), nullable=True)
    manager_email = Column(String(1000), nullable=True)  # comma-separated allowed
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return (
            f"<JobSite(id={self.id}, name={self.name}, "
            f"lat={self.latitude}, lon={self.longitude}, active={self.is_active})>"
        )


class AlertHistory(Base):
    """
    Audit row for one notification attempt.

    Append-only: rows are never updated after insert. email_sent reflects
    the dispatcher result; email_recipient is empty when the site has no
    manager contact configured.
    """
    __tablename__ = "alert_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    site_id = Column(
        Integer,
        ForeignKey("job_sites.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    alert_type = Column(String(50), nullable=False)  # full type, e.g. "forecast_heat"
    severity = Column(String(20), nullable=False, default="watch")
    label = Column(String(255), nullable=True)
    threshold_value = Column(Float, nullable=False)
    actual_value = Column(Float, nullable=False)
    description = Column(Text, nullable=True)

    # Context at evaluation time
    conditions_json = Column(JSON, nullable=True)
    forecast_json = Column(JSON, nullable=True)

    # Delivery
    email_sent = Column(Boolean, nullable=False, default=False)
    email_recipient = Column(String(1000), nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_alert_history_created", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<AlertHistory(id={self.id}, site_id={self.site_id}, "
            f"type={self.alert_type}, severity={self.severity}, sent={self.email_sent})>"
        )


class AlertCooldown(Base):
    """
    Last notification time per (site, base hazard type).

    One row per key with upsert semantics; removed only through the site
    cascade.
    """
    __tablename__ = "alert_cooldowns"

    id = Column(Integer, primary_key=True, autoincrement=True)
    site_id = Column(
        Integer,
        ForeignKey("job_sites.id", ondelete="CASCADE"),
        nullable=False,
    )
    alert_type = Column(String(50), nullable=False)
    last_alerted_at = Column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("site_id", "alert_type", name="uq_cooldown_site_type"),
    )

    def __repr__(self) -> str:
        return (
            f"<AlertCooldown(site_id={self.site_id}, type={self.alert_type}, "
            f"last_alerted_at={self.last_alerted_at})>"
        )
