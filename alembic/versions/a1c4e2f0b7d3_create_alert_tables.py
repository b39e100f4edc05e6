"""create alert tables

Revision ID: a1c4e2f0b7d3
Revises:
Create Date: 2026-10-18 09:00:00.000000

Creates job_sites, alert_history and alert_cooldowns. New databases can
also rely on create_all() in the app lifespan and then be stamped with:

    alembic stamp head
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'a1c4e2f0b7d3'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "job_sites",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("city", sa.String(255), nullable=True),
        sa.Column("state", sa.String(64), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("manager_name", sa.String(255), nullable=True),
        sa.Column("manager_email", sa.String(1000), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_job_sites_is_active", "job_sites", ["is_active"])

    op.create_table(
        "alert_history",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "site_id",
            sa.Integer(),
            sa.ForeignKey("job_sites.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("alert_type", sa.String(50), nullable=False),
        sa.Column("severity", sa.String(20), nullable=False),
        sa.Column("label", sa.String(255), nullable=True),
        sa.Column("threshold_value", sa.Float(), nullable=False),
        sa.Column("actual_value", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("conditions_json", sa.JSON(), nullable=True),
        sa.Column("forecast_json", sa.JSON(), nullable=True),
        sa.Column("email_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("email_recipient", sa.String(1000), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_alert_history_site_id", "alert_history", ["site_id"])
    op.create_index("idx_alert_history_created", "alert_history", ["created_at"])

    op.create_table(
        "alert_cooldowns",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "site_id",
            sa.Integer(),
            sa.ForeignKey("job_sites.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("alert_type", sa.String(50), nullable=False),
        sa.Column("last_alerted_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("site_id", "alert_type", name="uq_cooldown_site_type"),
    )


def downgrade() -> None:
    op.drop_table("alert_cooldowns")
    op.drop_index("idx_alert_history_created", table_name="alert_history")
    op.drop_index("ix_alert_history_site_id", table_name="alert_history")
    op.drop_table("alert_history")
    op.drop_index("ix_job_sites_is_active", table_name="job_sites")
    op.drop_table("job_sites")
