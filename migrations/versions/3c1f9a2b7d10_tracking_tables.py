"""shipments and tracking events

Revision ID: 3c1f9a2b7d10
Revises:
Create Date: 2026-10-19 09:12:44.318204

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f9a2b7d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the shipment registry and the tracking event store."""
    op.create_table(
        "shipments",
        sa.Column("tracking_code", sa.String(length=64), nullable=False),
        sa.Column("order_number", sa.String(length=64), nullable=False),
        sa.Column("customer_name", sa.Text(), nullable=False),
        sa.Column("customer_phone", sa.String(length=32), nullable=True),
        sa.Column("destination_summary", sa.Text(), nullable=False),
        sa.Column("dispatched_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("tracking_code"),
    )
    op.create_index("ix_shipments_dispatched_at", "shipments", ["dispatched_at"])

    op.create_table(
        "tracking_events",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            autoincrement=True,
            nullable=False,
        ),
        sa.Column("tracking_code", sa.String(length=64), nullable=False),
        sa.Column("event_id", sa.String(length=64), nullable=False),
        sa.Column("status_code", sa.Integer(), nullable=False),
        sa.Column("status_description", sa.Text(), nullable=False),
        sa.Column("event_timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("received_by", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tracking_code", "event_id", name="uq_tracking_events_code_event"),
    )
    op.create_index(
        "ix_tracking_events_code_timestamp",
        "tracking_events",
        ["tracking_code", "event_timestamp"],
    )


def downgrade() -> None:
    """Drop the monitor tables."""
    op.drop_index("ix_tracking_events_code_timestamp", table_name="tracking_events")
    op.drop_table("tracking_events")
    op.drop_index("ix_shipments_dispatched_at", table_name="shipments")
    op.drop_table("shipments")
