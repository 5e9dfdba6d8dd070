"""Shipments dispatched to FM Transportes."""

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fm_monitor.db.session import Base
from fm_monitor.db.time import utcnow


class Shipment(Base):
    """One parcel handed to the carrier, keyed by the carrier's tracking code.

    Rows are written once by the send workflow and never modified by the
    monitor.
    """

    __tablename__ = "shipments"
    __table_args__ = (Index("ix_shipments_dispatched_at", "dispatched_at"),)

    tracking_code: Mapped[str] = mapped_column(String(64), primary_key=True)
    order_number: Mapped[str] = mapped_column(String(64), nullable=False)
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    customer_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # "City - UF", as shown on the monitoring board.
    destination_summary: Mapped[str] = mapped_column(Text, nullable=False, default="")

    dispatched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
