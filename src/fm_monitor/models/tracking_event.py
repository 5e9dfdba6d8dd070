"""Carrier tracking events, append-only."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from fm_monitor.db.session import Base


class TrackingEvent(Base):
    """A status event reported by the carrier for one tracking code.

    ``tracking_code`` is deliberately not a database foreign key: events for
    codes missing from the shipment registry are kept as orphans.
    """

    __tablename__ = "tracking_events"
    __table_args__ = (
        UniqueConstraint("tracking_code", "event_id", name="uq_tracking_events_code_event"),
        Index("ix_tracking_events_code_timestamp", "tracking_code", "event_timestamp"),
    )

    # Insertion sequence; breaks ties between events sharing a timestamp.
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    tracking_code: Mapped[str] = mapped_column(String(64), nullable=False)
    event_id: Mapped[str] = mapped_column(String(64), nullable=False)
    status_code: Mapped[int] = mapped_column(Integer, nullable=False)
    status_description: Mapped[str] = mapped_column(Text, nullable=False)
    event_timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    received_by: Mapped[str | None] = mapped_column(Text, nullable=True)
