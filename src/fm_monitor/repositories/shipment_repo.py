"""Shipment registry access."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fm_monitor.db.errors import StorageError
from fm_monitor.db.time import ensure_utc, utcnow
from fm_monitor.models.shipment import Shipment

__all__ = ["ShipmentRepository", "format_destination"]


def format_destination(city: str | None, state: str | None) -> str:
    """Return the "City - UF" summary shown for a shipment's destination."""
    parts = [part.strip() for part in (city or "", (state or "").upper()) if part and part.strip()]
    return " - ".join(parts)


class ShipmentRepository:
    """Read access to dispatched shipments, plus registration for the send workflow."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_all(self) -> list[Shipment]:
        """Return every dispatched shipment, most recently dispatched first."""
        result = self.session.execute(
            select(Shipment).order_by(Shipment.dispatched_at.desc(), Shipment.tracking_code)
        )
        return list(result.scalars())

    def get_by_tracking_code(self, tracking_code: str) -> Shipment | None:
        """Return a shipment by its tracking code."""
        return self.session.get(Shipment, tracking_code)

    def register(
        self,
        *,
        tracking_code: str,
        order_number: str,
        customer_name: str,
        destination_summary: str | None = None,
        destination_city: str | None = None,
        destination_state: str | None = None,
        customer_phone: str | None = None,
        dispatched_at: datetime | None = None,
    ) -> Shipment:
        """Record a dispatched shipment, keeping an existing row untouched.

        Without an explicit ``destination_summary`` one is built from the
        destination city and state. Re-registering a known tracking code
        returns the stored shipment.
        """
        existing = self.get_by_tracking_code(tracking_code)
        if existing is not None:
            return existing

        if destination_summary is None:
            destination_summary = format_destination(destination_city, destination_state)

        shipment = Shipment(
            tracking_code=tracking_code,
            order_number=order_number,
            customer_name=customer_name,
            customer_phone=customer_phone,
            destination_summary=destination_summary,
            dispatched_at=ensure_utc(dispatched_at) if dispatched_at else utcnow(),
        )
        try:
            self.session.add(shipment)
            self.session.flush()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(f"Failed to register shipment {tracking_code}: {exc}") from exc
        return shipment
