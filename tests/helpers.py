"""Shared test doubles and builders."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from fm_monitor.schemas.carrier import CarrierTrackingEvent
from fm_monitor.services.carrier import TransientCarrierError

# Fixed reference instant used as dispatch time across tests.
T0 = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)


class FakeCarrier:
    """In-memory stand-in for the carrier client that records every call."""

    def __init__(self) -> None:
        self.responses: dict[str, list[CarrierTrackingEvent]] = {}
        self.failures: set[str | None] = set()
        self.calls: list[str | None] = []

    def add(self, *events: CarrierTrackingEvent) -> None:
        for item in events:
            self.responses.setdefault(item.tracking_code or "", []).append(item)

    def replace(self, tracking_code: str, *events: CarrierTrackingEvent) -> None:
        self.responses[tracking_code] = list(events)

    async def fetch_tracking(self, tracking_code: str | None = None) -> list[CarrierTrackingEvent]:
        self.calls.append(tracking_code)
        if tracking_code in self.failures:
            raise TransientCarrierError(f"carrier unavailable for {tracking_code}")
        if tracking_code is None:
            return [item for events in self.responses.values() for item in events]
        return list(self.responses.get(tracking_code, []))

    async def health_check(self) -> dict[str, Any]:
        return {"status": "ok", "url": "http://carrier.test"}

    async def close(self) -> None:
        return None


def carrier_event(
    tracking_code: str,
    event_id: str,
    status: int,
    at: datetime,
    *,
    description: str | None = None,
    received_by: str | None = None,
) -> CarrierTrackingEvent:
    """Build a carrier payload event."""
    return CarrierTrackingEvent(
        tracking_id=event_id,
        tracking_code=tracking_code,
        status=status,
        status_description=description,
        event_timestamp=at,
        received_by=received_by,
    )


def hours_ago(hours: float) -> datetime:
    """Return a UTC instant ``hours`` before now."""
    return datetime.now(UTC) - timedelta(hours=hours)
