"""Derived delivery state, summaries and stall alerts.

Nothing here is persisted: every view is recomputed from the shipment
registry and the event store on each call. Only ``get_shipment_detail``
touches the network, by running a single-shipment resync before reading.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from sqlalchemy.orm import Session

from fm_monitor.core.config import MonitorConfig
from fm_monitor.core.status import STATUS_CREATED, describe, is_final
from fm_monitor.db.errors import StorageError
from fm_monitor.db.time import ensure_utc, utcnow
from fm_monitor.models import Shipment, TrackingEvent
from fm_monitor.repositories import ShipmentRepository, TrackingEventRepository
from fm_monitor.services.tracking_sync import TrackingSynchronizer

# Configure logger for this module
logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600


class AlertPriority(str, Enum):
    """Urgency of a stalled shipment, driven purely by hours without movement."""

    NORMAL = "normal"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ShipmentState:
    """Live state of a shipment derived from its newest tracking event."""

    latest_status_code: int
    latest_status_description: str
    last_movement_at: datetime
    hours_since_last_movement: int
    alert_active: bool

    @property
    def is_final(self) -> bool:
        return is_final(self.latest_status_code)


@dataclass(frozen=True)
class ShipmentView:
    shipment: Shipment
    state: ShipmentState


@dataclass(frozen=True)
class ShipmentDetail:
    """Registry record, derived state and full event history of one shipment.

    ``resynced`` is False when the live carrier refresh failed and the
    history comes from previously stored events only.
    """

    shipment: Shipment
    state: ShipmentState
    events: list[TrackingEvent]
    resynced: bool


@dataclass(frozen=True)
class MonitorSummary:
    total: int
    in_transit: int
    delivered: int
    stalled_24h: int
    stalled_48h: int


@dataclass(frozen=True)
class AlertEntry:
    shipment: Shipment
    state: ShipmentState
    priority: AlertPriority


def hours_between(start: datetime, end: datetime) -> int:
    """Return the whole hours elapsed from ``start`` to ``end``, never negative."""
    elapsed = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    return max(0, int(elapsed // SECONDS_PER_HOUR))


def classify_priority(hours: int, *, medium_hours: int = 24, high_hours: int = 48) -> AlertPriority:
    """Map hours without movement to an alert priority."""
    if hours >= high_hours:
        return AlertPriority.HIGH
    if hours >= medium_hours:
        return AlertPriority.MEDIUM
    return AlertPriority.NORMAL


def derive_state(
    shipment: Shipment,
    latest: TrackingEvent | None,
    *,
    now: datetime,
    alert_threshold_hours: int = 24,
) -> ShipmentState:
    """Compute a shipment's live state from its newest event.

    Without events the shipment is reported as created, and staleness is
    measured from the dispatch time.
    """
    dispatched_at = ensure_utc(shipment.dispatched_at)
    if latest is None:
        code = STATUS_CREATED
        description = describe(STATUS_CREATED)
        last_movement = dispatched_at
    else:
        code = latest.status_code
        description = latest.status_description or describe(code)
        last_movement = max(ensure_utc(latest.event_timestamp), dispatched_at)

    hours = hours_between(last_movement, now)
    return ShipmentState(
        latest_status_code=code,
        latest_status_description=description,
        last_movement_at=last_movement,
        hours_since_last_movement=hours,
        alert_active=hours >= alert_threshold_hours and not is_final(code),
    )


class ShipmentMonitor:
    """Read-side views over dispatched shipments."""

    def __init__(
        self,
        session: Session,
        config: MonitorConfig,
        synchronizer: TrackingSynchronizer | None = None,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the monitor.

        Args:
            session: Database session for registry and event store reads.
            config: Alert thresholds.
            synchronizer: Used by ``get_shipment_detail`` to refresh a
                shipment before reading. Without one, details are read-only.
            clock: Source of "now", replaceable in tests.
        """
        self.config = config
        self.shipments = ShipmentRepository(session)
        self.events = TrackingEventRepository(session)
        self.synchronizer = synchronizer
        self._clock = clock

    def list_shipments(self) -> list[ShipmentView]:
        """Return every shipment with its derived state, newest dispatch first."""
        now = self._clock()
        views = []
        for shipment in self.shipments.list_all():
            latest = self.events.latest_by_tracking_code(shipment.tracking_code)
            views.append(ShipmentView(shipment=shipment, state=self._derive(shipment, latest, now)))
        return views

    async def get_shipment_detail(self, tracking_code: str) -> ShipmentDetail | None:
        """Resync one shipment from the carrier, then return its full view.

        Returns None when the tracking code is not registered. A failed
        resync degrades to the stored history instead of raising.
        """
        shipment = self.shipments.get_by_tracking_code(tracking_code)
        if shipment is None:
            return None

        resynced = await self._refresh(tracking_code)
        return self.read_shipment_detail(shipment, resynced=resynced)

    def read_shipment_detail(self, shipment: Shipment, *, resynced: bool = False) -> ShipmentDetail:
        """Build a detail view from stored events only."""
        events = self.events.list_by_tracking_code(shipment.tracking_code)
        latest = events[0] if events else None
        return ShipmentDetail(
            shipment=shipment,
            state=self._derive(shipment, latest, self._clock()),
            events=events,
            resynced=resynced,
        )

    def summary(self) -> MonitorSummary:
        """Aggregate counts over all shipments.

        Stalled counters only include non-terminal shipments and overlap: a
        shipment stalled past the critical threshold is counted in both.
        """
        views = self.list_shipments()
        open_states = [view.state for view in views if not view.state.is_final]
        total = len(views)
        in_transit = len(open_states)
        return MonitorSummary(
            total=total,
            in_transit=in_transit,
            delivered=total - in_transit,
            stalled_24h=sum(
                1
                for state in open_states
                if state.hours_since_last_movement >= self.config.alert_threshold_hours
            ),
            stalled_48h=sum(
                1
                for state in open_states
                if state.hours_since_last_movement >= self.config.critical_threshold_hours
            ),
        )

    def alerts(self, min_hours: int | None = None) -> list[AlertEntry]:
        """Return non-terminal shipments idle for at least ``min_hours``, longest idle first."""
        if min_hours is None:
            min_hours = self.config.alert_threshold_hours

        entries = [
            AlertEntry(
                shipment=view.shipment,
                state=view.state,
                priority=classify_priority(
                    view.state.hours_since_last_movement,
                    medium_hours=self.config.alert_threshold_hours,
                    high_hours=self.config.critical_threshold_hours,
                ),
            )
            for view in self.list_shipments()
            if not view.state.is_final and view.state.hours_since_last_movement >= min_hours
        ]
        entries.sort(key=lambda entry: entry.state.hours_since_last_movement, reverse=True)
        return entries

    async def _refresh(self, tracking_code: str) -> bool:
        if self.synchronizer is None:
            return False
        try:
            return await self.synchronizer.sync_one(tracking_code)
        except StorageError as exc:
            logger.warning("Resync of %s failed, serving stored events: %s", tracking_code, exc)
            return False

    def _derive(
        self, shipment: Shipment, latest: TrackingEvent | None, now: datetime
    ) -> ShipmentState:
        return derive_state(
            shipment,
            latest,
            now=now,
            alert_threshold_hours=self.config.alert_threshold_hours,
        )
