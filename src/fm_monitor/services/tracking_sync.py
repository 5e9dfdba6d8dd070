"""Synchronization of carrier tracking events into the local event store.

The carrier is the source of truth for event history. Every pass re-reads
what the carrier reports and inserts whatever the event store does not have
yet; inserts are idempotent, so a pass can be repeated at any time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fm_monitor.core.config import MonitorConfig
from fm_monitor.core.status import describe, is_final
from fm_monitor.db.errors import StorageError
from fm_monitor.models import TrackingEvent
from fm_monitor.repositories import ShipmentRepository, TrackingEventRepository
from fm_monitor.schemas.carrier import CarrierTrackingEvent
from fm_monitor.services.carrier import CarrierClient, CarrierError

# Configure logger for this module
logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class SyncResult:
    """Outcome counters for a synchronization pass."""

    updated: int = 0
    errors: int = 0


@dataclass(frozen=True)
class StoreResult:
    """Per-event outcome of writing one carrier response."""

    stored: int = 0
    skipped: int = 0
    failed: int = 0


class TrackingSynchronizer:
    """Pulls event history from the carrier and reconciles the event store."""

    def __init__(
        self,
        session: Session,
        client: CarrierClient,
        config: MonitorConfig,
        *,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """Initialize the synchronizer.

        Args:
            session: Database session used for both registry reads and event writes.
            client: Carrier client (anything exposing ``fetch_tracking``).
            config: Monitor configuration; provides the sweep pacing delay.
            sleep: Awaitable used to pace sweeps, replaceable in tests.
        """
        self.session = session
        self.client = client
        self.config = config
        self.events = TrackingEventRepository(session)
        self.shipments = ShipmentRepository(session)
        self._sleep = sleep

    async def fetch_remote_events(self, tracking_code: str | None = None) -> list[TrackingEvent]:
        """Return the carrier's events for one shipment, or the whole account feed.

        Carrier failures are logged and yield an empty list.
        """
        try:
            return await self._pull(tracking_code)
        except CarrierError as exc:
            logger.error("Failed to fetch tracking for %s: %s", tracking_code or "account", exc)
            return []

    async def sync_one(self, tracking_code: str) -> bool:
        """Fetch one shipment's events and store any new ones.

        Callable regardless of the shipment's status. Returns True when the
        carrier answered and its events were processed, False when the carrier
        call failed and nothing changed.

        Raises:
            ValueError: if ``tracking_code`` is empty; the account feed is
                only fetched through ``sync_feed``.
        """
        if not tracking_code or not tracking_code.strip():
            raise ValueError("tracking_code must not be empty")

        try:
            await self._sync(tracking_code)
        except CarrierError as exc:
            logger.error("Failed to fetch tracking for %s: %s", tracking_code, exc)
            return False
        return True

    async def sync_all(self) -> SyncResult:
        """Resynchronize every shipment that has not reached a terminal status.

        Shipments are processed one at a time with ``sync_delay_seconds``
        between carrier calls. A failing shipment is counted and skipped.
        """
        pending = self.pending_tracking_codes()
        logger.info("Starting tracking sweep over %d shipments", len(pending))

        updated = 0
        errors = 0
        for index, tracking_code in enumerate(pending):
            if index:
                await self._sleep(self.config.sync_delay_seconds)
            try:
                await self._sync(tracking_code)
            except (CarrierError, StorageError) as exc:
                errors += 1
                logger.warning("Tracking sync failed for %s: %s", tracking_code, exc)
            else:
                updated += 1

        logger.info("Tracking sweep finished: %d updated, %d errors", updated, errors)
        return SyncResult(updated=updated, errors=errors)

    async def sync_feed(self) -> SyncResult:
        """Store every event from the account-wide feed in a single carrier call.

        ``updated`` counts newly stored events, ``errors`` counts events that
        could not be written (or 1 when the carrier call itself failed).
        """
        try:
            events = await self._pull(None)
        except CarrierError as exc:
            logger.error("Failed to fetch account tracking feed: %s", exc)
            return SyncResult(errors=1)

        outcome = self._store(events)
        logger.info(
            "Account feed processed: %d new, %d known, %d failed",
            outcome.stored,
            outcome.skipped,
            outcome.failed,
        )
        return SyncResult(updated=outcome.stored, errors=outcome.failed)

    def pending_tracking_codes(self) -> list[str]:
        """Return tracking codes whose latest stored status is not terminal."""
        pending = []
        for shipment in self.shipments.list_all():
            latest = self.events.latest_by_tracking_code(shipment.tracking_code)
            if latest is not None and is_final(latest.status_code):
                continue
            pending.append(shipment.tracking_code)
        return pending

    async def _sync(self, tracking_code: str) -> StoreResult:
        events = await self._pull(tracking_code)
        outcome = self._store(events)
        logger.debug(
            "Synced %s: %d new, %d known, %d failed",
            tracking_code,
            outcome.stored,
            outcome.skipped,
            outcome.failed,
        )
        return outcome

    async def _pull(self, tracking_code: str | None) -> list[TrackingEvent]:
        remote = await self.client.fetch_tracking(tracking_code)
        return [self._to_event(item, tracking_code) for item in remote]

    def _store(self, events: Iterable[TrackingEvent]) -> StoreResult:
        stored = skipped = failed = 0
        for event in events:
            try:
                if self.events.upsert(event):
                    stored += 1
                else:
                    skipped += 1
            except StorageError as exc:
                failed += 1
                logger.warning("Failed to store tracking event: %s", exc)

        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(f"Failed to commit tracking events: {exc}") from exc

        return StoreResult(stored=stored, skipped=skipped, failed=failed)

    @staticmethod
    def _to_event(remote: CarrierTrackingEvent, requested_code: str | None) -> TrackingEvent:
        return TrackingEvent(
            tracking_code=remote.tracking_code or requested_code,
            event_id=remote.tracking_id,
            status_code=remote.status,
            status_description=remote.status_description or describe(remote.status),
            event_timestamp=remote.event_timestamp,
            received_by=remote.received_by,
        )
