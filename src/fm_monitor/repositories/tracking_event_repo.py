"""Event store: append-only tracking events deduplicated per tracking code."""
from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from fm_monitor.db.errors import StorageError
from fm_monitor.db.time import ensure_utc
from fm_monitor.models.tracking_event import TrackingEvent

__all__ = ["TrackingEventRepository"]

_CONFLICT_COLUMNS = ["tracking_code", "event_id"]


class TrackingEventRepository:
    """Thin wrapper around database access for tracking events.

    Events are never updated or deleted. Re-inserting an event whose
    ``(tracking_code, event_id)`` pair is already stored is a silent no-op,
    so the first stored copy always wins.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def upsert(self, event: TrackingEvent) -> bool:
        """Insert a transient event unless its key is already stored.

        Returns True when a new row was written. Raises ``StorageError`` on
        database failures; the savepoint keeps a failed insert from poisoning
        the surrounding transaction.
        """
        values = {
            "tracking_code": event.tracking_code,
            "event_id": event.event_id,
            "status_code": event.status_code,
            "status_description": event.status_description,
            "event_timestamp": ensure_utc(event.event_timestamp),
            "received_by": event.received_by,
        }
        try:
            with self.session.begin_nested():
                return self._insert_ignore(values)
        except SQLAlchemyError as exc:
            raise StorageError(
                f"Failed to store event {event.event_id} for {event.tracking_code}: {exc}"
            ) from exc

    def _insert_ignore(self, values: dict[str, Any]) -> bool:
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            stmt = pg_insert(TrackingEvent).values(**values).on_conflict_do_nothing(
                index_elements=_CONFLICT_COLUMNS
            )
        elif dialect == "sqlite":
            stmt = sqlite_insert(TrackingEvent).values(**values).on_conflict_do_nothing(
                index_elements=_CONFLICT_COLUMNS
            )
        else:
            return self._insert_if_absent(values)
        result = self.session.execute(stmt)
        return bool(result.rowcount)

    def _insert_if_absent(self, values: dict[str, Any]) -> bool:
        if self.get(values["tracking_code"], values["event_id"]) is not None:
            return False
        try:
            with self.session.begin_nested():
                self.session.add(TrackingEvent(**values))
                self.session.flush()
        except IntegrityError:
            # Lost a race against a concurrent insert of the same event.
            return False
        return True

    def get(self, tracking_code: str, event_id: str) -> TrackingEvent | None:
        """Return a single stored event by its natural key."""
        return self.session.execute(
            select(TrackingEvent).where(
                TrackingEvent.tracking_code == tracking_code,
                TrackingEvent.event_id == event_id,
            )
        ).scalars().first()

    def list_by_tracking_code(self, tracking_code: str) -> list[TrackingEvent]:
        """Return a shipment's events, newest first.

        Events sharing a timestamp are ordered by insertion, latest stored first.
        """
        result = self.session.execute(
            select(TrackingEvent)
            .where(TrackingEvent.tracking_code == tracking_code)
            .order_by(TrackingEvent.event_timestamp.desc(), TrackingEvent.id.desc())
        )
        return list(result.scalars())

    def latest_by_tracking_code(self, tracking_code: str) -> TrackingEvent | None:
        """Return the newest event for a shipment, or None."""
        return self.session.execute(
            select(TrackingEvent)
            .where(TrackingEvent.tracking_code == tracking_code)
            .order_by(TrackingEvent.event_timestamp.desc(), TrackingEvent.id.desc())
            .limit(1)
        ).scalars().first()
