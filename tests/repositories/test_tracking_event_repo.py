"""Tests for the tracking event store."""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from fm_monitor.db.errors import StorageError
from fm_monitor.models import TrackingEvent
from fm_monitor.repositories import TrackingEventRepository
from tests.helpers import T0


def _event(event_id, *, code="TRK1", status=3, at=T0, description="In transit", received_by=None):
    return TrackingEvent(
        tracking_code=code,
        event_id=event_id,
        status_code=status,
        status_description=description,
        event_timestamp=at,
        received_by=received_by,
    )


def _count(db_session, code="TRK1"):
    return db_session.execute(
        select(func.count()).select_from(TrackingEvent).where(TrackingEvent.tracking_code == code)
    ).scalar_one()


def test_upsert_inserts_new_event(db_session):
    repo = TrackingEventRepository(db_session)

    assert repo.upsert(_event("E1")) is True

    stored = repo.get("TRK1", "E1")
    assert stored is not None
    assert stored.status_code == 3
    assert stored.status_description == "In transit"


def test_upsert_is_idempotent(db_session):
    repo = TrackingEventRepository(db_session)

    assert repo.upsert(_event("E1")) is True
    assert repo.upsert(_event("E1")) is False

    assert _count(db_session) == 1


def test_upsert_never_updates_existing_row(db_session):
    repo = TrackingEventRepository(db_session)
    repo.upsert(_event("E1", description="Left the hub"))

    repo.upsert(_event("E1", status=4, description="Rewritten by carrier"))

    stored = repo.get("TRK1", "E1")
    assert stored.status_code == 3
    assert stored.status_description == "Left the hub"


def test_same_event_id_on_other_shipment_is_distinct(db_session):
    repo = TrackingEventRepository(db_session)

    assert repo.upsert(_event("E1", code="TRK1")) is True
    assert repo.upsert(_event("E1", code="TRK2")) is True

    assert _count(db_session, "TRK1") == 1
    assert _count(db_session, "TRK2") == 1


def test_list_orders_newest_first(db_session):
    repo = TrackingEventRepository(db_session)
    repo.upsert(_event("E1", status=2, at=T0))
    repo.upsert(_event("E3", status=4, at=T0 + timedelta(hours=10)))
    repo.upsert(_event("E2", status=3, at=T0 + timedelta(hours=5)))

    events = repo.list_by_tracking_code("TRK1")

    assert [event.event_id for event in events] == ["E3", "E2", "E1"]


def test_equal_timestamps_break_ties_by_insertion(db_session):
    repo = TrackingEventRepository(db_session)
    at = T0 + timedelta(hours=3)
    repo.upsert(_event("B", status=3, at=at))
    repo.upsert(_event("A", status=4, at=at))

    latest = repo.latest_by_tracking_code("TRK1")

    assert latest.event_id == "A"
    assert [event.event_id for event in repo.list_by_tracking_code("TRK1")] == ["A", "B"]


def test_latest_returns_none_without_events(db_session):
    repo = TrackingEventRepository(db_session)
    assert repo.latest_by_tracking_code("UNKNOWN") is None
    assert repo.list_by_tracking_code("UNKNOWN") == []


def test_upsert_keeps_receiver_name(db_session):
    repo = TrackingEventRepository(db_session)
    repo.upsert(_event("E9", status=5, description="Delivered", received_by="João"))

    assert repo.get("TRK1", "E9").received_by == "João"


def test_upsert_wraps_database_errors(db_session):
    repo = TrackingEventRepository(db_session)

    with pytest.raises(StorageError):
        repo.upsert(_event(None))
