# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from fm_monitor.api.v1 import dependencies
from fm_monitor.api.v1.dependencies import MonitorConfigDep, SessionDep
from fm_monitor.core.config import MonitorConfig
from fm_monitor.db.session import Base
from fm_monitor.db.session import get_db as app_get_session
from fm_monitor.main import app as fastapi_app
from fm_monitor.models import Shipment
from fm_monitor.repositories import ShipmentRepository
from fm_monitor.services.tracking_sync import TrackingSynchronizer
from tests.helpers import T0, FakeCarrier

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    # Session commits release savepoints; the outer transaction is rolled back.
    session = Session(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def monitor_config() -> MonitorConfig:
    return MonitorConfig()


@pytest.fixture()
def fake_carrier() -> FakeCarrier:
    return FakeCarrier()


@pytest.fixture()
def sleeps() -> list[float]:
    """Delays requested by the synchronizer, recorded instead of slept."""
    return []


@pytest.fixture()
def record_sleep(sleeps: list[float]) -> Callable[[float], Any]:
    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return _sleep


@pytest.fixture()
def synchronizer(
    db_session: Session,
    fake_carrier: FakeCarrier,
    monitor_config: MonitorConfig,
    record_sleep: Callable[[float], Any],
) -> TrackingSynchronizer:
    return TrackingSynchronizer(db_session, fake_carrier, monitor_config, sleep=record_sleep)


@pytest.fixture()
def make_shipment(db_session: Session) -> Callable[..., Shipment]:
    """Return a factory registering shipments in the test database."""
    repo = ShipmentRepository(db_session)

    def _make(
        tracking_code: str,
        *,
        dispatched_at: datetime = T0,
        order_number: str | None = None,
        customer_name: str = "Maria Souza",
        customer_phone: str | None = "+55 11 99999-0000",
        destination_summary: str = "Campinas - SP",
    ) -> Shipment:
        return repo.register(
            tracking_code=tracking_code,
            order_number=order_number or f"PED-{tracking_code}",
            customer_name=customer_name,
            customer_phone=customer_phone,
            destination_summary=destination_summary,
            dispatched_at=dispatched_at,
        )

    return _make


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def override_carrier(
    app: FastAPI,
    fake_carrier: FakeCarrier,
    record_sleep: Callable[[float], Any],
) -> Iterator[FakeCarrier]:
    """Route API carrier calls to the fake and skip real sweep pacing."""

    def _synchronizer_override(db: SessionDep, config: MonitorConfigDep) -> TrackingSynchronizer:
        return TrackingSynchronizer(db, fake_carrier, config, sleep=record_sleep)

    overrides: dict[Callable[..., Any], Callable[..., Any]] = {
        dependencies.get_carrier_client_dep: lambda: fake_carrier,
        dependencies.get_synchronizer: _synchronizer_override,
    }
    app.dependency_overrides.update(overrides)
    try:
        yield fake_carrier
    finally:
        for dependency in overrides:
            app.dependency_overrides.pop(dependency, None)


@pytest.fixture()
def client(app: FastAPI, override_carrier: FakeCarrier) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


