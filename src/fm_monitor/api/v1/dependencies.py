"""Shared API dependencies wiring configuration into core services."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from fm_monitor.core.config import MonitorConfig, load_monitor_config
from fm_monitor.db.session import get_db
from fm_monitor.services.carrier import CarrierClient, get_carrier_client
from fm_monitor.services.monitor import ShipmentMonitor
from fm_monitor.services.tracking_sync import TrackingSynchronizer

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_carrier_client_dep() -> CarrierClient:
    """Return the shared carrier client."""
    return get_carrier_client()


def get_monitor_config() -> MonitorConfig:
    """Return monitor thresholds built from application settings."""
    return load_monitor_config()


CarrierDep = Annotated[CarrierClient, Depends(get_carrier_client_dep)]
MonitorConfigDep = Annotated[MonitorConfig, Depends(get_monitor_config)]


def get_synchronizer(
    db: SessionDep,
    client: CarrierDep,
    config: MonitorConfigDep,
) -> TrackingSynchronizer:
    """Build a request-scoped tracking synchronizer."""
    return TrackingSynchronizer(db, client, config)


SynchronizerDep = Annotated[TrackingSynchronizer, Depends(get_synchronizer)]


def get_monitor(
    db: SessionDep,
    config: MonitorConfigDep,
    synchronizer: SynchronizerDep,
) -> ShipmentMonitor:
    """Build a request-scoped shipment monitor."""
    return ShipmentMonitor(db, config, synchronizer)


MonitorDep = Annotated[ShipmentMonitor, Depends(get_monitor)]
