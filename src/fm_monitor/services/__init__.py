"""Business logic services for the FM tracking monitor."""

from .carrier import CarrierClient, CarrierError, TransientCarrierError
from .monitor import AlertPriority, ShipmentMonitor
from .tracking_sync import SyncResult, TrackingSynchronizer

__all__ = [
    "CarrierClient",
    "CarrierError",
    "TransientCarrierError",
    "AlertPriority",
    "ShipmentMonitor",
    "SyncResult",
    "TrackingSynchronizer",
]
