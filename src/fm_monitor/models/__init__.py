"""SQLAlchemy models for the FM tracking monitor."""

from .shipment import Shipment
from .tracking_event import TrackingEvent

__all__ = [
    "Shipment",
    "TrackingEvent",
]
