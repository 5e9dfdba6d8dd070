"""Data access helpers for shipments and tracking events."""

from .shipment_repo import ShipmentRepository, format_destination
from .tracking_event_repo import TrackingEventRepository

__all__ = ["ShipmentRepository", "TrackingEventRepository", "format_destination"]
