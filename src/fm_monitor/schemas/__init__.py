"""
Pydantic schemas for carrier payloads and API responses.

API response models live in ``fm_monitor.schemas.monitoring``; they build on
the service layer's view objects and are imported from there directly.
"""

from .carrier import CarrierTrackingEvent, CarrierTrackingResponse

__all__ = ["CarrierTrackingEvent", "CarrierTrackingResponse"]
