"""Monitoring-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fm_monitor.db.time import ensure_utc
from fm_monitor.services.monitor import (
    AlertEntry,
    AlertPriority,
    MonitorSummary,
    ShipmentDetail,
    ShipmentView,
)
from fm_monitor.services.tracking_sync import SyncResult


class ShipmentStateResponse(BaseModel):
    """A shipment with its derived delivery state."""

    tracking_code: str
    order_number: str
    customer_name: str
    customer_phone: str | None = None
    destination_summary: str
    dispatched_at: datetime
    latest_status_code: int
    latest_status_description: str
    last_movement_at: datetime
    hours_since_last_movement: int
    alert_active: bool

    @field_validator("dispatched_at", "last_movement_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @classmethod
    def from_view(cls, view: ShipmentView) -> ShipmentStateResponse:
        shipment, state = view.shipment, view.state
        return cls(
            tracking_code=shipment.tracking_code,
            order_number=shipment.order_number,
            customer_name=shipment.customer_name,
            customer_phone=shipment.customer_phone,
            destination_summary=shipment.destination_summary,
            dispatched_at=shipment.dispatched_at,
            latest_status_code=state.latest_status_code,
            latest_status_description=state.latest_status_description,
            last_movement_at=state.last_movement_at,
            hours_since_last_movement=state.hours_since_last_movement,
            alert_active=state.alert_active,
        )


class TrackingEventResponse(BaseModel):
    """A stored carrier event."""

    tracking_code: str
    event_id: str
    status_code: int
    status_description: str
    event_timestamp: datetime
    received_by: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("event_timestamp")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class ShipmentDetailResponse(BaseModel):
    shipment: ShipmentStateResponse
    events: list[TrackingEventResponse]
    resynced: bool = Field(..., description="False when the live carrier refresh failed")

    @classmethod
    def from_detail(cls, detail: ShipmentDetail) -> ShipmentDetailResponse:
        return cls(
            shipment=ShipmentStateResponse.from_view(
                ShipmentView(shipment=detail.shipment, state=detail.state)
            ),
            events=[TrackingEventResponse.model_validate(event) for event in detail.events],
            resynced=detail.resynced,
        )


class SummaryResponse(BaseModel):
    total: int
    in_transit: int
    delivered: int
    stalled_24h: int
    stalled_48h: int

    @classmethod
    def from_summary(cls, summary: MonitorSummary) -> SummaryResponse:
        return cls(
            total=summary.total,
            in_transit=summary.in_transit,
            delivered=summary.delivered,
            stalled_24h=summary.stalled_24h,
            stalled_48h=summary.stalled_48h,
        )


class AlertResponse(BaseModel):
    """A stalled shipment and how urgently it needs attention."""

    tracking_code: str
    order_number: str
    customer_name: str
    customer_phone: str | None = None
    hours_since_last_movement: int
    latest_status_description: str
    last_movement_at: datetime
    priority: AlertPriority

    @field_validator("last_movement_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @classmethod
    def from_entry(cls, entry: AlertEntry) -> AlertResponse:
        return cls(
            tracking_code=entry.shipment.tracking_code,
            order_number=entry.shipment.order_number,
            customer_name=entry.shipment.customer_name,
            customer_phone=entry.shipment.customer_phone,
            hours_since_last_movement=entry.state.hours_since_last_movement,
            latest_status_description=entry.state.latest_status_description,
            last_movement_at=entry.state.last_movement_at,
            priority=entry.priority,
        )


class SyncResponse(BaseModel):
    updated: int
    errors: int

    @classmethod
    def from_result(cls, result: SyncResult) -> SyncResponse:
        return cls(updated=result.updated, errors=result.errors)


class ShipmentListResponse(BaseModel):
    success: bool = True
    data: list[ShipmentStateResponse]
    total: int


class SummaryEnvelope(BaseModel):
    success: bool = True
    data: SummaryResponse


class AlertListResponse(BaseModel):
    success: bool = True
    data: list[AlertResponse]
    total: int


class ShipmentDetailEnvelope(BaseModel):
    success: bool = True
    message: str | None = None
    data: ShipmentDetailResponse


class SyncEnvelope(BaseModel):
    success: bool = True
    message: str
    data: SyncResponse
