"""Pydantic models for FM Transportes tracking payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class CarrierTrackingEvent(BaseModel):
    """A single event as returned by the carrier's tracking endpoint.

    The carrier has used both English and Portuguese field names over time,
    so both spellings are accepted.
    """

    tracking_id: str = Field(validation_alias=AliasChoices("trackingId", "tracking_id"))
    tracking_code: str | None = Field(
        default=None,
        validation_alias=AliasChoices("trackingCode", "tracking_code"),
    )
    status: int
    status_description: str | None = Field(
        default=None,
        validation_alias=AliasChoices("statusDescription", "statusDescricao", "status_description"),
    )
    event_timestamp: datetime = Field(
        validation_alias=AliasChoices("eventTimestamp", "dataEvento", "event_timestamp"),
    )
    received_by: str | None = Field(
        default=None,
        validation_alias=AliasChoices("receivedBy", "received_by"),
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("tracking_id", "tracking_code", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value


class CarrierTrackingResponse(BaseModel):
    """Envelope returned by ``POST /v1/tracking``."""

    success: bool
    data: list[CarrierTrackingEvent] | None = None
    message: str | None = None

    model_config = ConfigDict(extra="ignore")
