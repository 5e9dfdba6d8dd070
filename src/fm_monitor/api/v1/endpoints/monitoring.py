"""Shipment monitoring endpoints for the FM Monitor API."""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, status

from fm_monitor.api.v1.dependencies import MonitorDep, SynchronizerDep
from fm_monitor.schemas.monitoring import (
    AlertListResponse,
    AlertResponse,
    ShipmentDetailEnvelope,
    ShipmentDetailResponse,
    ShipmentListResponse,
    ShipmentStateResponse,
    SummaryEnvelope,
    SummaryResponse,
    SyncEnvelope,
    SyncResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/monitoring", tags=["monitoring"])

TrackingCodePath = Annotated[str, Path(min_length=1, max_length=64)]


async def _detail_or_404(monitor: MonitorDep, tracking_code: str) -> ShipmentDetailResponse:
    detail = await monitor.get_shipment_detail(tracking_code)
    if detail is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shipment not found")
    return ShipmentDetailResponse.from_detail(detail)


@router.get("", response_model=ShipmentListResponse)
async def list_shipments(monitor: MonitorDep) -> ShipmentListResponse:
    """List every dispatched shipment with its derived delivery state."""
    logger.info("Listing all shipments")
    views = monitor.list_shipments()
    data = [ShipmentStateResponse.from_view(view) for view in views]
    return ShipmentListResponse(data=data, total=len(data))


@router.get("/summary", response_model=SummaryEnvelope)
async def get_summary(monitor: MonitorDep) -> SummaryEnvelope:
    """Return shipment totals and stalled counters."""
    logger.info("Computing monitoring summary")
    return SummaryEnvelope(data=SummaryResponse.from_summary(monitor.summary()))


@router.get("/alerts", response_model=AlertListResponse)
async def list_alerts(
    monitor: MonitorDep,
    min_hours: Annotated[
        int | None,
        Query(alias="minHours", ge=0, description="Minimum hours without movement"),
    ] = None,
) -> AlertListResponse:
    """List non-terminal shipments without movement for at least ``minHours``.

    Args:
        monitor: Shipment monitor
        min_hours: Staleness threshold in whole hours; defaults to the
            configured alert threshold

    Returns:
        Alerts sorted by hours without movement, longest first
    """
    logger.info("Listing alerts (min_hours=%s)", min_hours)
    data = [AlertResponse.from_entry(entry) for entry in monitor.alerts(min_hours)]
    return AlertListResponse(data=data, total=len(data))


@router.post("/sync", response_model=SyncEnvelope)
async def sync_all(synchronizer: SynchronizerDep) -> SyncEnvelope:
    """Resynchronize every shipment still in transit.

    Paced at the carrier's rate limit, so this call takes roughly one second
    per open shipment. Partial failures are reported in the counters.
    """
    logger.info("Resynchronizing tracking for all open shipments")
    result = await synchronizer.sync_all()
    return SyncEnvelope(
        message=f"Updated: {result.updated} succeeded, {result.errors} errors",
        data=SyncResponse.from_result(result),
    )


@router.get("/{tracking_code}", response_model=ShipmentDetailEnvelope)
async def get_shipment(tracking_code: TrackingCodePath, monitor: MonitorDep) -> ShipmentDetailEnvelope:
    """Return one shipment with its event history, refreshed from the carrier."""
    logger.info("Fetching shipment %s", tracking_code)
    return ShipmentDetailEnvelope(data=await _detail_or_404(monitor, tracking_code))


@router.post("/{tracking_code}/sync", response_model=ShipmentDetailEnvelope)
async def sync_shipment(
    tracking_code: TrackingCodePath, monitor: MonitorDep
) -> ShipmentDetailEnvelope:
    """Resynchronize one shipment and return its refreshed detail."""
    logger.info("Resynchronizing tracking for %s", tracking_code)
    detail = await _detail_or_404(monitor, tracking_code)
    return ShipmentDetailEnvelope(message="Tracking updated", data=detail)
