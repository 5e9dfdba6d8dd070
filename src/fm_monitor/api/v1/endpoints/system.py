"""Health endpoints for the FM Monitor API."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from fm_monitor.api.v1.dependencies import CarrierDep, SessionDep
from fm_monitor.db.session import check_connection
from fm_monitor.db.time import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health")
async def get_health(db: SessionDep, carrier: CarrierDep) -> dict[str, object]:
    """Check the database and the carrier API.

    Returns:
        Overall ``healthy``/``degraded`` status with per-dependency detail
    """
    logger.info("Checking dependency health")
    database_ok = check_connection(db)
    carrier_status = await carrier.health_check()
    healthy = database_ok and carrier_status.get("status") == "ok"

    return {
        "status": "healthy" if healthy else "degraded",
        "timestamp": utcnow().isoformat(),
        "services": {
            "database": {"status": "ok" if database_ok else "error"},
            "fmtransportes": carrier_status,
        },
    }
