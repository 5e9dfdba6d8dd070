"""Run one tracking sweep from the command line (e.g. from cron).

The service has no in-process scheduler; periodic refreshes are driven
externally by invoking this script.
"""
from __future__ import annotations

import argparse
import asyncio
import logging

from fm_monitor.core.config import load_monitor_config
from fm_monitor.db.session import SessionLocal
from fm_monitor.services.carrier import CarrierClient, load_carrier_config
from fm_monitor.services.tracking_sync import SyncResult, TrackingSynchronizer

logger = logging.getLogger("fm_monitor.sync")


async def run_sweep(*, feed: bool = False) -> SyncResult:
    """Synchronize open shipments (or the whole account feed) once."""
    client = CarrierClient(load_carrier_config())
    try:
        with SessionLocal() as db:
            synchronizer = TrackingSynchronizer(db, client, load_monitor_config())
            if feed:
                return await synchronizer.sync_feed()
            return await synchronizer.sync_all()
    finally:
        await client.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Refresh FM Transportes tracking events")
    parser.add_argument(
        "--feed",
        action="store_true",
        help="Fetch the whole account feed in one request instead of one call per shipment.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    result = asyncio.run(run_sweep(feed=args.feed))
    print(f"[fm-monitor-sync] updated={result.updated} errors={result.errors}")


if __name__ == "__main__":
    main()
