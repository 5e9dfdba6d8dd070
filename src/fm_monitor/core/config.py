"""Immutable monitor configuration passed to core components.

Example:
    from fm_monitor.core.config import load_monitor_config
    config = load_monitor_config()
    print(config.alert_threshold_hours)
"""

from __future__ import annotations

from dataclasses import dataclass

from fm_monitor.core.settings import MIN_SYNC_DELAY_SECONDS, Settings, settings


@dataclass(frozen=True)
class MonitorConfig:
    """Thresholds and pacing used by the synchronizer and the monitor.

    Attributes:
        alert_threshold_hours: Hours without movement before a non-terminal
            shipment is flagged (and counted as stalled).
        critical_threshold_hours: Hours without movement for high-priority alerts.
        sync_delay_seconds: Pause between carrier calls during a sweep. Never
            below one second, the carrier's documented rate limit.
    """

    alert_threshold_hours: int = 24
    critical_threshold_hours: int = 48
    sync_delay_seconds: float = 1.1

    def __post_init__(self) -> None:
        if self.sync_delay_seconds < MIN_SYNC_DELAY_SECONDS:
            raise ValueError(
                f"sync_delay_seconds must be at least {MIN_SYNC_DELAY_SECONDS}s "
                f"(got {self.sync_delay_seconds})"
            )
        if self.critical_threshold_hours < self.alert_threshold_hours:
            raise ValueError("critical_threshold_hours must not be below alert_threshold_hours")


def load_monitor_config(source: Settings | None = None) -> MonitorConfig:
    """Build configuration object from application settings."""

    source = source or settings
    return MonitorConfig(
        alert_threshold_hours=source.alert_threshold_hours,
        critical_threshold_hours=source.critical_threshold_hours,
        sync_delay_seconds=float(source.fm_sync_delay_seconds),
    )
