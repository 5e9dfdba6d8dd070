"""Tests for settings and the derived immutable configs."""

import pytest
from pydantic import ValidationError

from fm_monitor.core.config import MonitorConfig, load_monitor_config
from fm_monitor.core.settings import Settings
from fm_monitor.services.carrier import load_carrier_config


def test_monitor_config_defaults():
    config = MonitorConfig()
    assert config.alert_threshold_hours == 24
    assert config.critical_threshold_hours == 48
    assert config.sync_delay_seconds >= 1.0


def test_monitor_config_rejects_delay_below_rate_limit():
    with pytest.raises(ValueError):
        MonitorConfig(sync_delay_seconds=0.5)


def test_monitor_config_rejects_inverted_thresholds():
    with pytest.raises(ValueError):
        MonitorConfig(alert_threshold_hours=48, critical_threshold_hours=24)


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("FM_API_URL", "https://carrier.example/api")
    monkeypatch.setenv("FM_CLIENT_DOCUMENT", "12345678000199")
    monkeypatch.setenv("FM_SYNC_DELAY_SECONDS", "2")
    monkeypatch.setenv("ALERT_THRESHOLD_HOURS", "12")

    source = Settings()
    carrier = load_carrier_config(source)
    monitor = load_monitor_config(source)

    assert carrier.base_url == "https://carrier.example/api"
    assert carrier.client_document == "12345678000199"
    assert carrier.timeout_seconds == 30.0
    assert monitor.sync_delay_seconds == 2.0
    assert monitor.alert_threshold_hours == 12


def test_settings_reject_fast_sync_delay(monkeypatch):
    monkeypatch.setenv("FM_SYNC_DELAY_SECONDS", "0.2")
    with pytest.raises(ValidationError):
        Settings()
