"""Tests for environment-driven settings."""

from herald.config import Settings
from herald.models.enums import Priority


def test_defaults():
    s = Settings(_env_file=None)
    assert s.retry_delay_seconds == 60
    assert s.max_delivery_attempts == 3
    assert s.notification_max_age_ms == 7 * 24 * 60 * 60 * 1000
    assert s.session_inactivity_ms == 30 * 60 * 1000
    assert s.notification_filters.min_severity == Priority.LOW
    assert s.notification_filters.mute_types == frozenset()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("HERALD_MIN_SEVERITY", "high")
    monkeypatch.setenv("HERALD_MUTE_TYPES", '["system_alert"]')
    monkeypatch.setenv("HERALD_ENABLE_PUSH_NOTIFICATIONS", "true")
    s = Settings(_env_file=None)
    assert s.min_severity == Priority.HIGH
    assert s.notification_filters.mute_types == frozenset({"system_alert"})
    assert s.enable_push_notifications is True
