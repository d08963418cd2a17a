"""Application configuration via environment variables."""

from typing import Literal

from pydantic_settings import BaseSettings

from herald.models.enums import Priority
from herald.services.notification_factory import NotificationFilters


class Settings(BaseSettings):
    # Delivery channels
    enable_real_time_alerts: bool = True
    enable_email_notifications: bool = True
    enable_push_notifications: bool = False

    # Email channel (frequency: immediate, hourly, daily)
    email_address: str = "admin@example.com"
    email_frequency: Literal["immediate", "hourly", "daily"] = "immediate"

    # Push channel
    push_token: str | None = None
    push_device_id: str | None = None

    # Filters applied when notifications are created
    min_severity: Priority = Priority.LOW
    mute_types: list[str] = []

    # Delivery retry
    retry_delay_seconds: float = 60.0
    max_delivery_attempts: int = 3

    # Cleanup job
    cleanup_interval_seconds: float = 24 * 60 * 60
    notification_max_age_days: int = 7

    # Admin sessions
    session_inactivity_minutes: int = 30

    # Dashboard poller
    client_poll_interval_seconds: float = 30.0
    client_mark_read_delay_seconds: float = 2.0
    client_fetch_limit: int = 20

    # CORS
    cors_allowed_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    json_logs: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "HERALD_",
    }

    @property
    def notification_filters(self) -> NotificationFilters:
        """Return the creation-time filters derived from settings."""
        return NotificationFilters(
            min_severity=self.min_severity,
            mute_types=frozenset(self.mute_types),
        )

    @property
    def notification_max_age_ms(self) -> int:
        return self.notification_max_age_days * 24 * 60 * 60 * 1000

    @property
    def session_inactivity_ms(self) -> int:
        return self.session_inactivity_minutes * 60 * 1000


settings = Settings()
