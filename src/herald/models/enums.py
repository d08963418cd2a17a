"""String enums for notification types, priorities and delivery status."""

from enum import StrEnum


class NotificationType(StrEnum):
    MESSAGE_FLAGGED = "message_flagged"
    USER_REPORTED = "user_reported"
    CONTENT_DISPUTED = "content_disputed"
    SUSPICIOUS_ACTIVITY = "suspicious_activity"
    SYSTEM_ALERT = "system_alert"


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANKS[self]


class DeliveryStatus(StrEnum):
    PENDING = "pending"
    DELIVERED = "delivered"
    FAILED = "failed"


_PRIORITY_RANKS = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
    Priority.CRITICAL: 4,
}


def priority_rank(priority: str | None) -> int:
    """Return the ordinal rank of a priority, 0 for anything unrecognised."""
    try:
        return Priority(priority).rank
    except ValueError:
        return 0


def coerce_priority(priority: str | None, default: Priority = Priority.MEDIUM) -> Priority:
    """Map a priority string onto the enum, falling back to ``default``."""
    try:
        return Priority(priority)
    except ValueError:
        return default
