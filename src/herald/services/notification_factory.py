"""Build notification records from an event type and payload."""

import math
from dataclasses import dataclass, field
from typing import Any

from herald.models.enums import NotificationType, Priority, coerce_priority
from herald.models.notification import IgnoredNotification, Notification
from herald.services.id_generator import Clock, generate_id, now_ms


@dataclass(frozen=True)
class NotificationFilters:
    """Creation-time suppression rules."""

    min_severity: Priority = Priority.LOW
    mute_types: frozenset[str] = field(default_factory=frozenset)

    def suppresses(self, notification_type: str, priority: Priority) -> bool:
        return notification_type in self.mute_types or priority.rank < self.min_severity.rank


DEFAULT_TITLE = "Notification"
DEFAULT_MESSAGE = "You have a new notification."

# (title, message) format strings keyed by type; fields come from the payload
_TEMPLATES: dict[str, tuple[str, str]] = {
    NotificationType.MESSAGE_FLAGGED: (
        "Message Flagged: {flagReason}",
        'A message in the conversation "{conversationSubject}" has been flagged for '
        '"{flagReason}". Confidence: {confidencePercent}%',
    ),
    NotificationType.USER_REPORTED: (
        "User Reported: {reportReason}",
        '{reporterType} {reporterName} has reported {reportedType} {reportedName} for "{reportReason}"',
    ),
    NotificationType.CONTENT_DISPUTED: (
        "Content Dispute",
        '{disputerName} has disputed a moderation action on their content. Reason: "{disputeReason}"',
    ),
    NotificationType.SUSPICIOUS_ACTIVITY: (
        "Suspicious Activity Detected",
        "System detected suspicious activity: {activityDescription}",
    ),
    NotificationType.SYSTEM_ALERT: (
        "System Alert: {alertType}",
        "{message}",
    ),
}


class _TemplateFields(dict):
    """Payload view that renders missing or null fields as empty strings."""

    def __missing__(self, key: str) -> str:
        return ""

    def __getitem__(self, key: str) -> Any:
        value = super().__getitem__(key) if key in self else self.__missing__(key)
        return "" if value is None else value


def _confidence_percent(score: Any) -> int:
    """Round a 0..1 confidence score to a whole percentage, half up."""
    try:
        return int(math.floor(float(score) * 100 + 0.5))
    except (TypeError, ValueError):
        return 0


def generate_notification_content(notification_type: str, data: dict[str, Any]) -> tuple[str, str]:
    """Return the (title, message) pair for a notification type and payload."""
    template = _TEMPLATES.get(notification_type)
    if template is None:
        return DEFAULT_TITLE, DEFAULT_MESSAGE

    fields = _TemplateFields(data)
    fields["confidencePercent"] = _confidence_percent(data.get("confidenceScore"))
    if notification_type == NotificationType.SYSTEM_ALERT and not data.get("message"):
        fields["message"] = f"System alert: {fields['alertType']}"

    title_fmt, message_fmt = template
    return title_fmt.format_map(fields), message_fmt.format_map(fields)


def create_notification(
    notification_type: str,
    data: dict[str, Any] | None = None,
    priority: str = Priority.MEDIUM,
    filters: NotificationFilters | None = None,
    clock: Clock = now_ms,
) -> Notification | IgnoredNotification:
    """Create a notification record, or an ``IgnoredNotification`` if filtered.

    Unknown priorities fall back to medium and unknown types get the default
    template; neither raises. Callers must check for ``IgnoredNotification``
    before enqueueing.
    """
    data = dict(data or {})
    level = coerce_priority(priority)
    filters = filters or NotificationFilters()

    if filters.suppresses(notification_type, level):
        return IgnoredNotification()

    title, message = generate_notification_content(notification_type, data)
    timestamp = clock()

    return Notification(
        id=generate_id("notification_", timestamp),
        type=str(notification_type),
        priority=level,
        title=title,
        message=message,
        data=data,
        timestamp=timestamp,
        read=False,
    )
