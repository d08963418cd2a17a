"""Presentation helpers for the admin notification panel."""

from dataclasses import dataclass
from datetime import datetime, timezone

from herald.models.enums import NotificationType
from herald.models.notification import Notification
from herald.services.id_generator import now_ms

_MINUTE = 60 * 1000
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY

_ICONS = {
    NotificationType.MESSAGE_FLAGGED: "fa-flag",
    NotificationType.USER_REPORTED: "fa-user-shield",
    NotificationType.CONTENT_DISPUTED: "fa-gavel",
    NotificationType.SUSPICIOUS_ACTIVITY: "fa-exclamation-triangle",
    NotificationType.SYSTEM_ALERT: "fa-exclamation-circle",
}


@dataclass(frozen=True)
class NavigationTarget:
    """Where the dashboard should go when a notification is clicked."""

    kind: str
    target_id: str
    path: str


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def format_relative_time(timestamp: int, now: int | None = None) -> str:
    """Format an epoch-ms timestamp relative to ``now`` ("5 minutes ago")."""
    diff = (now_ms() if now is None else now) - timestamp

    if diff < _MINUTE:
        return "Just now"
    if diff < _HOUR:
        return _plural(diff // _MINUTE, "minute")
    if diff < _DAY:
        return _plural(diff // _HOUR, "hour")
    if diff < _WEEK:
        return _plural(diff // _DAY, "day")
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).date().isoformat()


def notification_icon(notification_type: str) -> str:
    return _ICONS.get(notification_type, "fa-bell")


def navigation_target(notification: Notification) -> NavigationTarget | None:
    """Return the admin page related to a notification, if there is one."""
    data = notification.data or {}

    if notification.type == NotificationType.MESSAGE_FLAGGED and data.get("conversationId"):
        conversation_id = str(data["conversationId"])
        return NavigationTarget(
            "conversation", conversation_id, f"admin-message-monitoring.html?conversation={conversation_id}"
        )

    if notification.type == NotificationType.USER_REPORTED and data.get("reportedId"):
        reported_id = str(data["reportedId"])
        if data.get("reportedType") == "expert":
            return NavigationTarget("expert", reported_id, f"admin-experts.html?expert={reported_id}")
        if data.get("reportedType") == "client":
            return NavigationTarget("client", reported_id, f"admin-clients.html?client={reported_id}")

    return None
