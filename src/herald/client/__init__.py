"""Dashboard-side polling client for the Herald notification API."""

from herald.client.formatting import NavigationTarget, format_relative_time, notification_icon
from herald.client.handler import Announcement, NotificationHandler
from herald.client.sources import HeraldAPIClient, LocalNotificationSource, NotificationSource

__all__ = [
    "Announcement",
    "HeraldAPIClient",
    "LocalNotificationSource",
    "NavigationTarget",
    "NotificationHandler",
    "NotificationSource",
    "format_relative_time",
    "notification_icon",
]
