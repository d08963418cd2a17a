"""Admin notification service.

Maps moderation and platform events onto notifications, feeds them through
the delivery queue, and serves the admin dashboard's read/unread views.
"""

from __future__ import annotations

import logging
from typing import Any

from herald.models.enums import NotificationType, Priority, coerce_priority, priority_rank
from herald.models.notification import HandlerResult, IgnoredNotification, Notification
from herald.queue.notification_queue import NotificationQueue
from herald.queue.timers import TimerScheduler
from herald.services.delivery import EmailChannel, build_channels
from herald.services.id_generator import Clock, now_ms
from herald.services.notification_factory import NotificationFilters, create_notification
from herald.sessions.registry import AdminSession, AdminSessionRegistry

logger = logging.getLogger(__name__)

HIGH_PRIORITY_REPORT_REASONS = frozenset(
    {"harassment", "fraud", "impersonation", "illegal_activity", "threatening"}
)


class AdminNotificationService:
    """Facade over the notification queue and the admin session registry."""

    def __init__(
        self,
        queue: NotificationQueue,
        sessions: AdminSessionRegistry,
        filters: NotificationFilters | None = None,
        clock: Clock = now_ms,
    ) -> None:
        self.queue = queue
        self.sessions = sessions
        self.filters = filters or NotificationFilters()
        self.clock = clock

    @classmethod
    def from_settings(cls, settings, timer: TimerScheduler | None = None, clock: Clock = now_ms) -> AdminNotificationService:
        queue = NotificationQueue(
            channels=build_channels(settings),
            timer=timer,
            clock=clock,
            retry_delay_seconds=settings.retry_delay_seconds,
            max_attempts=settings.max_delivery_attempts,
        )
        sessions = AdminSessionRegistry(clock=clock, inactivity_ms=settings.session_inactivity_ms)
        return cls(queue, sessions, settings.notification_filters, clock)

    def init(self) -> None:
        self.queue.init()
        self.sessions.init()

    def reset(self) -> None:
        self.queue.reset()
        self.sessions.reset()

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def notify(self, notification_type: str, data: dict[str, Any] | None, priority: str = Priority.MEDIUM) -> HandlerResult:
        """Create a notification and enqueue it unless filters suppress it."""
        notification = create_notification(notification_type, data, priority, self.filters, self.clock)
        if isinstance(notification, IgnoredNotification):
            logger.debug("Notification suppressed by filters (type=%s, priority=%s)", notification_type, priority)
            return HandlerResult(ignored=True)

        queued = self.queue.enqueue(notification)
        return HandlerResult(notification=queued)

    def handle_flagged_message(self, flag_data: dict[str, Any], conversation_data: dict[str, Any] | None = None) -> HandlerResult:
        conversation_data = conversation_data or {}
        data = {
            **flag_data,
            "conversationSubject": conversation_data.get("subject") or "Untitled Conversation",
            "conversationId": conversation_data.get("id"),
        }
        return self.notify(
            NotificationType.MESSAGE_FLAGGED,
            data,
            coerce_priority(flag_data.get("severity")),
        )

    def handle_user_report(self, report_data: dict[str, Any]) -> HandlerResult:
        if report_data.get("reportReason") in HIGH_PRIORITY_REPORT_REASONS:
            priority = Priority.HIGH
        else:
            priority = Priority.MEDIUM
        return self.notify(NotificationType.USER_REPORTED, report_data, priority)

    def handle_content_dispute(self, dispute_data: dict[str, Any]) -> HandlerResult:
        return self.notify(NotificationType.CONTENT_DISPUTED, dispute_data, Priority.MEDIUM)

    def report_suspicious_activity(self, activity_data: dict[str, Any], priority: str = Priority.HIGH) -> HandlerResult:
        return self.notify(NotificationType.SUSPICIOUS_ACTIVITY, activity_data, priority)

    def send_system_alert(self, alert_type: str, message: str | None = None, priority: str = Priority.MEDIUM) -> HandlerResult:
        return self.notify(
            NotificationType.SYSTEM_ALERT,
            {"alertType": alert_type, "message": message},
            priority,
        )

    # ------------------------------------------------------------------
    # Dashboard views
    # ------------------------------------------------------------------

    def get_admin_notifications(self, limit: int = 10, include_read: bool = False) -> list[Notification]:
        """Return notifications by priority (highest first), then newest first."""
        notifications = self.queue.get_all_notifications()
        if not include_read:
            notifications = [n for n in notifications if not n.read]

        notifications.sort(key=lambda n: (priority_rank(n.priority), n.timestamp), reverse=True)
        return notifications[: max(limit, 0)]

    def unread_count(self) -> int:
        return sum(1 for n in self.queue.get_all_notifications() if not n.read)

    def mark_notification_read(self, notification_id: str) -> bool:
        return self.queue.mark_read(notification_id)

    def mark_all_notifications_read(self) -> bool:
        self.queue.mark_all_read()
        return True

    # ------------------------------------------------------------------
    # Admin sessions
    # ------------------------------------------------------------------

    def register_admin_session(self, admin_id: str, session_info: dict[str, Any] | None = None) -> AdminSession:
        return self.sessions.add_session(admin_id, session_info)

    def update_admin_activity(self, admin_id: str) -> bool:
        return self.sessions.update_session(admin_id)

    def end_admin_session(self, admin_id: str) -> bool:
        self.sessions.remove_session(admin_id)
        return True

    def get_active_sessions(self) -> list[AdminSession]:
        return self.sessions.get_active_sessions()

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def run_cleanup(self, max_age_ms: int) -> dict[str, int]:
        """Clear old delivered notifications and evict idle sessions."""
        return {
            "notifications_cleared": self.queue.clear_old_notifications(max_age_ms),
            "sessions_evicted": self.sessions.evict_inactive(),
        }

    def _digest_channels(self) -> list[EmailChannel]:
        return [
            c for c in self.queue.channels
            if isinstance(c, EmailChannel) and c.digest_interval_seconds is not None
        ]

    @property
    def email_digest_interval_seconds(self) -> float | None:
        """Shortest digest interval among email channels, or None if none batch."""
        intervals = [c.digest_interval_seconds for c in self._digest_channels()]
        return min(intervals) if intervals else None

    def flush_email_digest(self) -> int:
        """Send every pending email digest; returns the number of notifications sent."""
        return sum(len(c.flush_digest()) for c in self._digest_channels())
