"""In-memory notification queue with channel delivery and timed retry."""

import logging

from herald.errors.exceptions import ConflictError
from herald.models.enums import DeliveryStatus
from herald.models.notification import Notification
from herald.queue.timers import AsyncioTimerScheduler, TimerHandle, TimerScheduler
from herald.services.delivery import DeliveryChannel
from herald.services.id_generator import Clock, now_ms

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_MS = 7 * 24 * 60 * 60 * 1000


class NotificationQueue:
    """Owns the lifecycle of every notification.

    A record moves ``pending -> delivered`` or ``pending -> failed``; a failed
    record with attempts left is reset to ``pending`` by a single retry timer.
    Accessors return copies; mutation goes through the queue's own methods.

    The default ``AsyncioTimerScheduler`` needs a running event loop; a
    failure outside one is recorded but its retry is dropped. Sync callers
    should pass their own ``TimerScheduler``.
    """

    def __init__(
        self,
        channels: list[DeliveryChannel],
        timer: TimerScheduler | None = None,
        clock: Clock = now_ms,
        retry_delay_seconds: float = 60.0,
        max_attempts: int = 3,
    ) -> None:
        self.channels = channels
        self.timer = timer or AsyncioTimerScheduler()
        self.clock = clock
        self.retry_delay_seconds = retry_delay_seconds
        self.max_attempts = max_attempts
        self._queue: list[Notification] = []
        self._by_id: dict[str, Notification] = {}
        self._retry_timers: dict[str, TimerHandle] = {}

    def init(self) -> None:
        self.reset()
        logger.info(
            "Notification queue ready (channels=%s, retry_delay=%ss, max_attempts=%d)",
            [c.channel_type for c in self.channels],
            self.retry_delay_seconds,
            self.max_attempts,
        )

    def reset(self) -> None:
        """Drop all records and cancel outstanding retries."""
        for handle in self._retry_timers.values():
            handle.cancel()
        self._retry_timers.clear()
        self._queue.clear()
        self._by_id.clear()

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def scheduled_retries(self) -> int:
        return len(self._retry_timers)

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def enqueue(self, notification: Notification) -> Notification:
        """Add a notification as pending and run delivery immediately."""
        if notification.id in self._by_id:
            raise ConflictError(f"Notification '{notification.id}' is already queued")

        notification.status = DeliveryStatus.PENDING
        notification.attempts = 0
        notification.created_at = self.clock()
        notification.error = None
        notification.channels_delivered = []
        self._queue.append(notification)
        self._by_id[notification.id] = notification

        self.process_queue()
        return notification.model_copy()

    def process_queue(self) -> None:
        """Attempt delivery of every pending notification in insertion order."""
        for notification in [n for n in self._queue if n.status == DeliveryStatus.PENDING]:
            self.deliver_notification(notification)

    def deliver_notification(self, notification: Notification) -> None:
        """Run all applicable channels for one notification.

        Any channel raising fails the whole record. Channels that already
        succeeded are remembered in ``channels_delivered`` and skipped on
        retry, so subscribers see each notification once.
        """
        record = self._by_id.get(notification.id)
        if record is None:
            return

        record.attempts += 1
        try:
            for channel in self.channels:
                if channel.channel_type in record.channels_delivered or not channel.applies_to(record):
                    continue
                channel.deliver(record)
                record.channels_delivered.append(channel.channel_type)
        except Exception as exc:
            logger.exception("Failed to deliver notification %s (attempt %d)", record.id, record.attempts)
            record.status = DeliveryStatus.FAILED
            record.error = str(exc)
            if record.attempts < self.max_attempts:
                self._schedule_retry(record.id)
            else:
                logger.warning("Giving up on notification %s after %d attempts", record.id, record.attempts)
            return

        record.status = DeliveryStatus.DELIVERED
        record.delivered_at = self.clock()
        record.error = None

    def _schedule_retry(self, notification_id: str) -> None:
        existing = self._retry_timers.pop(notification_id, None)
        if existing is not None:
            existing.cancel()
        handle = self.timer.call_later(self.retry_delay_seconds, self._retry, notification_id)
        if handle is None:
            logger.error("Retry for notification %s was not scheduled", notification_id)
            return
        self._retry_timers[notification_id] = handle

    def _retry(self, notification_id: str) -> None:
        self._retry_timers.pop(notification_id, None)
        record = self._by_id.get(notification_id)
        if record is not None and record.status == DeliveryStatus.FAILED:
            record.status = DeliveryStatus.PENDING
            self.process_queue()

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get(self, notification_id: str) -> Notification | None:
        record = self._by_id.get(notification_id)
        return record.model_copy() if record else None

    def get_all_notifications(self) -> list[Notification]:
        return [n.model_copy() for n in self._queue]

    def get_pending_notifications(self) -> list[Notification]:
        return [n.model_copy() for n in self._queue if n.status == DeliveryStatus.PENDING]

    def mark_read(self, notification_id: str) -> bool:
        record = self._by_id.get(notification_id)
        if record is None:
            return False
        record.read = True
        return True

    def mark_all_read(self) -> int:
        """Mark every record read; returns how many were previously unread."""
        changed = 0
        for record in self._queue:
            if not record.read:
                record.read = True
                changed += 1
        return changed

    def remove(self, notification_id: str) -> bool:
        """Delete a record and cancel its pending retry, if any."""
        record = self._by_id.pop(notification_id, None)
        if record is None:
            return False
        handle = self._retry_timers.pop(notification_id, None)
        if handle is not None:
            handle.cancel()
        self._queue = [n for n in self._queue if n.id != notification_id]
        return True

    def clear_old_notifications(self, max_age_ms: int = DEFAULT_MAX_AGE_MS) -> int:
        """Drop delivered records older than ``max_age_ms``.

        Pending and failed records are always kept. Returns the number removed.
        """
        cutoff = self.clock() - max_age_ms
        kept: list[Notification] = []
        for record in self._queue:
            if record.status != DeliveryStatus.DELIVERED or (record.delivered_at or 0) > cutoff:
                kept.append(record)
            else:
                self._by_id.pop(record.id, None)

        removed = len(self._queue) - len(kept)
        self._queue = kept
        if removed:
            logger.info("Cleared %d delivered notifications older than %dms", removed, max_age_ms)
        return removed
