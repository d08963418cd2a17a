"""Delivery channels for queued notifications.

Channels are simulated transports: they log the hand-off and, for the
real-time channel, fan the notification out to in-process subscribers
(the SSE stream endpoint). A channel signals failure by raising.
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod

from herald.errors.exceptions import DeliveryError
from herald.models.enums import Priority
from herald.models.notification import Notification

logger = logging.getLogger(__name__)

_URGENT = (Priority.HIGH, Priority.CRITICAL)

DIGEST_INTERVALS: dict[str, float] = {"hourly": 60 * 60, "daily": 24 * 60 * 60}


class DeliveryChannel(ABC):
    """A transport a notification can be delivered through."""

    channel_type: str = "unknown"

    def applies_to(self, notification: Notification) -> bool:
        """Return True if this channel should carry the notification."""
        return True

    @abstractmethod
    def deliver(self, notification: Notification) -> None:
        """Hand the notification off. Raise to signal failure."""
        ...


class RealTimeChannel(DeliveryChannel):
    """In-app delivery to every connected dashboard subscriber."""

    channel_type = "real_time"

    def __init__(self) -> None:
        self._subscribers: list[asyncio.Queue] = []

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=100)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers = [q for q in self._subscribers if q is not queue]

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def deliver(self, notification: Notification) -> None:
        logger.info("[REAL-TIME] Delivering notification: %s", notification.title)
        event = json.dumps({"type": "notification", "notification": notification.model_dump(mode="json")})
        for queue in self._subscribers:
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning("Dropping real-time event for slow subscriber (id=%s)", notification.id)


class EmailChannel(DeliveryChannel):
    """Email delivery for urgent notifications.

    With an hourly or daily ``frequency`` messages are held in a digest until
    ``flush_digest`` runs; the app schedules that every
    ``digest_interval_seconds``.
    """

    channel_type = "email"

    def __init__(self, address: str, frequency: str = "immediate") -> None:
        self.address = address
        self.frequency = frequency
        self.digest: list[Notification] = []

    @property
    def digest_interval_seconds(self) -> float | None:
        """Seconds between digest sends, or None when sending immediately."""
        return DIGEST_INTERVALS.get(self.frequency)

    def applies_to(self, notification: Notification) -> bool:
        return notification.priority in _URGENT

    def deliver(self, notification: Notification) -> None:
        if not self.address:
            raise DeliveryError(self.channel_type, "no recipient address configured")
        if self.frequency != "immediate":
            self.digest.append(notification)
            logger.info("[EMAIL] Queued for %s digest: %s", self.frequency, notification.title)
            return
        logger.info("[EMAIL] Sending notification to %s: %s", self.address, notification.title)

    def flush_digest(self) -> list[Notification]:
        """Send and clear the pending digest, returning what was sent."""
        sent, self.digest = self.digest, []
        if sent:
            logger.info("[EMAIL] Sending %s digest of %d notifications to %s", self.frequency, len(sent), self.address)
        return sent


class PushChannel(DeliveryChannel):
    """Device push delivery for urgent notifications."""

    channel_type = "push"

    def __init__(self, token: str | None = None, device_id: str | None = None) -> None:
        self.token = token
        self.device_id = device_id

    def applies_to(self, notification: Notification) -> bool:
        return notification.priority in _URGENT

    def deliver(self, notification: Notification) -> None:
        if not self.token:
            raise DeliveryError(self.channel_type, "no device token registered")
        logger.info("[PUSH] Sending push notification to %s: %s", self.device_id or "device", notification.title)


def build_channels(settings) -> list[DeliveryChannel]:
    """Instantiate the channels enabled in settings, real-time first."""
    channels: list[DeliveryChannel] = []
    if settings.enable_real_time_alerts:
        channels.append(RealTimeChannel())
    if settings.enable_email_notifications:
        channels.append(EmailChannel(settings.email_address, settings.email_frequency))
    if settings.enable_push_notifications:
        channels.append(PushChannel(settings.push_token, settings.push_device_id))
    return channels
