"""Tests for the simulated delivery channels."""

import asyncio
import json

import pytest

from herald.config import Settings
from herald.errors.exceptions import DeliveryError
from herald.models.enums import DeliveryStatus
from herald.queue.notification_queue import NotificationQueue
from herald.services.delivery import EmailChannel, PushChannel, RealTimeChannel, build_channels
from herald.services.notification_factory import create_notification


def _n(priority="medium"):
    return create_notification("system_alert", {"alertType": "t"}, priority)


async def test_realtime_fans_out_to_subscribers():
    channel = RealTimeChannel()
    a = channel.subscribe()
    b = channel.subscribe()
    n = _n()
    channel.deliver(n)

    for q in (a, b):
        event = json.loads(q.get_nowait())
        assert event["type"] == "notification"
        assert event["notification"]["id"] == n.id

    channel.unsubscribe(a)
    assert channel.subscriber_count == 1


async def test_realtime_drops_for_full_subscriber():
    channel = RealTimeChannel()
    q = channel.subscribe()
    for _ in range(q.maxsize + 5):
        channel.deliver(_n())
    assert q.qsize() == q.maxsize


@pytest.mark.parametrize("priority, applies", [("low", False), ("medium", False), ("high", True), ("critical", True)])
def test_urgent_channels_gate_on_priority(priority, applies):
    assert EmailChannel("a@b.c").applies_to(_n(priority)) is applies
    assert PushChannel("tok").applies_to(_n(priority)) is applies
    assert RealTimeChannel().applies_to(_n(priority)) is True


def test_email_digest_mode():
    channel = EmailChannel("a@b.c", frequency="hourly")
    channel.deliver(_n("high"))
    channel.deliver(_n("critical"))
    assert len(channel.digest) == 2
    assert len(channel.flush_digest()) == 2
    assert channel.digest == []


def test_push_without_token_fails_delivery(clock, timer):
    q = NotificationQueue([RealTimeChannel(), PushChannel(token=None)], timer=timer, clock=clock)
    critical = q.enqueue(create_notification("system_alert", {}, "critical", clock=clock))
    medium = q.enqueue(create_notification("system_alert", {}, "medium", clock=clock))

    assert critical.status == DeliveryStatus.FAILED
    assert "push" in critical.error
    assert medium.status == DeliveryStatus.DELIVERED


def test_email_without_address_raises():
    with pytest.raises(DeliveryError):
        EmailChannel("").deliver(_n("high"))


def test_build_channels_follows_settings():
    channels = build_channels(Settings(enable_real_time_alerts=False, enable_email_notifications=True))
    assert [c.channel_type for c in channels] == ["email"]

    channels = build_channels(Settings(enable_push_notifications=True, push_token="t"))
    assert [c.channel_type for c in channels] == ["real_time", "email", "push"]


async def test_realtime_subscriber_receives_enqueued_notification(service, realtime):
    q = realtime.subscribe()
    n = service.send_system_alert("stream").notification
    event = json.loads(await asyncio.wait_for(q.get(), timeout=1))
    assert event["notification"]["id"] == n.id
