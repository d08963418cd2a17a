"""Tests for the periodic cleanup job and application lifespan."""

import asyncio

from herald.main import create_app
from herald.queue.notification_queue import NotificationQueue
from herald.services.delivery import EmailChannel, RealTimeChannel
from herald.services.notification_service import AdminNotificationService
from herald.workers.scheduler import run_cleanup_scheduler, run_digest_scheduler

DAY = 24 * 60 * 60 * 1000


async def test_scheduler_clears_and_evicts(app, service, clock):
    service.send_system_alert("old")
    service.register_admin_session("admin-1")
    clock.advance(8 * DAY)

    task = asyncio.create_task(run_cleanup_scheduler(app, interval_seconds=0.01))
    await asyncio.sleep(0.05)
    task.cancel()
    await task

    assert service.queue.get_all_notifications() == []
    assert len(service.sessions) == 0


async def test_scheduler_survives_service_errors(app):
    calls = []

    class Broken:
        def run_cleanup(self, max_age_ms):
            calls.append(max_age_ms)
            raise RuntimeError("boom")

    app.state.notification_service = Broken()
    task = asyncio.create_task(run_cleanup_scheduler(app, interval_seconds=0.01))
    await asyncio.sleep(0.05)
    task.cancel()
    await task

    assert len(calls) >= 2
    assert calls[0] == 7 * DAY


async def test_lifespan_starts_and_stops_scheduler(app, service):
    service.send_system_alert("before start")
    async with app.router.lifespan_context(app):
        task = app.state.cleanup_task
        assert task is not None and not task.done()
        # init() starts from an empty queue
        assert service.queue.get_all_notifications() == []
    assert task.done()


def _digest_service(clock, timer, sessions, frequency="hourly"):
    email = EmailChannel("ops@example.com", frequency)
    queue = NotificationQueue([RealTimeChannel(), email], timer=timer, clock=clock)
    service = AdminNotificationService(queue, sessions, clock=clock)
    service.init()
    return service, email


def test_digest_interval_follows_frequency(clock, timer, sessions, service):
    assert _digest_service(clock, timer, sessions, "hourly")[0].email_digest_interval_seconds == 3600
    assert _digest_service(clock, timer, sessions, "daily")[0].email_digest_interval_seconds == 86400
    # the shared fixture sends email immediately
    assert service.email_digest_interval_seconds is None
    assert service.flush_email_digest() == 0


async def test_digest_scheduler_flushes_batched_email(clock, timer, sessions):
    service, email = _digest_service(clock, timer, sessions)
    app = create_app(service)
    service.send_system_alert("disk full", priority="critical")
    service.send_system_alert("cpu hot", priority="high")
    service.send_system_alert("fyi", priority="low")
    assert len(email.digest) == 2

    task = asyncio.create_task(run_digest_scheduler(app, interval_seconds=0.01))
    await asyncio.sleep(0.05)
    task.cancel()
    await task

    assert email.digest == []


async def test_lifespan_runs_digest_job_only_when_batching(clock, timer, sessions, app):
    async with app.router.lifespan_context(app):
        assert app.state.digest_task is None

    service, email = _digest_service(clock, timer, sessions, "daily")
    digest_app = create_app(service)
    async with digest_app.router.lifespan_context(digest_app):
        task = digest_app.state.digest_task
        assert task is not None and not task.done()
        service.send_system_alert("outage", priority="critical")
        assert len(email.digest) == 1
    assert task.done()
    # pending digest is sent on shutdown
    assert email.digest == []
