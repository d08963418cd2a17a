"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from herald.models.notification import Notification
from herald.queue.notification_queue import NotificationQueue
from herald.services.delivery import DeliveryChannel, EmailChannel, RealTimeChannel
from herald.services.notification_factory import NotificationFilters
from herald.services.notification_service import AdminNotificationService
from herald.sessions.registry import AdminSessionRegistry

START_MS = 1_700_000_000_000


class FakeClock:
    """Controllable epoch-ms clock."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeTimerHandle:
    def __init__(self, delay, callback, args):
        self.delay = delay
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeTimerScheduler:
    """Collects scheduled callbacks so tests can fire them on demand."""

    def __init__(self):
        self.handles: list[FakeTimerHandle] = []

    def call_later(self, delay, callback, *args):
        handle = FakeTimerHandle(delay, callback, args)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeTimerHandle]:
        return [h for h in self.handles if not h.cancelled]

    def fire_all(self) -> int:
        """Run every pending timer once; timers scheduled meanwhile wait for the next call."""
        due, self.handles = self.pending, []
        for handle in due:
            handle.callback(*handle.args)
        return len(due)


class FailingChannel(DeliveryChannel):
    """Channel that raises for the first ``failures`` deliveries."""

    channel_type = "failing"

    def __init__(self, failures: int = 10**6):
        self.failures = failures
        self.calls = 0

    def deliver(self, notification: Notification) -> None:
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError("transport unavailable")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timer():
    return FakeTimerScheduler()


@pytest.fixture
def realtime():
    return RealTimeChannel()


@pytest.fixture
def queue(clock, timer, realtime):
    return NotificationQueue(
        channels=[realtime, EmailChannel("admin@example.com")],
        timer=timer,
        clock=clock,
    )


@pytest.fixture
def sessions(clock):
    return AdminSessionRegistry(clock=clock)


@pytest.fixture
def service(queue, sessions, clock):
    svc = AdminNotificationService(queue, sessions, NotificationFilters(), clock)
    svc.init()
    return svc


@pytest.fixture
def app(service):
    """Create a test application bound to the isolated service."""
    from herald.main import create_app

    return create_app(service)


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
