"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Request

from herald.services.delivery import RealTimeChannel
from herald.services.notification_service import AdminNotificationService


def get_notification_service(request: Request) -> AdminNotificationService:
    """Return the process-wide notification service from app state."""
    return request.app.state.notification_service


def get_realtime_channel(request: Request) -> RealTimeChannel | None:
    """Return the real-time channel if it is enabled."""
    service = request.app.state.notification_service
    for channel in service.queue.channels:
        if isinstance(channel, RealTimeChannel):
            return channel
    return None


def get_trace_id(request: Request) -> str:
    """Extract trace_id from request state (set by middleware)."""
    return getattr(request.state, "trace_id", "unknown")


# Type aliases for dependency injection
NotificationService = Annotated[AdminNotificationService, Depends(get_notification_service)]
RealTime = Annotated[RealTimeChannel | None, Depends(get_realtime_channel)]
TraceId = Annotated[str, Depends(get_trace_id)]
