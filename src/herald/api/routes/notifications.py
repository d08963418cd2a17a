"""Admin notification API routes."""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import StreamingResponse

from herald.dependencies import NotificationService, RealTime
from herald.errors.exceptions import NotFoundError
from herald.models.notification import (
    CreateNotificationRequest,
    FlaggedMessageRequest,
    HandlerResult,
    NotificationListResponse,
    SystemAlertRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notifications"])

# Seconds between SSE keepalive comments
_KEEPALIVE_INTERVAL = 30


def _handler_response(result: HandlerResult, response: Response) -> dict:
    if result.ignored:
        response.status_code = 200
        return {"ignored": True}
    response.status_code = 201
    return result.notification.model_dump(mode="json")


@router.post("/notifications", status_code=201)
async def create_notification(
    body: CreateNotificationRequest,
    response: Response,
    service: NotificationService,
) -> dict:
    result = service.notify(body.type, body.data, body.priority)
    return _handler_response(result, response)


@router.get("/notifications")
async def list_notifications(
    service: NotificationService,
    limit: int = Query(10, ge=0, le=500),
    include_read: bool = Query(False, alias="includeRead"),
) -> dict:
    notifications = service.get_admin_notifications(limit=limit, include_read=include_read)
    return NotificationListResponse(
        notifications=notifications,
        unread_count=service.unread_count(),
    ).model_dump(mode="json")


@router.post("/notifications/read-all")
async def mark_all_read(service: NotificationService) -> dict:
    service.mark_all_notifications_read()
    return {"success": True, "unread_count": service.unread_count()}


@router.post("/notifications/{notification_id}/read")
async def mark_read(notification_id: str, service: NotificationService) -> dict:
    if not service.mark_notification_read(notification_id):
        raise NotFoundError("Notification", notification_id)
    return {"success": True, "notification_id": notification_id}


@router.post("/notifications/flagged-message", status_code=201)
async def flagged_message(body: FlaggedMessageRequest, response: Response, service: NotificationService) -> dict:
    result = service.handle_flagged_message(body.flag, body.conversation)
    return _handler_response(result, response)


@router.post("/notifications/user-report", status_code=201)
async def user_report(body: dict, response: Response, service: NotificationService) -> dict:
    result = service.handle_user_report(body)
    return _handler_response(result, response)


@router.post("/notifications/content-dispute", status_code=201)
async def content_dispute(body: dict, response: Response, service: NotificationService) -> dict:
    result = service.handle_content_dispute(body)
    return _handler_response(result, response)


@router.post("/notifications/system-alert", status_code=201)
async def system_alert(body: SystemAlertRequest, response: Response, service: NotificationService) -> dict:
    result = service.send_system_alert(body.alert_type, body.message, body.priority)
    return _handler_response(result, response)


async def _event_generator(request: Request, channel) -> AsyncGenerator[str, None]:
    """Yield SSE-formatted notification events from the real-time channel."""
    if channel is None:
        yield 'data: {"type": "connected", "message": "Real-time alerts disabled (polling recommended)"}\n\n'
        return

    queue = channel.subscribe()
    logger.info("SSE subscriber connected (subscribers=%d)", channel.subscriber_count)
    try:
        yield f"data: {json.dumps({'type': 'connected'})}\n\n"

        while True:
            if await request.is_disconnected():
                break
            try:
                event = await asyncio.wait_for(queue.get(), timeout=_KEEPALIVE_INTERVAL)
                yield f"data: {event}\n\n"
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
    finally:
        channel.unsubscribe(queue)
        logger.info("SSE subscriber disconnected")


@router.get("/notifications/stream")
async def notification_stream(request: Request, channel: RealTime) -> StreamingResponse:
    """Server-Sent Events feed of notifications as they are delivered."""
    return StreamingResponse(
        _event_generator(request, channel),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
