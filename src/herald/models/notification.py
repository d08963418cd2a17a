"""Pydantic models for notifications and handler results."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from herald.models.enums import DeliveryStatus, Priority


class Notification(BaseModel):
    """A notification record as owned by the queue.

    ``type`` is kept as a plain string: members of ``NotificationType`` compare
    equal to their values, and unknown types survive with the default template.
    """

    id: str
    type: str
    priority: Priority = Priority.MEDIUM
    title: str
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: int
    read: bool = False

    # Queue bookkeeping
    status: DeliveryStatus = DeliveryStatus.PENDING
    attempts: int = 0
    created_at: int | None = None
    delivered_at: int | None = None
    error: str | None = None
    channels_delivered: list[str] = Field(default_factory=list)


class IgnoredNotification(BaseModel):
    """Sentinel returned when filters suppress a notification."""

    ignored: Literal[True] = True


class HandlerResult(BaseModel):
    """Outcome of one of the service's event handlers."""

    success: bool = True
    ignored: bool = False
    notification: Notification | None = None


class CreateNotificationRequest(BaseModel):
    """Request body for ``POST /notifications``."""

    type: str
    data: dict[str, Any] = Field(default_factory=dict)
    priority: str = Priority.MEDIUM


class FlaggedMessageRequest(BaseModel):
    flag: dict[str, Any]
    conversation: dict[str, Any] = Field(default_factory=dict)


class SystemAlertRequest(BaseModel):
    alert_type: str
    message: str | None = None
    priority: str = Priority.MEDIUM


class NotificationListResponse(BaseModel):
    notifications: list[Notification]
    unread_count: int
