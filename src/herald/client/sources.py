"""Notification sources the dashboard handler can poll.

``LocalNotificationSource`` wraps an in-process service; ``HeraldAPIClient``
talks to a running Herald API over HTTP.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from herald.models.notification import Notification
from herald.services.notification_service import AdminNotificationService

logger = logging.getLogger(__name__)


class NotificationSource(Protocol):
    async def fetch_notifications(self, limit: int, include_read: bool = False) -> list[Notification]: ...

    async def mark_read(self, notification_id: str) -> bool: ...

    async def mark_all_read(self) -> bool: ...

    async def register_session(self, admin_id: str, session_info: dict[str, Any]) -> bool: ...

    async def heartbeat(self, admin_id: str) -> bool: ...

    async def end_session(self, admin_id: str) -> bool: ...


class LocalNotificationSource:
    """Adapter exposing an in-process service through the source protocol."""

    def __init__(self, service: AdminNotificationService) -> None:
        self.service = service

    async def fetch_notifications(self, limit: int, include_read: bool = False) -> list[Notification]:
        return self.service.get_admin_notifications(limit, include_read)

    async def mark_read(self, notification_id: str) -> bool:
        return self.service.mark_notification_read(notification_id)

    async def mark_all_read(self) -> bool:
        return self.service.mark_all_notifications_read()

    async def register_session(self, admin_id: str, session_info: dict[str, Any]) -> bool:
        self.service.register_admin_session(admin_id, session_info)
        return True

    async def heartbeat(self, admin_id: str) -> bool:
        return self.service.update_admin_activity(admin_id)

    async def end_session(self, admin_id: str) -> bool:
        return self.service.end_admin_session(admin_id)


class HeraldAPIClient:
    """Async HTTP client for the Herald notification API."""

    def __init__(
        self,
        base_url: str = "http://localhost:8080/api/v1",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response | None:
        """Request helper; returns None when the API is unreachable."""
        try:
            return await self._client.request(method, f"{self.base_url}{path}", **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Herald API %s %s failed: %s", method, path, exc)
            return None

    async def fetch_notifications(self, limit: int, include_read: bool = False) -> list[Notification]:
        r = await self._request(
            "GET",
            "/notifications",
            params={"limit": limit, "includeRead": str(include_read).lower()},
        )
        if r is None or r.status_code != 200:
            return []
        return [Notification.model_validate(n) for n in r.json().get("notifications", [])]

    async def mark_read(self, notification_id: str) -> bool:
        r = await self._request("POST", f"/notifications/{notification_id}/read")
        return r is not None and r.status_code == 200

    async def mark_all_read(self) -> bool:
        r = await self._request("POST", "/notifications/read-all")
        return r is not None and r.status_code == 200

    async def register_session(self, admin_id: str, session_info: dict[str, Any]) -> bool:
        r = await self._request("POST", f"/admin-sessions/{admin_id}", json=session_info)
        return r is not None and r.status_code == 201

    async def heartbeat(self, admin_id: str) -> bool:
        r = await self._request("POST", f"/admin-sessions/{admin_id}/heartbeat")
        return r is not None and r.status_code == 200

    async def end_session(self, admin_id: str) -> bool:
        r = await self._request("DELETE", f"/admin-sessions/{admin_id}")
        return r is not None and r.status_code == 200
