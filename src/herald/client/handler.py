"""Dashboard-side notification handler.

Polls a notification source, keeps the panel's read/unread state, and raises
one announcement (sound + toast, supplied by the caller) per poll cycle that
brings in something new.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from herald.client.formatting import NavigationTarget, navigation_target
from herald.client.sources import NotificationSource
from herald.models.notification import Notification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Announcement:
    """A new-notification alert.

    ``notification`` is the highest-ranked of the unseen arrivals;
    ``new_count`` is how many unseen notifications arrived in the same poll
    cycle.
    """

    notification: Notification
    new_count: int = 1


AnnounceCallback = Callable[[Announcement], Any]


class NotificationHandler:
    def __init__(
        self,
        source: NotificationSource,
        admin_id: str = "admin-user",
        poll_interval: float = 30.0,
        mark_read_delay: float = 2.0,
        fetch_limit: int = 20,
        on_announce: AnnounceCallback | None = None,
        session_info: dict[str, Any] | None = None,
    ) -> None:
        self.source = source
        self.admin_id = admin_id
        self.poll_interval = poll_interval
        self.mark_read_delay = mark_read_delay
        self.fetch_limit = fetch_limit
        self.on_announce = on_announce
        self.session_info = session_info or {}

        self.notifications: list[Notification] = []
        self.unread_count = 0
        self.is_panel_open = False
        self.is_initialized = False
        self.last_notification_id: str | None = None
        self.announcements: list[Announcement] = []

        self._loaded_once = False
        self._seen_ids: set[str] = set()
        self._poll_task: asyncio.Task | None = None
        self._mark_read_task: asyncio.Task | None = None

    async def init(self) -> None:
        """Register the session, load notifications and start polling."""
        if self.is_initialized:
            return
        await self.source.register_session(self.admin_id, self.session_info)
        await self.refresh()
        self.start_polling()
        self.is_initialized = True

    async def shutdown(self) -> None:
        """Stop background work and end the admin session."""
        await self.stop_polling()
        if self._mark_read_task is not None:
            self._mark_read_task.cancel()
            self._mark_read_task = None
        await self.source.end_session(self.admin_id)
        self.is_initialized = False

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def start_polling(self, interval: float | None = None) -> None:
        if interval is not None:
            self.poll_interval = interval
        if self._poll_task is not None:
            self._poll_task.cancel()
        self._poll_task = asyncio.create_task(self._poll_loop())

    async def stop_polling(self) -> None:
        task, self._poll_task = self._poll_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            try:
                await self.refresh()
                await self.source.heartbeat(self.admin_id)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Notification poll failed (admin=%s)", self.admin_id)

    async def refresh(self) -> None:
        """Reload unread notifications and announce new arrivals.

        Only ids never seen before count as new; items surfacing because
        something above them was read are not announced.
        """
        notifications = await self.source.fetch_notifications(self.fetch_limit, False)
        self.notifications = notifications
        self.unread_count = sum(1 for n in notifications if not n.read)

        new = [n for n in notifications if n.id not in self._seen_ids]
        self._seen_ids.update(n.id for n in notifications)

        if new and self._loaded_once:
            # list is priority-sorted, so the first new item is the top-ranked one
            await self._announce(Announcement(new[0], len(new)))
        if notifications:
            self.last_notification_id = notifications[0].id
        self._loaded_once = True

    async def _announce(self, announcement: Announcement) -> None:
        self.announcements.append(announcement)
        if self.on_announce is None:
            return
        try:
            result = self.on_announce(announcement)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.warning("Announcement callback failed for %s", announcement.notification.id, exc_info=True)

    # ------------------------------------------------------------------
    # Panel
    # ------------------------------------------------------------------

    def open_panel(self) -> None:
        """Open the panel; unread items are marked read after a short delay."""
        self.is_panel_open = True
        if self.unread_count > 0:
            if self._mark_read_task is not None:
                self._mark_read_task.cancel()
            self._mark_read_task = asyncio.create_task(self._mark_read_after_delay())

    def close_panel(self) -> None:
        self.is_panel_open = False

    def toggle_panel(self) -> None:
        if self.is_panel_open:
            self.close_panel()
        else:
            self.open_panel()

    async def _mark_read_after_delay(self) -> None:
        await asyncio.sleep(self.mark_read_delay)
        if self.is_panel_open:
            await self.mark_visible_as_read()

    async def mark_visible_as_read(self) -> None:
        for notification in [n for n in self.notifications if not n.read]:
            await self.source.mark_read(notification.id)
        await self.refresh()

    async def mark_read(self, notification_id: str) -> bool:
        ok = await self.source.mark_read(notification_id)
        await self.refresh()
        return ok

    async def mark_all_as_read(self) -> None:
        await self.source.mark_all_read()
        await self.refresh()

    async def handle_click(self, notification: Notification) -> NavigationTarget | None:
        """Mark a clicked notification read and return where to navigate."""
        await self.source.mark_read(notification.id)
        target = navigation_target(notification)
        await self.refresh()
        self.close_panel()
        return target
