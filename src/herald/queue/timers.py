"""Cancellable timer scheduling for delayed queue work."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerScheduler(Protocol):
    """Schedules a callback after a delay and returns a cancellable handle."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle | None: ...


class AsyncioTimerScheduler:
    """Timer scheduler backed by the running asyncio event loop.

    Outside a running loop nothing is scheduled and ``call_later`` returns None.
    """

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.error("No running event loop, timer for %s not scheduled", getattr(callback, "__name__", callback))
            return None
        return loop.call_later(delay, callback, *args)
