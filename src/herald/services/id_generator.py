"""Prefixed ID generation and clock utilities."""

import time
import uuid
from collections.abc import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def generate_id(prefix: str, timestamp: int | None = None) -> str:
    """Generate a prefixed, time-ordered unique ID.

    Args:
        prefix: The prefix (e.g., "notification_").
        timestamp: Epoch milliseconds to embed; defaults to now.

    Returns:
        A string like "notification_1718000000000_a1b2c3d4e".
    """
    ts = now_ms() if timestamp is None else timestamp
    return f"{prefix}{ts}_{uuid.uuid4().hex[:9]}"
