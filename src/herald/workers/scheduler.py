"""Background schedulers for cleanup and email digest delivery."""

import asyncio
import logging

from herald.config import settings

logger = logging.getLogger(__name__)


async def run_cleanup_scheduler(app, interval_seconds: float | None = None) -> None:
    """Background task that clears old delivered notifications and idle sessions."""
    interval = interval_seconds if interval_seconds is not None else settings.cleanup_interval_seconds
    logger.info("Cleanup scheduler started (interval=%ss)", interval)

    while True:
        try:
            await asyncio.sleep(interval)

            service = getattr(app.state, "notification_service", None)
            if service is None:
                continue

            result = service.run_cleanup(settings.notification_max_age_ms)
            if any(result.values()):
                logger.info(
                    "Cleanup removed %d notifications, evicted %d sessions",
                    result["notifications_cleared"],
                    result["sessions_evicted"],
                )

        except asyncio.CancelledError:
            logger.info("Cleanup scheduler stopped")
            break
        except Exception as exc:
            logger.exception("Cleanup scheduler error: %s", exc)


async def run_digest_scheduler(app, interval_seconds: float) -> None:
    """Background task that sends batched email digests on their schedule."""
    logger.info("Email digest scheduler started (interval=%ss)", interval_seconds)

    while True:
        try:
            await asyncio.sleep(interval_seconds)

            service = getattr(app.state, "notification_service", None)
            if service is None:
                continue

            sent = service.flush_email_digest()
            if sent:
                logger.info("Email digest sent %d notifications", sent)

        except asyncio.CancelledError:
            logger.info("Email digest scheduler stopped")
            break
        except Exception as exc:
            logger.exception("Email digest scheduler error: %s", exc)
