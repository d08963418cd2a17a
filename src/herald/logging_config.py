"""Structured logging for the Herald service.

Application code logs through stdlib ``logging.getLogger(__name__)``; the root
handler renders every record through structlog so request context (trace id,
admin id) bound in the middleware shows up on queue and channel log lines too.
"""

import logging
import sys
from typing import IO, Any

import structlog

SERVICE_NAME = "herald"

# Libraries whose INFO output drowns out delivery logs
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _add_service(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _shared_processors(json_output: bool) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        # console renderer prints tracebacks itself
        processors.append(structlog.processors.format_exc_info)
    return processors


def configure_logging(log_level: str = "info", json_output: bool = False, stream: IO[str] | None = None) -> None:
    """Route stdlib and structlog output through one handler.

    Args:
        log_level: debug/info/warning/error; unknown names fall back to info.
        json_output: One JSON object per line when True, colored console otherwise.
        stream: Where to write; defaults to stdout.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    shared = _shared_processors(json_output)

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=stream is None)

    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=shared,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_context(trace_id: str, admin_id: str | None = None) -> None:
    """Bind request-scoped variables so every log line carries them."""
    ctx = {"trace_id": trace_id}
    if admin_id:
        ctx["admin_id"] = admin_id
    structlog.contextvars.bind_contextvars(**ctx)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
