"""Health check endpoints."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/health")
async def health_check():
    """Return service health status."""
    return {"status": "healthy", "service": "herald-api", "version": "0.3.0"}


@router.get("/health/live")
async def liveness():
    """Liveness probe, always 200 while the process is running."""
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness(request: Request):
    """Readiness probe: the notification service and cleanup job are up."""
    checks: dict[str, str] = {}
    overall_ok = True

    service = getattr(request.app.state, "notification_service", None)
    if service is None:
        checks["notification_service"] = "missing"
        overall_ok = False
    else:
        checks["notification_service"] = "ok"
        checks["queued"] = str(len(service.queue))

    cleanup_task = getattr(request.app.state, "cleanup_task", None)
    if cleanup_task is None:
        checks["cleanup_scheduler"] = "disabled"
    elif cleanup_task.done():
        checks["cleanup_scheduler"] = "stopped"
        overall_ok = False
    else:
        checks["cleanup_scheduler"] = "ok"

    status_code = 200 if overall_ok else 503
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "ready" if overall_ok else "not_ready",
            "checks": checks,
        },
    )
