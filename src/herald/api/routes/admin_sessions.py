"""Admin session registration and heartbeat routes."""

from typing import Any

from fastapi import APIRouter, Body

from herald.dependencies import NotificationService
from herald.errors.exceptions import NotFoundError

router = APIRouter(tags=["Admin Sessions"])


@router.get("/admin-sessions")
async def list_active_sessions(service: NotificationService) -> list[dict]:
    return [s.to_dict() for s in service.get_active_sessions()]


@router.post("/admin-sessions/{admin_id}", status_code=201)
async def register_session(
    admin_id: str,
    service: NotificationService,
    session_info: dict[str, Any] | None = Body(None),
) -> dict:
    return service.register_admin_session(admin_id, session_info).to_dict()


@router.post("/admin-sessions/{admin_id}/heartbeat")
async def heartbeat(admin_id: str, service: NotificationService) -> dict:
    if not service.update_admin_activity(admin_id):
        raise NotFoundError("Admin session", admin_id)
    return {"admin_id": admin_id, "active": True}


@router.delete("/admin-sessions/{admin_id}")
async def end_session(admin_id: str, service: NotificationService) -> dict:
    service.end_admin_session(admin_id)
    return {"admin_id": admin_id, "active": False}
