"""API tests for notification and admin session routes."""

import pytest

from herald.models.enums import Priority
from herald.services.notification_factory import NotificationFilters


@pytest.mark.asyncio
async def test_create_notification(client):
    r = await client.post(
        "/api/v1/notifications",
        json={"type": "system_alert", "data": {"alertType": "disk"}, "priority": "high"},
    )
    assert r.status_code == 201
    data = r.json()
    assert data["id"].startswith("notification_")
    assert data["title"] == "System Alert: disk"
    assert data["priority"] == "high"
    assert data["status"] == "delivered"
    assert data["read"] is False
    assert r.headers["X-Trace-Id"].startswith("trc_")


@pytest.mark.asyncio
async def test_create_filtered_notification_returns_ignored(client, service):
    service.filters = NotificationFilters(min_severity=Priority.CRITICAL)
    r = await client.post("/api/v1/notifications", json={"type": "system_alert", "priority": "low"})
    assert r.status_code == 200
    assert r.json() == {"ignored": True}
    assert service.queue.get_all_notifications() == []


@pytest.mark.asyncio
async def test_create_requires_type(client):
    r = await client.post("/api/v1/notifications", json={"data": {}})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_list_sorted_and_limited(client, service, clock):
    service.send_system_alert("a", priority="low")
    clock.advance(10)
    service.send_system_alert("b", priority="critical")
    clock.advance(10)
    service.send_system_alert("c", priority="medium")

    r = await client.get("/api/v1/notifications", params={"limit": 2})
    assert r.status_code == 200
    body = r.json()
    assert [n["priority"] for n in body["notifications"]] == ["critical", "medium"]
    assert body["unread_count"] == 3


@pytest.mark.asyncio
async def test_mark_read_and_include_read(client, service):
    n = service.send_system_alert("a").notification

    r = await client.post(f"/api/v1/notifications/{n.id}/read", headers={"X-Trace-Id": "trc_fixed_trace"})
    assert r.status_code == 200
    assert r.headers["X-Trace-Id"] == "trc_fixed_trace"

    r = await client.get("/api/v1/notifications")
    assert r.json()["notifications"] == []

    r = await client.get("/api/v1/notifications", params={"includeRead": "true"})
    assert [x["id"] for x in r.json()["notifications"]] == [n.id]


@pytest.mark.asyncio
async def test_mark_read_unknown_is_404(client):
    r = await client.post("/api/v1/notifications/nope/read", headers={"X-Trace-Id": "trc_missing_one"})
    assert r.status_code == 404
    error = r.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["trace_id"] == "trc_missing_one"


@pytest.mark.asyncio
async def test_read_all_twice(client, service):
    service.send_system_alert("a")
    service.send_system_alert("b")
    for _ in range(2):
        r = await client.post("/api/v1/notifications/read-all")
        assert r.status_code == 200
        assert r.json() == {"success": True, "unread_count": 0}


@pytest.mark.asyncio
async def test_flagged_message_endpoint(client):
    r = await client.post(
        "/api/v1/notifications/flagged-message",
        json={
            "flag": {"severity": "critical", "flagReason": "spam", "confidenceScore": 0.91},
            "conversation": {"id": "c1", "subject": "Test"},
        },
    )
    assert r.status_code == 201
    data = r.json()
    assert data["priority"] == "critical"
    assert "spam" in data["title"]
    assert "91%" in data["message"]


@pytest.mark.asyncio
async def test_user_report_and_dispute_endpoints(client):
    r = await client.post("/api/v1/notifications/user-report", json={"reportReason": "harassment"})
    assert r.status_code == 201
    assert r.json()["priority"] == "high"

    r = await client.post("/api/v1/notifications/user-report", json={"reportReason": "spam"})
    assert r.json()["priority"] == "medium"

    r = await client.post(
        "/api/v1/notifications/content-dispute",
        json={"disputerName": "Cy", "disputeReason": "wrong call"},
    )
    assert r.status_code == 201
    assert r.json()["title"] == "Content Dispute"


@pytest.mark.asyncio
async def test_system_alert_endpoint(client):
    r = await client.post(
        "/api/v1/notifications/system-alert",
        json={"alert_type": "deploy", "priority": "critical"},
    )
    assert r.status_code == 201
    assert r.json()["message"] == "System alert: deploy"


@pytest.mark.asyncio
async def test_admin_session_lifecycle(client, clock):
    r = await client.post("/api/v1/admin-sessions/admin-1", json={"browser": "firefox"})
    assert r.status_code == 201
    assert r.json()["browser"] == "firefox"
    assert r.json()["last_active"] == clock.now

    clock.advance(60_000)
    r = await client.post("/api/v1/admin-sessions/admin-1/heartbeat")
    assert r.status_code == 200

    r = await client.get("/api/v1/admin-sessions")
    assert [s["admin_id"] for s in r.json()] == ["admin-1"]
    assert r.json()[0]["last_active"] == clock.now

    r = await client.delete("/api/v1/admin-sessions/admin-1")
    assert r.status_code == 200
    r = await client.get("/api/v1/admin-sessions")
    assert r.json() == []


@pytest.mark.asyncio
async def test_heartbeat_unknown_session_is_404(client):
    r = await client.post("/api/v1/admin-sessions/ghost/heartbeat")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_register_session_without_body(client):
    r = await client.post("/api/v1/admin-sessions/admin-2")
    assert r.status_code == 201
    assert r.json()["admin_id"] == "admin-2"
