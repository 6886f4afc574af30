from __future__ import annotations

from fastapi.testclient import TestClient

from backend.app import app
from backend.stalls.data_store import reset_store
from backend.users.favorites import add_favorite, clear_favorites
from backend.users.notifications import (
    MAX_NOTIFICATIONS,
    clear_notifications,
    get_notifications,
    notify,
)

client = TestClient(app)


def _status(is_open):
    return client.post("/api/v1/owner/status", json={
        "stall_id": "1", "owner_id": "owner-1", "is_open": is_open,
    })


def test_opening_notifies_favoriting_users():
    reset_store()
    clear_favorites()
    clear_notifications()
    add_favorite("user-1", "1")
    add_favorite("user-2", "2")

    _status(False)
    assert get_notifications("user-1") == []
    _status(True)

    body = client.get("/api/v1/users/user-1/notifications").json()
    assert body["unread_count"] == 1
    note = body["notifications"][0]
    assert note["type"] == "favorite_stall_open"
    assert note["title"] == "Raju Vada Pav is now OPEN!"
    assert note["data"] == {"stall_id": "1"}
    assert note["read"] is False
    assert client.get("/api/v1/users/user-2/notifications").json()["unread_count"] == 0


def test_mark_notification_read():
    clear_notifications()
    first = notify("user-1", "system", "Welcome")
    notify("user-1", "system", "Second")

    resp = client.put(f"/api/v1/users/user-1/notifications/{first['id']}/read")
    assert resp.status_code == 200

    body = client.get("/api/v1/users/user-1/notifications").json()
    assert body["unread_count"] == 1
    assert [n["title"] for n in body["notifications"]] == ["Second", "Welcome"]

    unread = client.get(
        "/api/v1/users/user-1/notifications", params={"unread_only": True},
    ).json()
    assert [n["title"] for n in unread["notifications"]] == ["Second"]


def test_mark_other_users_notification_not_found():
    clear_notifications()
    note = notify("user-1", "system", "Welcome")
    resp = client.put(f"/api/v1/users/user-2/notifications/{note['id']}/read")
    assert resp.status_code == 404
    assert get_notifications("user-1")[0]["read"] is False


def test_mark_all_read():
    clear_notifications()
    for i in range(3):
        notify("user-1", "system", f"n{i}")
    notify("user-2", "system", "other")

    resp = client.put("/api/v1/users/user-1/notifications/read-all")
    assert resp.status_code == 200
    assert resp.json()["marked"] == 3
    assert client.get("/api/v1/users/user-1/notifications").json()["unread_count"] == 0
    assert client.get("/api/v1/users/user-2/notifications").json()["unread_count"] == 1


def test_notifications_capped():
    clear_notifications()
    for i in range(MAX_NOTIFICATIONS + 5):
        notify("user-1", "system", f"n{i}")
    items = get_notifications("user-1")
    assert len(items) == MAX_NOTIFICATIONS
    assert items[0]["title"] == f"n{MAX_NOTIFICATIONS + 4}"
