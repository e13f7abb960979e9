from __future__ import annotations

import pytest

from cleantrack.container import build_container
from cleantrack.main import create_app
from cleantrack.store.memory_store import InMemoryDocumentStore

from factories import ADMIN_PASSWORD, make_settings


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    container = build_container(settings=make_settings(), store=InMemoryDocumentStore())
    app = create_app(container)
    yield app
    container.sessions.close_all()


def _login(client, **body):
    resp = client.post("/api/login", json=body)
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


def test_requires_login(app):
    client = app.test_client()

    resp = client.get("/api/state")

    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Login required"}


def test_unknown_role_is_bad_request(app):
    resp = app.test_client().post("/api/login", json={"role": "janitor", "password": "x"})
    assert resp.status_code == 400


def test_full_compliance_and_deletion_flow(app):
    admin = app.test_client()
    _login(admin, role="top_admin", password=ADMIN_PASSWORD)

    resp = admin.post(
        "/api/admin/departments",
        json={"display_name": "Store A", "owner_name": "Alice", "password": "mgr-pw"},
    )
    assert resp.status_code == 201
    department = resp.get_json()["department"]
    assert "secret_hash" not in department
    dept_id = department["department_id"]

    manager = app.test_client()
    session = _login(manager, role="manager", department_id=dept_id, password="mgr-pw")
    assert session["scope"]["department_id"] == dept_id

    worker_id = manager.post("/api/workers", json={"display_name": "Ann", "password": "w-pw"}).get_json()["worker"][
        "worker_id"
    ]
    location = manager.post(
        "/api/locations", json={"name_en": "Restroom", "name_zh": "卫生间", "target_daily_frequency": 2}
    ).get_json()["location"]

    directory = app.test_client().get("/api/directory/workers").get_json()["workers"]
    assert directory == [{"worker_id": worker_id, "department_id": dept_id, "display_name": "Ann", "avatar": directory[0]["avatar"]}]

    worker = app.test_client()
    _login(worker, role="worker", worker_id=worker_id, password="w-pw")
    resp = worker.post("/api/checkins", json={"location_id": location["location_id"]})
    assert resp.status_code == 201

    report = manager.get("/api/compliance").get_json()
    assert report["period_days"] == 1
    assert report["total_completed"] == 1
    assert report["locations"][0]["percentage"] == 50
    assert report["locations"][0]["classification"] == "at_risk"
    assert report["at_risk_count"] == 1

    history = manager.get(f"/api/compliance/locations/{location['location_id']}").get_json()
    assert history["checkins"][0]["worker_name"] == "Ann"

    # Workers never see check-ins or reports.
    assert worker.get("/api/compliance").status_code == 403
    state = worker.get("/api/state").get_json()
    assert set(state["collections"]) == {"locations"}

    resp = manager.delete(f"/api/locations/{location['location_id']}")
    assert resp.status_code == 202
    request_id = resp.get_json()["request"]["request_id"]

    pending = admin.get("/api/deletion-requests?status=pending").get_json()["requests"]
    assert [r["request_id"] for r in pending] == [request_id]

    resp = admin.post(f"/api/deletion-requests/{request_id}/approve")
    assert resp.get_json()["applied"] is True
    assert resp.get_json()["location_deleted"] is True

    again = admin.post(f"/api/deletion-requests/{request_id}/reject").get_json()
    assert again["applied"] is False
    assert again["request"]["status"] == "approved"

    assert manager.get("/api/locations").get_json()["locations"] == []


def test_manager_cannot_touch_admin_endpoints(app):
    admin = app.test_client()
    _login(admin, role="top_admin", password=ADMIN_PASSWORD)
    dept_id = admin.post(
        "/api/admin/departments", json={"display_name": "S", "owner_name": "O", "password": "p"}
    ).get_json()["department"]["department_id"]

    manager = app.test_client()
    _login(manager, role="manager", department_id=dept_id, password="p")

    assert manager.get("/api/admin/departments").status_code == 403
    assert manager.get("/api/deletion-requests").status_code == 403


def test_admin_select_department_and_purge(app):
    admin = app.test_client()
    _login(admin, role="top_admin", password=ADMIN_PASSWORD)
    dept_id = admin.post(
        "/api/admin/departments", json={"display_name": "S", "owner_name": "O", "password": "p"}
    ).get_json()["department"]["department_id"]

    selected = admin.post(f"/api/admin/departments/{dept_id}/select").get_json()
    assert selected["selected_department_id"] == dept_id
    assert selected["scope"]["can_delete_locations"] is True

    location_id = admin.post("/api/locations", json={"name_en": "Hall"}).get_json()["location"]["location_id"]
    assert admin.delete(f"/api/locations/{location_id}").get_json() == {"deleted": True}
    admin.post("/api/locations", json={"name_en": "Hall 2"})

    admin.post("/api/admin/departments/deselect")
    assert admin.delete(f"/api/admin/departments/{dept_id}").status_code == 400
    assert admin.delete(f"/api/admin/departments/{dept_id}?purge=1").status_code == 200
    assert admin.get("/api/admin/departments").get_json()["departments"] == []


def test_logout_ends_session(app):
    client = app.test_client()
    _login(client, role="top_admin", password=ADMIN_PASSWORD)

    assert client.post("/api/logout").get_json() == {"ok": True}
    assert client.get("/api/session").status_code == 401
