"""
HTTP-level tests for the admin, guest portal and public routes
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.core.db import Base, get_db
from app.utils.security import RateLimiter, get_rate_limiter
from main import app

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_api.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_HEADERS = {"Authorization": f"Bearer {settings.ADMIN_TOKEN}"}

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def client():
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_limiter] = lambda: RateLimiter(limit=1000)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=engine)

def create_table(client, name, capacity, shape="round"):
    response = client.post(
        "/admin/tables",
        json={"name": name, "shape": shape, "capacity": capacity},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 200
    return response.json()["data"]

def create_guest(client, name, party_size=1, table_id=None):
    response = client.post(
        "/admin/guests",
        json={"name": name, "party_size": party_size, "table_id": table_id},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 200
    return response.json()["data"]

def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}

def test_root_lists_entry_points(client):
    data = client.get("/").json()
    assert data["guest_portal"] == "/guest/portal"
    assert data["seating_feed"] == "/ws/seating"

def test_no_unauthenticated_websocket_stats(client):
    assert client.get("/ws/stats").status_code == 404

def test_admin_routes_reject_bad_token(client):
    response = client.get("/admin/tables", headers={"Authorization": "Bearer wrong"})
    assert response.status_code == 401

def test_assign_and_unassign(client):
    table = create_table(client, "Table 1", 8)
    guest = create_guest(client, "John Doe", party_size=3)

    response = client.post(
        f"/admin/guests/{guest['id']}/assign",
        json={"table_id": table["id"]},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 200
    assert response.json()["data"]["table_id"] == table["id"]

    tables = client.get("/admin/tables", headers=ADMIN_HEADERS).json()["data"]["tables"]
    assert tables[0]["seats_used"] == 3
    assert tables[0]["seats_available"] == 5
    assert tables[0]["is_full"] is False

    response = client.post(f"/admin/guests/{guest['id']}/unassign", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.json()["data"]["table_id"] is None

def test_capacity_exceeded_maps_to_400(client):
    table = create_table(client, "Small", 4)
    create_guest(client, "Party of Three", party_size=3, table_id=table["id"])
    guest = create_guest(client, "Couple", party_size=2)

    response = client.post(
        f"/admin/guests/{guest['id']}/assign",
        json={"table_id": table["id"]},
        headers=ADMIN_HEADERS,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "capacity_exceeded"
    assert body["details"] == {"table_name": "Small", "seats_needed": 2, "seats_available": 1}
    assert "only 1 seat is available" in body["message"]

def test_missing_resources_map_to_404(client):
    table = create_table(client, "Table 1", 8)

    response = client.post(
        "/admin/guests/missing/assign",
        json={"table_id": table["id"]},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 404
    assert response.json()["error_code"] == "not_found"

    guest = create_guest(client, "Jane")
    response = client.post(
        f"/admin/guests/{guest['id']}/assign",
        json={"table_id": "missing"},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 404

    assert client.delete("/admin/tables/missing", headers=ADMIN_HEADERS).status_code == 404

def test_duplicate_and_empty_table_names(client):
    create_table(client, "Head Table", 10)

    response = client.post("/admin/tables", json={"name": "HEAD TABLE"}, headers=ADMIN_HEADERS)
    assert response.status_code == 400
    assert response.json()["error_code"] == "duplicate_name"

    response = client.post("/admin/tables", json={"name": "  "}, headers=ADMIN_HEADERS)
    assert response.status_code == 400
    assert response.json()["error_code"] == "empty_name"

def test_delete_table_unassigns_guests(client):
    table = create_table(client, "Doomed", 10)
    guest = create_guest(client, "Seated", party_size=2, table_id=table["id"])

    response = client.delete(f"/admin/tables/{table['id']}", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.json()["data"]["unassigned_count"] == 1

    guests = client.get("/admin/guests", headers=ADMIN_HEADERS).json()["data"]["guests"]
    assert [(g["id"], g["table_id"]) for g in guests] == [(guest["id"], None)]

def test_auto_assign_endpoint(client):
    create_table(client, "Table 1", 5)
    create_table(client, "Table 2", 5)
    big = create_guest(client, "Big Family", party_size=6)
    create_guest(client, "The Parkers", party_size=3)
    create_guest(client, "The Watsons", party_size=2)

    response = client.post("/admin/seating/auto-assign", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["assigned_count"] == 2
    assert data["unassigned_guest_ids"] == [big["id"]]

    summary = client.get("/admin/seating/summary", headers=ADMIN_HEADERS).json()["data"]
    assert summary["assigned_people"] == 5
    assert summary["unassigned_guests"] == 1
    assert [t["seats_used"] for t in summary["tables"]] == [5, 0]

def test_auto_arrange_endpoint(client):
    create_table(client, "Only Table", 8)

    response = client.post(
        "/admin/seating/auto-arrange",
        json={"canvas_width": 1000, "canvas_height": 600},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 200
    positions = list(response.json()["data"]["positions"].values())
    assert positions == [{"position_x": 500.0, "position_y": 300.0}]

def test_guest_lookup_returns_table_and_mates(client):
    table = create_table(client, "A1", 8)
    create_guest(client, "John Doe", party_size=2, table_id=table["id"])
    create_guest(client, "Jane Smith", party_size=1, table_id=table["id"])

    response = client.post("/guest/lookup", json={"name": "john"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["guest_name"] == "John Doe"
    assert data["table_name"] == "A1"
    assert data["table_mates"] == [{"name": "Jane Smith", "party_size": 1}]

    response = client.post("/guest/lookup", json={"name": "Nobody"})
    assert response.status_code == 404

def test_guest_search_can_be_disabled(client):
    create_guest(client, "John Doe")

    response = client.get("/guest/search", params={"name": "jo"})
    assert response.status_code == 200
    assert response.json()["data"]["guests"][0]["name"] == "John Doe"

    response = client.put("/admin/settings", json={"search_enabled": False}, headers=ADMIN_HEADERS)
    assert response.status_code == 200

    assert client.get("/guest/search", params={"name": "jo"}).status_code == 403
    assert client.post("/guest/lookup", json={"name": "John"}).status_code == 403

def test_guest_portal_is_rate_limited(client):
    limiter = RateLimiter(limit=2)
    app.dependency_overrides[get_rate_limiter] = lambda: limiter

    assert client.get("/guest/portal").status_code == 200
    assert client.get("/guest/portal").status_code == 200
    assert client.get("/guest/portal").status_code == 429

def test_public_tables_hide_guest_details(client):
    table = create_table(client, "A1", 8)
    create_guest(client, "John Doe", party_size=2, table_id=table["id"])

    tables = client.get("/tables").json()["data"]["tables"]
    assert tables[0]["seats_used"] == 2
    assert "guests" not in tables[0]

def test_settings_defaults_and_empty_update(client):
    data = client.get("/settings").json()["data"]
    assert data["event_name"] == "Our Special Day"
    assert data["search_enabled"] is True

    response = client.put("/admin/settings", json={}, headers=ADMIN_HEADERS)
    assert response.status_code == 400

def test_layout_labels_replace_and_delete(client):
    response = client.put(
        "/admin/layout/labels",
        json={"labels": [{"text": "Dance Floor", "x": 100, "y": 200}]},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 200
    label_id = response.json()["data"]["labels"][0]["id"]

    assert client.delete(f"/admin/layout/labels/{label_id}", headers=ADMIN_HEADERS).status_code == 200
    assert client.delete(f"/admin/layout/labels/{label_id}", headers=ADMIN_HEADERS).status_code == 404

def test_export_seating_chart(client):
    create_guest(client, "John Doe")

    response = client.get("/admin/export/seating.xlsx", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert response.content[:2] == b"PK"
