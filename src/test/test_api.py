import base64

import pytest
from fastapi.testclient import TestClient

from conftest import FixedRecognizer
from src.api.main import create_app
from src.application.service_factory import build_services
from src.core.config import settings
from src.domain.exceptions import PersistenceError
from src.infrastructure.Storage.in_memory_plate_repository import InMemoryPlateRepository


@pytest.fixture
def services(monkeypatch):
    monkeypatch.setattr(settings, "seed_demo_data", False)
    container = build_services(repository=InMemoryPlateRepository(), event_sinks=[])
    container.ingress.pipeline.recognizer = FixedRecognizer("ABC-123", 0.9)
    return container


@pytest.fixture
def client(services):
    with TestClient(create_app(services)) as c:
        yield c


def data_url(image_bytes):
    return "data:image/png;base64," + base64.b64encode(image_bytes).decode()


class TestApi:

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["subscribers"] == 0

    def test_scan_detects_and_persists(self, client, color_image_bytes):
        resp = client.post("/api/scan", json={"image": data_url(color_image_bytes)})
        assert resp.status_code == 200
        body = resp.json()
        assert body["detected"] is True
        assert body["plateNumber"] == "ABC-123"
        assert body["status"] == "suspended"
        assert body["record"]["detectionType"] == "automatic"

        recent = client.get("/api/plates/recent").json()
        assert [p["id"] for p in recent] == [body["record"]["id"]]

    def test_scan_requires_image(self, client):
        assert client.post("/api/scan", json={}).status_code == 400

    def test_scan_garbage_is_not_detected(self, client):
        resp = client.post("/api/scan", json={"image": "data:image/png;base64,Zm9v"})
        assert resp.json() == {"detected": False}

    def test_validate_and_patch(self, client):
        created = client.post("/api/validate", json={"plateNumber": "XYZ-789"}).json()
        assert created["status"] == "valid"
        assert created["region"] == "Ontario"
        assert created["detectionType"] == "manual"

        patched = client.patch(f"/api/plates/{created['id']}", json={"plateNumber": "XYZ-788"}).json()
        assert patched["plateNumber"] == "XYZ-788"
        assert patched["detectedAt"] == created["detectedAt"]
        assert client.get(f"/api/plates/{created['id']}").json() == patched

    def test_validate_rejects_invalid_body(self, client):
        resp = client.post("/api/validate", json={"plateNumber": ""})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid request"

    def test_validate_rejects_blank_plate(self, client, services):
        resp = client.post("/api/validate", json={"plateNumber": "   "})
        assert resp.status_code == 400
        assert services.repository.get_all() == []

        created = client.post("/api/validate", json={"plateNumber": "XYZ-789"}).json()
        resp = client.patch(f"/api/plates/{created['id']}", json={"plateNumber": "  "})
        assert resp.status_code == 400
        assert client.get(f"/api/plates/{created['id']}").json()["plateNumber"] == "XYZ-789"

    def test_missing_plate(self, client):
        assert client.get("/api/plates/999").status_code == 404
        assert client.patch("/api/plates/999", json={"details": "x"}).status_code == 404

    def test_recent_limit(self, client):
        for n in ("AAA-111", "BBB-222", "CCC-333"):
            client.post("/api/validate", json={"plateNumber": n})
        recent = client.get("/api/plates/recent", params={"limit": 2}).json()
        assert [p["plateNumber"] for p in recent] == ["CCC-333", "BBB-222"]

    def test_stats(self, client):
        client.post("/api/validate", json={"plateNumber": "XYZ-789"})
        client.post("/api/validate", json={"plateNumber": "ABC124"})
        stats = client.get("/api/stats").json()
        assert stats["totalToday"] == 2
        assert stats["validCount"] == 1
        assert stats["expiredCount"] == 1
        assert {d["region"] for d in stats["regionDistribution"]} == {"Ontario", "Québec"}

    def test_websocket_receives_events(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_text('{"action": "ping"}')
            assert ws.receive_json() == {"type": "PONG"}

            created = client.post("/api/validate", json={"plateNumber": "DEF-456"}).json()
            message = ws.receive_json()
            assert message["type"] == "PLATE_VALIDATED"
            assert message["data"] == created

    def test_persistence_error_is_500(self, services, monkeypatch):
        def broken_create(data):
            raise PersistenceError("disk full")

        monkeypatch.setattr(services.repository, "create", broken_create)
        with TestClient(create_app(services)) as c:
            resp = c.post("/api/validate", json={"plateNumber": "XYZ-789"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to persist plate"}
