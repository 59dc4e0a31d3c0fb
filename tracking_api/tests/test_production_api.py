"""End-to-end tests for the production order routes."""

from src.core.deps import get_production_service

BASE = "/api/v1/production-orders"


class RecordingService:
    """Service stand-in that records every call it receives."""

    def __init__(self):
        self.calls = []

    async def new_order(self, order):
        self.calls.append("new_order")

    async def get_order_by_id(self, order_id):
        self.calls.append("get_order_by_id")

    async def get_open_orders(self):
        self.calls.append("get_open_orders")
        return []

    async def close_order(self, order_id):
        self.calls.append("close_order")


class TestHealth:
    def test_health(self, client):
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json()["message"] == "Healthy"

    def test_database_health(self, client):
        resp = client.get("/api/v1/health/db")
        assert resp.status_code == 200

    def test_correlation_id_echoed(self, client):
        resp = client.get("/api/v1/health", headers={"X-Correlation-ID": "abc-123"})
        assert resp.headers["X-Correlation-ID"] == "abc-123"


class TestOrderLifecycle:
    def test_create_fetch_close_scenario(self, client):
        resp = client.post(BASE, json={"id": "PO-1", "model_internal_code": "M1", "order_size": 10})
        assert resp.status_code == 200
        assert resp.content == b""

        resp = client.get(BASE, params={"orderid": "PO-1"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == "PO-1"
        assert body["model_internal_code"] == "M1"
        assert body["order_size"] == 10
        assert body["start"] is not None
        assert body["end"] is None

        resp = client.post(f"{BASE}/close", params={"orderid": "PO-1"})
        assert resp.status_code == 200

        resp = client.get(BASE, params={"orderid": "PO-1"})
        assert resp.status_code == 200
        assert resp.json()["end"] is not None

    def test_close_via_get(self, client, order_payload):
        client.post(BASE, json=order_payload)

        resp = client.get(f"{BASE}/close", params={"orderid": "PO-1"})

        assert resp.status_code == 200

    def test_list_open(self, client, order_payload):
        client.post(BASE, json={**order_payload, "id": "A"})
        client.post(BASE, json={**order_payload, "id": "B"})
        client.post(f"{BASE}/close", params={"orderid": "B"})

        resp = client.get(f"{BASE}/open")

        assert resp.status_code == 200
        assert [o["id"] for o in resp.json()] == ["A"]

    def test_list_open_empty(self, client):
        resp = client.get(f"{BASE}/open")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_client_supplied_timestamps_ignored(self, client, order_payload):
        payload = {**order_payload, "end": "2020-01-01T00:00:00Z"}
        client.post(BASE, json=payload)

        assert client.get(BASE, params={"orderid": "PO-1"}).json()["end"] is None


class TestCreateErrors:
    def test_duplicate_id_is_server_error(self, client, order_payload):
        assert client.post(BASE, json=order_payload).status_code == 200

        resp = client.post(BASE, json=order_payload)

        assert resp.status_code == 500
        assert resp.json()["error"]["type"] == "storage_error"

    def test_malformed_body(self, client):
        resp = client.post(BASE, content=b"{not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400

    def test_wrong_type(self, client, order_payload):
        resp = client.post(BASE, json={**order_payload, "order_size": "many"})
        assert resp.status_code == 400

    def test_non_positive_size(self, client, order_payload):
        resp = client.post(BASE, json={**order_payload, "order_size": 0})
        assert resp.status_code == 400
        assert resp.json()["error"]["type"] == "validation_error"

    def test_empty_id(self, client, order_payload):
        resp = client.post(BASE, json={**order_payload, "id": ""})
        assert resp.status_code == 400


class TestFetchAndCloseErrors:
    def test_fetch_unknown(self, client):
        resp = client.get(BASE, params={"orderid": "nope"})
        assert resp.status_code == 404
        assert resp.json()["error"]["type"] == "not_found"

    def test_close_unknown(self, client):
        resp = client.post(f"{BASE}/close", params={"orderid": "nope"})
        assert resp.status_code == 404

    def test_close_twice(self, client, order_payload):
        client.post(BASE, json=order_payload)
        assert client.post(f"{BASE}/close", params={"orderid": "PO-1"}).status_code == 200

        resp = client.post(f"{BASE}/close", params={"orderid": "PO-1"})

        assert resp.status_code == 409
        assert resp.json()["error"]["type"] == "order_closed"

    def test_missing_orderid_never_reaches_service(self, app, client):
        """Fetch/Close without orderid are rejected before any store access."""
        recorder = RecordingService()
        app.dependency_overrides[get_production_service] = lambda: recorder
        try:
            assert client.get(BASE).status_code == 400
            assert client.post(f"{BASE}/close").status_code == 400
            assert client.get(f"{BASE}/close", params={"orderid": ""}).status_code == 400
        finally:
            app.dependency_overrides.clear()

        assert recorder.calls == []
