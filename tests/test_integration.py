import pytest
from fastapi.testclient import TestClient

from routeplanner.api import dependencies
from routeplanner.errors import GeocodingError
from routeplanner.main import create_app
from routeplanner.services.geocoding.client import GeocodeResult


class DummyGeocoder:
    def __init__(self):
        self.calls = []

    def geocode(self, address):
        self.calls.append(address)
        if "nowhere" in address:
            raise GeocodingError(f"Could not geocode address '{address}': ZERO_RESULTS")
        return GeocodeResult(lat=48.85 + len(self.calls) * 0.01, lng=2.35, formatted_address=address)


@pytest.fixture
def geocoder() -> DummyGeocoder:
    return DummyGeocoder()


@pytest.fixture
def api_client(repository, geocoder) -> TestClient:
    app = create_app()
    app.dependency_overrides[dependencies.get_repository] = lambda: repository
    app.dependency_overrides[dependencies.get_optional_repository] = lambda: repository
    app.dependency_overrides[dependencies.get_geocoder] = lambda: geocoder
    return TestClient(app)


def test_health_endpoint(api_client: TestClient):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_optimize_endpoint(api_client: TestClient):
    payload = {
        "points": [
            {"id": "A", "lat": 0, "lng": 0},
            {"id": "B", "lat": 0, "lng": 1},
            {"id": "C", "lat": 0, "lng": 2},
        ],
        "start_id": "A",
    }

    response = api_client.post("/api/routes/optimize", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["order"] == ["A", "B", "C"]
    assert body["total_distance_km"] == pytest.approx(222.39, abs=0.01)
    assert len(body["stops"]) == 3
    assert body["costs"]["currency"] == "EUR"
    assert body["route_id"] is None


def test_optimize_endpoint_rejects_duplicate_ids(api_client: TestClient):
    payload = {"points": [{"id": "A", "lat": 0, "lng": 0}, {"id": "A", "lat": 1, "lng": 1}]}

    response = api_client.post("/api/routes/optimize", json=payload)

    assert response.status_code == 400
    assert "Duplicate" in response.json()["detail"]


def test_optimize_endpoint_rejects_unknown_start(api_client: TestClient):
    payload = {"points": [{"id": "A", "lat": 0, "lng": 0}], "start_id": "Z"}

    response = api_client.post("/api/routes/optimize", json=payload)

    assert response.status_code == 400


def test_optimize_endpoint_rejects_out_of_range_latitude(api_client: TestClient):
    payload = {"points": [{"id": "A", "lat": 91, "lng": 0}]}

    response = api_client.post("/api/routes/optimize", json=payload)

    assert response.status_code == 422


def test_persisted_route_history(api_client: TestClient):
    payload = {
        "points": [{"id": "A", "lat": 0, "lng": 0}, {"id": "B", "lat": 0, "lng": 1}],
        "persist": True,
        "user_id": "user-1",
        "name": "Morning run",
    }

    created = api_client.post("/api/routes/optimize", json=payload)
    assert created.status_code == 200
    route_id = created.json()["route_id"]
    assert route_id

    history = api_client.get("/api/routes", params={"user_id": "user-1"})
    assert history.status_code == 200
    assert [route["id"] for route in history.json()] == [route_id]

    fetched = api_client.get(f"/api/routes/{route_id}")
    assert fetched.status_code == 200
    assert fetched.json()["total_distance"] == 111.2
    assert fetched.json()["is_paid"] is False

    paid = api_client.patch(f"/api/routes/{route_id}/paid", json={"is_paid": True})
    assert paid.status_code == 200
    assert paid.json()["is_paid"] is True

    summary = api_client.get("/api/analytics/summary", params={"user_id": "user-1"})
    assert summary.status_code == 200
    assert summary.json()["totalRoutes"] == 1
    assert summary.json()["paidRoutes"] == 1


def test_missing_route_returns_404(api_client: TestClient):
    assert api_client.get("/api/routes/nope").status_code == 404
    assert api_client.patch("/api/routes/nope/paid", json={"is_paid": True}).status_code == 404


def test_malformed_stored_route_returns_500(api_client: TestClient, fake_supabase):
    fake_supabase.tables["routes"] = [
        {"id": "bad", "user_id": "user-1", "name": "Broken", "total_distance": None, "total_duration": 1},
    ]

    fetched = api_client.get("/api/routes/bad")
    assert fetched.status_code == 500
    assert "Failed to read stored route" in fetched.json()["detail"]

    history = api_client.get("/api/routes", params={"user_id": "user-1"})
    assert history.status_code == 500
    assert "Failed to read stored route" in history.json()["detail"]


def test_address_workflow_and_generate(api_client: TestClient, geocoder: DummyGeocoder):
    for text in ("1 Rue A, Paris", "2 Rue B, Paris", "3 Rue C, Paris"):
        response = api_client.post("/api/addresses", json={"user_id": "user-1", "address": text})
        assert response.status_code == 201
    assert len(geocoder.calls) == 3

    listed = api_client.get("/api/addresses", params={"user_id": "user-1"})
    assert listed.status_code == 200
    assert len(listed.json()) == 3

    frequent = api_client.get("/api/addresses/frequent", params={"user_id": "user-1"})
    assert frequent.status_code == 200
    assert all(item["usage_count"] == 1 for item in frequent.json())

    generated = api_client.post("/api/routes/generate", json={"user_id": "user-1", "name": "All stops"})
    assert generated.status_code == 201
    assert sorted(generated.json()["order"]) == sorted(item["id"] for item in listed.json())

    address_id = listed.json()[0]["id"]
    assert api_client.delete(f"/api/addresses/{address_id}").status_code == 200
    assert api_client.delete(f"/api/addresses/{address_id}").status_code == 404


def test_address_that_cannot_be_geocoded(api_client: TestClient):
    response = api_client.post("/api/addresses", json={"user_id": "user-1", "address": "nowhere land"})

    assert response.status_code == 400
    assert "Could not geocode" in response.json()["detail"]


def test_generate_requires_two_addresses(api_client: TestClient):
    response = api_client.post("/api/routes/generate", json={"user_id": "empty-user", "name": "R"})

    assert response.status_code == 400


def test_geocode_endpoint(api_client: TestClient):
    response = api_client.post("/api/geocode", json={"address": "Louvre, Paris"})

    assert response.status_code == 200
    assert response.json()["formatted_address"] == "Louvre, Paris"


def test_cost_estimate_endpoint(api_client: TestClient):
    response = api_client.post("/api/costs/estimate", json={"distance_km": 100, "duration_min": 120})

    assert response.status_code == 200
    body = response.json()
    assert body["fuel_cost"] == pytest.approx(14.40)
    assert body["time_cost"] == pytest.approx(60.0)
    assert body["maintenance_cost"] == pytest.approx(5.0)
    assert body["total"] == pytest.approx(79.40)


def test_database_endpoints_unavailable_without_supabase(monkeypatch):
    monkeypatch.setattr(dependencies.settings, "supabase_url", None)
    monkeypatch.setattr(dependencies.settings, "supabase_key", None)
    client = TestClient(create_app())

    response = client.get("/api/routes", params={"user_id": "user-1"})

    assert response.status_code == 503
    assert "not configured" in response.json()["detail"]


def test_geocoding_unavailable_without_api_key(monkeypatch):
    monkeypatch.setattr(dependencies.settings, "geocoding_api_key", None)
    client = TestClient(create_app())

    response = client.post("/api/geocode", json={"address": "Paris"})

    assert response.status_code == 503
