import pytest
from fastapi.testclient import TestClient
from trip_concierge.api.main import app, get_itinerary_service
from trip_concierge.utils.config import Settings

from conftest import as_text, make_itinerary

client = TestClient(app)


@pytest.fixture
def api_service(service):
    """Route the itinerary endpoint to the fake-backed service"""
    app.dependency_overrides[get_itinerary_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


def test_health_check():
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert "status" in data
    assert "timestamp" in data
    assert data["services"]["poi_catalog"] is True


def test_root_endpoint():
    """Test root endpoint"""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Trip Concierge API"


def test_validate_request(sample_trip_request):
    """Test request validation endpoint"""
    response = client.post("/api/v1/validate-request", json=sample_trip_request)
    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is True
    assert data["errors"] == []
    assert data["request"]["baseRegion"] == "spb"


def test_validate_request_applies_defaults():
    response = client.post("/api/v1/validate-request", json={})
    data = response.json()
    assert data["valid"] is True
    assert data["request"]["days"] == 2
    assert data["request"]["transport"] == "public"


def test_invalid_days():
    """Test validation with out-of-range days"""
    response = client.post("/api/v1/validate-request", json={"days": 5, "weather": "snow"})
    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is False
    assert "days" in data["details"]["fieldErrors"]
    assert "weather" in data["details"]["fieldErrors"]


def test_list_pois():
    response = client.get("/api/v1/pois", params={"region": "lenobl"})
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == len(data["pois"])
    assert all(p["region"] == "lenobl" for p in data["pois"])
    assert {"tag": "rain_ok", "label": "Rainy day"} in data["tags"]


def test_list_pois_rejects_unknown_region():
    response = client.get("/api/v1/pois", params={"region": "moscow"})
    assert response.status_code == 400


def test_generate_itinerary(api_service, fake_models, sample_trip_request):
    fake_models.default = as_text(make_itinerary([["hermitage", "isaac"], ["nevsky", "unknown-place"]]))

    response = client.post("/api/itinerary", json=sample_trip_request)

    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"request", "itinerary", "pois"}
    assert data["request"]["baseRegion"] == "spb"
    assert [i["poiId"] for i in data["itinerary"]["days"][1]["items"]] == ["nevsky"]
    assert {p["id"] for p in data["pois"]} == {"hermitage", "isaac", "nevsky"}
    assert "durationMin" in data["itinerary"]["days"][0]["items"][0]


def test_generate_itinerary_invalid_input(api_service, fake_models):
    response = client.post("/api/itinerary", json={"days": 0})
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["code"] == "invalid_input"
    assert "days" in detail["details"]["fieldErrors"]
    assert fake_models.calls == []


def test_generate_itinerary_non_json_body_uses_defaults(api_service, fake_models):
    fake_models.default = as_text(make_itinerary([["hermitage"], ["isaac"]]))
    response = client.post("/api/itinerary", content=b"not json", headers={"content-type": "application/json"})
    assert response.status_code == 200
    assert response.json()["request"]["days"] == 2


def test_generate_itinerary_quota(api_service, fake_models, sample_trip_request):
    fake_models.default = RuntimeError("429 RESOURCE_EXHAUSTED. You exceeded your current quota")
    response = client.post("/api/itinerary", json=sample_trip_request)
    assert response.status_code == 429
    assert response.json()["detail"]["code"] == "quota_exceeded"


def test_generate_itinerary_missing_key(api_service, sample_trip_request):
    api_service.settings = Settings(GEMINI_API_KEY=None)
    response = client.post("/api/itinerary", json=sample_trip_request)
    assert response.status_code == 500
    assert response.json()["detail"]["code"] == "missing_credential"


def test_generate_itinerary_model_without_json(api_service, fake_models, sample_trip_request):
    fake_models.default = "I would rather not."
    response = client.post("/api/itinerary", json=sample_trip_request)
    assert response.status_code == 502
    detail = response.json()["detail"]
    assert detail["code"] == "extraction_failed"
    assert detail["raw"] == "I would rather not."


def test_generate_itinerary_unexpected_error_is_redacted(api_service, sample_trip_request):
    async def boom(payload, **kwargs):
        raise ValueError(f"exploded with {api_service.settings.GEMINI_API_KEY}")

    api_service.generate = boom
    response = client.post("/api/itinerary", json=sample_trip_request)
    assert response.status_code == 500
    detail = response.json()["detail"]
    assert detail["code"] == "unexpected"
    assert api_service.settings.GEMINI_API_KEY not in detail["details"]
