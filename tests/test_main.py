"""애플리케이션 진입점과 API 엔드포인트 동작 테스트."""

from __future__ import annotations

import asyncio
import importlib

from fastapi.testclient import TestClient

from tests.mocks.mock_places_service import MockMapsClient, make_place
from turf_finder.api.dependencies import get_maps_client
from turf_finder.core.config import get_settings
from turf_finder.core.exceptions import RemoteApiError
from turf_finder.schemas.geocode import GeocodeResult
from turf_finder.schemas.travel import TravelEstimate
from turf_finder.services.google_maps_service import get_google_maps_client


def _set_required_env(monkeypatch, **overrides: str) -> None:
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "test-key")
    for key, value in overrides.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()
    get_google_maps_client.cache_clear()


def _load_main_module():
    import turf_finder.main as main_module

    return importlib.reload(main_module)


def _client_with(main_module, maps_client) -> TestClient:
    main_module.app.dependency_overrides[get_maps_client] = lambda: maps_client
    return TestClient(main_module.app, raise_server_exceptions=False)


def test_health_check_endpoint(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Turf Finder Server is running"}


def test_api_health_reports_api_key(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    response = TestClient(main_module.app).get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["api_key_configured"] is True
    assert "timestamp" in response.json()


def test_security_headers_are_attached(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["referrer-policy"] == "no-referrer"
    assert response.headers["cache-control"] == "no-store"


def test_cors_allowlist_from_env(monkeypatch) -> None:
    _set_required_env(
        monkeypatch,
        CORS_ALLOW_ORIGINS="https://example.com",
        CORS_ALLOW_METHODS="GET,POST,OPTIONS",
        CORS_ALLOW_HEADERS="Content-Type",
    )
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/", headers={"Origin": "https://example.com"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://example.com"


def test_request_timeout_middleware(monkeypatch) -> None:
    _set_required_env(monkeypatch, REQUEST_TIMEOUT_SECONDS="1")
    main_module = _load_main_module()

    @main_module.app.get("/_slow-test")
    async def _slow_test() -> dict:
        await asyncio.sleep(1.2)
        return {"ok": True}

    client = TestClient(main_module.app)
    response = client.get("/_slow-test")

    assert response.status_code == 504
    assert response.json() == {"detail": "요청 처리 시간이 초과되었습니다."}


def test_search_endpoint_returns_sorted_results(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()
    maps_client = MockMapsClient(
        geocoded=GeocodeResult(lat=12.9121, lng=77.6446, formatted_address="HSR Layout, Bengaluru"),
        text_results={
            "turf": [
                make_place("p1", "Kickoff Arena", lat=12.9300, lng=77.6446),
                make_place("p2", "Goal Line Turf", lat=12.9121, lng=77.6446),
            ]
        },
    )

    response = _client_with(main_module, maps_client).post(
        "/api/search", json={"location": "HSR Layout", "radius_km": 3}
    )

    assert response.status_code == 200
    body = response.json()
    assert [result["place_id"] for result in body["results"]] == ["p2", "p1"]
    assert body["query"]["location"] == "HSR Layout, Bengaluru"
    assert body["query"]["radius_km"] == 3
    assert body["total_found"] == 2


def test_search_endpoint_rejects_invalid_input(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    response = _client_with(main_module, MockMapsClient()).post("/api/search", json={"lat": 12.9})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert "tips" not in response.json()


def test_search_endpoint_maps_unknown_location_to_404(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    response = _client_with(main_module, MockMapsClient()).post("/api/search", json={"location": "Atlantis"})

    assert response.status_code == 404
    assert response.json()["code"] == "GEOCODING_ERROR"
    assert len(response.json()["tips"]) == 3


def test_search_endpoint_hides_error_details_by_default(monkeypatch) -> None:
    _set_required_env(monkeypatch, EXPOSE_INTERNAL_ERRORS="false")
    main_module = _load_main_module()

    class _BrokenClient(MockMapsClient):
        async def geocode(self, address: str) -> GeocodeResult:
            raise RemoteApiError("Geocoding upstream failed", details={"raw": "secret"}, status_code=500)

    response = _client_with(main_module, _BrokenClient()).post("/api/search", json={"location": "HSR"})

    assert response.status_code == 502
    assert response.json()["detail"] == "Geocoding upstream failed"
    assert "details" not in response.json()


def test_distance_endpoint_returns_times_per_place(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    class _MatrixClient(MockMapsClient):
        async def distance_matrix(self, origin, destinations, mode):
            return [TravelEstimate(distance="2.1 km", duration=f"{mode} 9 mins") for _ in destinations]

    response = _client_with(main_module, _MatrixClient()).post(
        "/api/distance",
        json={"origin_lat": 12.91, "origin_lng": 77.64, "destinations": [{"place_id": "p1", "lat": 12.9, "lng": 77.6}]},
    )

    assert response.status_code == 200
    assert response.json()["distances"]["p1"]["driving"]["duration"] == "driving 9 mins"
    assert response.json()["distances"]["p1"]["bicycling"]["distance"] == "2.1 km"


def test_missing_api_key_returns_500(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "")
    get_settings.cache_clear()
    main_module = _load_main_module()

    response = TestClient(main_module.app).post("/api/search", json={"lat": 12.91, "lng": 77.64})

    assert response.status_code == 500
    assert response.json() == {"detail": "Google Maps API 키가 설정되지 않았습니다."}
