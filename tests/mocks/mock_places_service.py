"""Google Places API Mock 서비스.

실제 API 호출 없이 미리 지정한 검색 결과를 돌려주고, 호출 내역을 기록한다.
"""

from __future__ import annotations

from typing import Any, Iterable

from turf_finder.core.exceptions import GeocodingError, RemoteApiError
from turf_finder.schemas.geocode import GeocodeResult
from turf_finder.schemas.place import PlaceDetail, PlaceSummary
from turf_finder.services.places_service import PlacesServiceProtocol


def make_place(
    place_id: str,
    name: str,
    lat: float | None = 12.9121,
    lng: float | None = 77.6446,
    *,
    types: list[str] | None = None,
    rating: float | None = None,
    user_rating_count: int | None = None,
) -> PlaceSummary:
    """테스트용 Places 검색 결과 한 건을 Google 응답 형식(camelCase)으로 만든다."""
    payload: dict[str, Any] = {
        "id": place_id,
        "displayName": {"text": name, "languageCode": "en"},
        "formattedAddress": f"{name}, Bengaluru, Karnataka",
        "types": types or ["sports_complex"],
    }
    if lat is not None and lng is not None:
        payload["location"] = {"latitude": lat, "longitude": lng}
    if rating is not None:
        payload["rating"] = rating
    if user_rating_count is not None:
        payload["userRatingCount"] = user_rating_count
    return PlaceSummary.model_validate(payload)


class MockPlacesService(PlacesServiceProtocol):
    """Mock Google Places 서비스.

    `text_results`는 키워드별 결과, `nearby_results`는 Nearby Search 결과다.
    `failing_keywords`에 든 키워드나 `fail_nearby=True`인 Nearby Search는
    `RemoteApiError`를 발생시킨다.
    """

    def __init__(
        self,
        *,
        nearby_results: list[PlaceSummary] | None = None,
        text_results: dict[str, list[PlaceSummary]] | None = None,
        details: dict[str, PlaceDetail] | None = None,
        fail_nearby: bool = False,
        failing_keywords: set[str] | None = None,
    ) -> None:
        self.nearby_results = nearby_results or []
        self.text_results = text_results or {}
        self.details = details or {}
        self.fail_nearby = fail_nearby
        self.failing_keywords = failing_keywords or set()
        self.nearby_calls: list[dict[str, Any]] = []
        self.text_calls: list[str] = []
        self.detail_calls: list[str] = []

    async def nearby_search(
        self,
        lat: float,
        lng: float,
        radius_m: float,
        included_types: list[str] | None = None,
        max_result_count: int = 20,
    ) -> list[PlaceSummary]:
        self.nearby_calls.append(
            {
                "lat": lat,
                "lng": lng,
                "radius_m": radius_m,
                "included_types": included_types,
                "max_result_count": max_result_count,
            }
        )
        if self.fail_nearby:
            raise RemoteApiError("Nearby search failed: 403 Forbidden", status_code=403)
        return list(self.nearby_results)

    async def text_search(
        self,
        text_query: str,
        lat: float,
        lng: float,
        radius_m: float,
        max_result_count: int = 20,
    ) -> list[PlaceSummary]:
        self.text_calls.append(text_query)
        if text_query in self.failing_keywords:
            raise RemoteApiError(f"Text search failed: {text_query}", status_code=500)
        return list(self.text_results.get(text_query, []))

    async def get_place_details(self, place_id: str) -> PlaceDetail | None:
        self.detail_calls.append(place_id)
        return self.details.get(place_id)


class MockMapsClient(MockPlacesService):
    """검색 파이프라인이 사용하는 지오코딩, 일괄 상세 조회, 사진 URL까지 흉내 내는 클라이언트."""

    def __init__(self, geocoded: GeocodeResult | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.geocoded = geocoded
        self.geocode_calls: list[str] = []
        self.batch_calls: list[tuple[list[str], int]] = []

    async def geocode(self, address: str) -> GeocodeResult:
        self.geocode_calls.append(address)
        if self.geocoded is None:
            raise GeocodingError(f'No results found for location: "{address}"', no_results=True)
        return self.geocoded

    async def get_place_details_batch(
        self,
        place_ids: Iterable[str],
        concurrency_limit: int = 5,
    ) -> dict[str, PlaceDetail | None]:
        ids = list(place_ids)
        self.batch_calls.append((ids, concurrency_limit))
        return {place_id: await self.get_place_details(place_id) for place_id in ids}

    def photo_url(self, photo_name: str) -> str:
        return f"https://photos.test/{photo_name}"
