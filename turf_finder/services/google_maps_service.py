"""Google Maps Platform(Geocoding, Places (New), Distance Matrix) 클라이언트."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable
from urllib.parse import urlencode

import requests
from pydantic import ValidationError as PydanticValidationError

from turf_finder.core.cache import TtlCache
from turf_finder.core.config import get_settings
from turf_finder.core.exceptions import ConfigurationError, GeocodingError, RemoteApiError
from turf_finder.core.geo import Coordinate, GeoBounds
from turf_finder.core.logger import get_logger
from turf_finder.core.timeout_policy import get_timeout_policy, to_requests_timeout
from turf_finder.schemas.geocode import GeocodeResult
from turf_finder.schemas.place import PlaceDetail, PlaceSummary
from turf_finder.schemas.travel import TravelEstimate, TravelMode
from turf_finder.services.places_service import PlacesServiceProtocol

logger = get_logger(__name__)

GEOCODING_URL = "https://maps.googleapis.com/maps/api/geocode/json"
DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
PLACES_BASE_URL = "https://places.googleapis.com/v1"

MAX_RADIUS_METERS = 50_000
MAX_RESULT_COUNT = 20
MAX_MATRIX_DESTINATIONS = 25
DEFAULT_PHOTO_SIZE_PX = 400
DEFAULT_CONCURRENCY_LIMIT = 5

SEARCH_FIELD_MASK = ",".join(
    f"places.{field}"
    for field in (
        "id",
        "displayName",
        "formattedAddress",
        "location",
        "rating",
        "userRatingCount",
        "photos",
        "regularOpeningHours",
        "businessStatus",
        "types",
    )
)
DETAILS_FIELD_MASK = ",".join(
    (
        "id",
        "displayName",
        "formattedAddress",
        "nationalPhoneNumber",
        "internationalPhoneNumber",
        "location",
        "rating",
        "userRatingCount",
        "photos",
        "reviews",
        "regularOpeningHours",
        "googleMapsUri",
        "websiteUri",
        "businessStatus",
        "types",
    )
)


@dataclass(frozen=True, slots=True)
class GeocodeOptions:
    """Geocoding 요청 옵션. region은 결과를 특정 국가로 치우치게 합니다."""

    region: str | None = None
    bounds: GeoBounds | None = None


def build_photo_url(
    photo_name: str,
    api_key: str,
    max_width_px: int = DEFAULT_PHOTO_SIZE_PX,
    max_height_px: int = DEFAULT_PHOTO_SIZE_PX,
) -> str:
    """사진 리소스 이름으로 바로 내려받을 수 있는 media URL을 만듭니다."""
    query = urlencode({"maxWidthPx": max_width_px, "maxHeightPx": max_height_px, "key": api_key})
    return f"{PLACES_BASE_URL}/{photo_name}/media?{query}"


def _error_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


def _json_object(response: requests.Response) -> dict[str, Any]:
    """응답 본문을 JSON 객체로 읽습니다. 객체가 아니면 ValueError를 발생시킵니다."""
    data = response.json()
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


class GoogleMapsClient(PlacesServiceProtocol):
    """캐시를 내장한 Google Maps Platform 클라이언트.

    Geocoding, Places 검색, Places 상세 결과는 각각 별도 TTL 캐시에 저장되어
    캐시 적중 시에는 네트워크 호출이 일어나지 않습니다.
    """

    def __init__(
        self,
        api_key: str,
        timeout_seconds: int = 10,
        region: str = "in",
        cache_ttl_seconds: int = 600,
        geocode_cache: TtlCache[GeocodeResult] | None = None,
        search_cache: TtlCache[list[PlaceSummary]] | None = None,
        details_cache: TtlCache[PlaceDetail] | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("GOOGLE_MAPS_API_KEY is not configured.")
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._region = region.strip() if region else ""
        self.geocode_cache = geocode_cache or TtlCache(cache_ttl_seconds)
        self.search_cache = search_cache or TtlCache(cache_ttl_seconds)
        self.details_cache = details_cache or TtlCache(cache_ttl_seconds)

    @classmethod
    def from_settings(cls) -> GoogleMapsClient:
        """애플리케이션 설정으로 클라이언트 인스턴스를 생성합니다."""
        settings = get_settings()
        timeout_policy = get_timeout_policy(settings)
        if not settings.GOOGLE_MAPS_API_KEY:
            logger.error("GOOGLE_MAPS_API_KEY is not configured.")
        return cls(
            api_key=settings.GOOGLE_MAPS_API_KEY or "",
            timeout_seconds=timeout_policy.google_maps_timeout_seconds,
            region=settings.GOOGLE_GEOCODE_REGION,
            cache_ttl_seconds=settings.CACHE_TTL_SECONDS,
        )

    async def geocode(self, address: str, options: GeocodeOptions | None = None) -> GeocodeResult:
        """주소 텍스트를 좌표로 변환합니다.

        Raises:
            GeocodingError: 결과가 없거나(`no_results=True`) 제공자/네트워크 오류인 경우
        """
        options = options or GeocodeOptions()
        region = options.region or self._region
        cache_key = TtlCache.generate_key(
            {
                "address": address,
                "region": region,
                "bounds": options.bounds.to_geocode_bounds_param() if options.bounds else None,
            }
        )
        cached = self.geocode_cache.get(cache_key)
        if cached is not None:
            logger.debug("Geocode cache hit: address=%s", address)
            return cached

        params: dict[str, Any] = {"address": address, "key": self._api_key}
        if region:
            params["region"] = region
        if options.bounds is not None:
            params["bounds"] = options.bounds.to_geocode_bounds_param()

        try:
            response = await self._send("GET", GEOCODING_URL, params=params)
            data = _json_object(response)
        except requests.RequestException as exc:
            raise GeocodingError(f"Geocoding request failed: {exc}", details=str(exc)) from exc
        except ValueError as exc:
            raise GeocodingError(f"Geocoding response parse failed: {exc}", details=str(exc)) from exc

        status = data.get("status")
        if status == "ZERO_RESULTS":
            raise GeocodingError(f'No results found for location: "{address}"', no_results=True)
        results = data.get("results")
        if status != "OK" or not isinstance(results, list) or not results:
            raise GeocodingError(f"Geocoding failed: {status}", details=data)

        top = results[0]
        try:
            location = top["geometry"]["location"]
            result = GeocodeResult(
                lat=location["lat"],
                lng=location["lng"],
                formatted_address=top.get("formatted_address") or address,
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise GeocodingError("Geocoding response is missing coordinates", details=top) from exc

        self.geocode_cache.set(cache_key, result)
        logger.info("Geocode completed: address=%s formatted_address=%s", address, result.formatted_address)
        return result

    async def nearby_search(
        self,
        lat: float,
        lng: float,
        radius_m: float,
        included_types: list[str] | None = None,
        max_result_count: int = MAX_RESULT_COUNT,
    ) -> list[PlaceSummary]:
        """유형 코드로 제한한 Nearby Search를 수행합니다."""
        body = self._region_body(lat, lng, radius_m, max_result_count)
        if included_types:
            body["includedTypes"] = list(included_types)
        return await self._search("nearby", f"{PLACES_BASE_URL}/places:searchNearby", body)

    async def text_search(
        self,
        text_query: str,
        lat: float,
        lng: float,
        radius_m: float,
        max_result_count: int = MAX_RESULT_COUNT,
    ) -> list[PlaceSummary]:
        """자유 텍스트 Text Search를 수행합니다. 영역 제한이 지리적 범위를 정합니다."""
        body = {"textQuery": text_query, **self._region_body(lat, lng, radius_m, max_result_count)}
        return await self._search("text", f"{PLACES_BASE_URL}/places:searchText", body)

    async def get_place_details(self, place_id: str) -> PlaceDetail | None:
        """장소 상세 정보를 조회합니다. 어떤 실패든 경고 로그 후 None을 반환합니다."""
        if not place_id:
            return None

        cache_key = TtlCache.generate_key({"type": "details", "place_id": place_id})
        cached = self.details_cache.get(cache_key)
        if cached is not None:
            return cached

        resource = place_id if place_id.startswith("places/") else f"places/{place_id}"
        try:
            response = await self._send(
                "GET",
                f"{PLACES_BASE_URL}/{resource}",
                headers=self._places_headers(DETAILS_FIELD_MASK),
            )
            if not response.ok:
                logger.warning(
                    "Place details request failed: place_id=%s status=%s body=%s",
                    place_id,
                    response.status_code,
                    _error_body(response),
                )
                return None
            detail = PlaceDetail.model_validate(response.json())
        except requests.RequestException as exc:
            logger.warning("Place details request error: place_id=%s error=%s", place_id, exc)
            return None
        except ValueError as exc:
            logger.warning("Place details parse failed: place_id=%s error=%s", place_id, exc)
            return None

        self.details_cache.set(cache_key, detail)
        return detail

    async def get_place_details_batch(
        self,
        place_ids: Iterable[str],
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
    ) -> dict[str, PlaceDetail | None]:
        """여러 장소의 상세 정보를 동시 실행 수를 제한해 조회합니다.

        모든 ID가 해결(성공 또는 None)된 뒤에만 반환하며, 완료 순서는 보장하지 않습니다.
        """
        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be at least 1.")

        unique_ids = list(dict.fromkeys(place_ids))
        semaphore = asyncio.Semaphore(concurrency_limit)

        async def _fetch(place_id: str) -> tuple[str, PlaceDetail | None]:
            async with semaphore:
                return place_id, await self.get_place_details(place_id)

        results = await asyncio.gather(*[_fetch(place_id) for place_id in unique_ids])
        fetched = sum(1 for _, detail in results if detail is not None)
        logger.info(
            "Place details batch completed: requested=%d fetched=%d missing=%d concurrency_limit=%d",
            len(unique_ids),
            fetched,
            len(unique_ids) - fetched,
            concurrency_limit,
        )
        return dict(results)

    def photo_url(
        self,
        photo_name: str,
        max_width_px: int = DEFAULT_PHOTO_SIZE_PX,
        max_height_px: int = DEFAULT_PHOTO_SIZE_PX,
    ) -> str:
        return build_photo_url(photo_name, self._api_key, max_width_px, max_height_px)

    async def distance_matrix(
        self,
        origin: Coordinate,
        destinations: list[Coordinate],
        mode: TravelMode,
    ) -> list[TravelEstimate | None]:
        """출발지 하나에서 목적지별 거리/소요 시간을 조회합니다.

        목적지는 최대 25개까지만 사용하며, 요소 상태가 OK가 아닌 목적지는 None입니다.

        Raises:
            RemoteApiError: HTTP 오류 또는 최상위 상태가 OK가 아닌 경우
        """
        limited = destinations[:MAX_MATRIX_DESTINATIONS]
        if not limited:
            return []

        params = {
            "origins": origin.as_param(),
            "destinations": "|".join(destination.as_param() for destination in limited),
            "mode": mode,
            "key": self._api_key,
        }
        try:
            response = await self._send("GET", DISTANCE_MATRIX_URL, params=params)
            if not response.ok:
                raise RemoteApiError(
                    f"Distance matrix failed: {response.status_code} {response.reason}",
                    details=_error_body(response),
                    status_code=response.status_code,
                )
            data = _json_object(response)
        except requests.RequestException as exc:
            raise RemoteApiError(f"Distance matrix request failed: {exc}", details=str(exc)) from exc
        except ValueError as exc:
            raise RemoteApiError(f"Distance matrix response parse failed: {exc}", details=str(exc)) from exc

        if data.get("status") != "OK":
            raise RemoteApiError(f"Distance matrix failed: {data.get('status')}", details=data)

        try:
            rows = data.get("rows") or [{}]
            elements = rows[0].get("elements") or []
            estimates: list[TravelEstimate | None] = []
            for index in range(len(limited)):
                element = elements[index] if index < len(elements) else {}
                if element.get("status") == "OK" and element.get("distance") and element.get("duration"):
                    estimates.append(
                        TravelEstimate(distance=element["distance"]["text"], duration=element["duration"]["text"])
                    )
                else:
                    estimates.append(None)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise RemoteApiError(f"Distance matrix response parse failed: {exc}", details=data) from exc
        return estimates

    @property
    def api_key_configured(self) -> bool:
        return bool(self._api_key)

    def clear_caches(self) -> None:
        self.geocode_cache.clear()
        self.search_cache.clear()
        self.details_cache.clear()

    def prune_caches(self) -> int:
        """세 캐시의 만료 항목을 정리하고 제거한 총 개수를 반환합니다."""
        return self.geocode_cache.prune() + self.search_cache.prune() + self.details_cache.prune()

    def _region_body(self, lat: float, lng: float, radius_m: float, max_result_count: int) -> dict[str, Any]:
        return {
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": lat, "longitude": lng},
                    "radius": min(float(radius_m), float(MAX_RADIUS_METERS)),
                }
            },
            "maxResultCount": max(1, min(int(max_result_count), MAX_RESULT_COUNT)),
        }

    async def _search(self, variant: str, url: str, body: dict[str, Any]) -> list[PlaceSummary]:
        cache_key = TtlCache.generate_key({"type": variant, **body})
        cached = self.search_cache.get(cache_key)
        if cached is not None:
            logger.debug("Search cache hit: variant=%s", variant)
            return cached

        label = "Nearby search" if variant == "nearby" else "Text search"
        try:
            response = await self._send(
                "POST",
                url,
                json=body,
                headers={"Content-Type": "application/json", **self._places_headers(SEARCH_FIELD_MASK)},
            )
            if not response.ok:
                raise RemoteApiError(
                    f"{label} failed: {response.status_code} {response.reason}",
                    details=_error_body(response),
                    status_code=response.status_code,
                )
            data = _json_object(response)
            items = data.get("places") or []
            if not isinstance(items, list):
                raise ValueError(f"places must be a list, got {type(items).__name__}")
        except requests.RequestException as exc:
            raise RemoteApiError(f"{label} request failed: {exc}", details=str(exc)) from exc
        except ValueError as exc:
            raise RemoteApiError(f"{label} response parse failed: {exc}", details=str(exc)) from exc

        places: list[PlaceSummary] = []
        for item in items:
            try:
                places.append(PlaceSummary.model_validate(item))
            except PydanticValidationError as exc:
                logger.warning("%s result skipped: error_count=%d item=%s", label, exc.error_count(), item)

        self.search_cache.set(cache_key, places)
        return places

    def _places_headers(self, field_mask: str) -> dict[str, str]:
        return {"X-Goog-Api-Key": self._api_key, "X-Goog-FieldMask": field_mask}

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        request_timeout = to_requests_timeout(self._timeout_seconds)

        def _request() -> requests.Response:
            return requests.request(
                method=method,
                url=url,
                params=params,
                json=json,
                headers=headers,
                timeout=request_timeout,
            )

        return await asyncio.to_thread(_request)


@lru_cache(maxsize=1)
def get_google_maps_client() -> GoogleMapsClient:
    """캐시를 공유하기 위한 프로세스 단위 싱글톤을 반환합니다."""
    return GoogleMapsClient.from_settings()
