"""터프 검색 파이프라인.

HTTP 엔드포인트와 CLI가 공유하는 흐름입니다: 입력 검증 → 위치 확정(지오코딩) →
키워드 검색 집계 → 거리 계산/반경 필터/정렬 → 가까운 순 상위 N개 상세 조회 →
결과 병합.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from turf_finder.core.config import Settings, get_settings
from turf_finder.core.exceptions import ValidationError
from turf_finder.core.geo import Coordinate, is_approximately_bangalore, sort_by_distance, within_radius
from turf_finder.core.logger import get_logger
from turf_finder.schemas.place import PlaceSummary
from turf_finder.schemas.turf import SearchQueryEcho, TurfSearchResponse
from turf_finder.services.google_maps_service import MAX_RADIUS_METERS, GoogleMapsClient
from turf_finder.services.result_builder import build_turf_result
from turf_finder.services.turf_search_service import TurfFilter, search_turfs

logger = get_logger(__name__)

MAX_RADIUS_KM = MAX_RADIUS_METERS / 1000
NO_RESULTS_MESSAGE = "No turfs found in the specified area. Try increasing the radius or changing the keyword."


@dataclass(frozen=True, slots=True)
class TurfSearchQuery:
    """검증과 위치 확정을 마친 검색 조건."""

    lat: float
    lng: float
    radius_km: float
    keyword: str | None
    max_results: int
    details_limit: int
    location: str | None = None
    resolved_address: str | None = None

    @property
    def origin(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)


def validate_search_input(
    *,
    location: str | None,
    lat: float | None,
    lng: float | None,
    radius_km: float,
    max_results: int,
    details_limit: int,
) -> None:
    """프런트엔드 입력을 검증합니다.

    Raises:
        ValidationError: 위치 입력이 없거나 반쪽짜리 좌표이거나 범위를 벗어난 경우
    """
    has_location = bool(location and location.strip())
    if lat is not None and lng is None:
        raise ValidationError("lng is required when lat is specified")
    if lng is not None and lat is None:
        raise ValidationError("lat is required when lng is specified")
    if not has_location and lat is None:
        raise ValidationError(
            "Either location OR both lat and lng are required. "
            'Examples: location="HSR Layout, Bengaluru" or lat=12.9121, lng=77.6446'
        )
    if has_location and lat is not None:
        raise ValidationError("Provide either location or lat/lng, not both")
    if lat is not None and lng is not None:
        try:
            Coordinate(lat=lat, lng=lng)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
    if not 0 < radius_km <= MAX_RADIUS_KM:
        raise ValidationError(f"Radius must be greater than 0 and at most {MAX_RADIUS_KM:g} km")
    if max_results < 1:
        raise ValidationError("max_results must be at least 1")
    if details_limit < 0:
        raise ValidationError("details_limit must not be negative")


async def resolve_search_query(
    client: GoogleMapsClient,
    *,
    location: str | None = None,
    lat: float | None = None,
    lng: float | None = None,
    radius_km: float | None = None,
    keyword: str | None = None,
    max_results: int | None = None,
    details_limit: int | None = None,
    settings: Settings | None = None,
) -> TurfSearchQuery:
    """입력을 검증하고, 주소가 주어졌으면 지오코딩해 검색 조건을 확정합니다."""
    settings = settings or get_settings()
    radius = settings.TURF_DEFAULT_RADIUS_KM if radius_km is None else radius_km
    result_cap = settings.TURF_MAX_RESULTS if max_results is None else max_results
    detail_cap = settings.TURF_DETAILS_LIMIT if details_limit is None else details_limit

    validate_search_input(
        location=location,
        lat=lat,
        lng=lng,
        radius_km=radius,
        max_results=result_cap,
        details_limit=detail_cap,
    )

    resolved_address = None
    if lat is None or lng is None:
        geocoded = await client.geocode(location.strip())
        lat, lng = geocoded.lat, geocoded.lng
        resolved_address = geocoded.formatted_address

    return TurfSearchQuery(
        lat=lat,
        lng=lng,
        radius_km=radius,
        keyword=(keyword or "").strip() or None,
        max_results=result_cap,
        details_limit=detail_cap,
        location=location,
        resolved_address=resolved_address,
    )


def rank_by_distance(
    places: list[PlaceSummary],
    origin: Coordinate,
    radius_km: float,
) -> list[tuple[PlaceSummary, float]]:
    """반경 안의 장소만 남겨 가까운 순으로 정렬합니다. 좌표 없는 장소는 제외됩니다."""
    ranked = sort_by_distance(places, origin, lambda place: place.coordinate())
    return [(place, distance) for place, distance in ranked if within_radius(distance, radius_km)]


async def find_turfs(
    client: GoogleMapsClient,
    query: TurfSearchQuery,
    settings: Settings | None = None,
) -> TurfSearchResponse:
    """확정된 검색 조건으로 전체 파이프라인을 실행합니다."""
    settings = settings or get_settings()

    if not is_approximately_bangalore(query.lat, query.lng):
        logger.warning(
            "Search origin appears to be outside Bangalore; results may not be relevant: lat=%.6f lng=%.6f",
            query.lat,
            query.lng,
        )

    places = await search_turfs(
        client,
        query.lat,
        query.lng,
        query.radius_km,
        query.keyword,
        query.max_results,
        turf_filter=TurfFilter.from_settings(settings),
    )
    echo = SearchQueryEcho(
        lat=query.lat,
        lng=query.lng,
        radius_km=query.radius_km,
        keyword=query.keyword,
        location=query.resolved_address or query.location,
    )
    generated_at = datetime.now(timezone.utc)

    ranked = rank_by_distance(places, query.origin, query.radius_km)
    if not ranked:
        logger.info("Turf pipeline found no places within radius: radius_km=%s", query.radius_km)
        return TurfSearchResponse(
            query=echo,
            generated_at=generated_at,
            total_found=0,
            details_fetched=0,
            results=[],
            message=NO_RESULTS_MESSAGE,
        )

    to_enrich = ranked[: query.details_limit]
    details = await client.get_place_details_batch(
        [place.id for place, _ in to_enrich],
        concurrency_limit=settings.TURF_CONCURRENCY_LIMIT,
    )
    results = [
        build_turf_result(
            place,
            details.get(place.id),
            distance,
            photo_url_builder=client.photo_url,
            review_limit=settings.TURF_REVIEW_LIMIT,
            photo_limit=settings.TURF_PHOTO_LIMIT,
            review_text_max_length=settings.TURF_REVIEW_TEXT_MAX_LENGTH,
        )
        for place, distance in to_enrich
    ]
    logger.info(
        "Turf pipeline completed: total_found=%d details_fetched=%d radius_km=%s",
        len(ranked),
        len(results),
        query.radius_km,
    )
    return TurfSearchResponse(
        query=echo,
        generated_at=generated_at,
        total_found=len(ranked),
        details_fetched=len(results),
        results=results,
    )
