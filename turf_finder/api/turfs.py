"""터프 검색/이동 시간/헬스 체크 API."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from turf_finder.api.dependencies import get_maps_client
from turf_finder.core.config import get_settings
from turf_finder.core.geo import Coordinate
from turf_finder.core.logger import get_logger
from turf_finder.core.readiness import collect_readiness_status
from turf_finder.schemas.travel import TravelTimeRequest, TravelTimeResponse
from turf_finder.schemas.turf import HealthResponse, TurfSearchRequest, TurfSearchResponse
from turf_finder.services.google_maps_service import GoogleMapsClient
from turf_finder.services.travel_time_service import fetch_travel_times
from turf_finder.services.turf_finder_service import find_turfs, resolve_search_query

router = APIRouter(prefix="/api", tags=["turfs"])
logger = get_logger(__name__)


@router.post("/search", response_model=TurfSearchResponse)
async def search_turfs_endpoint(
    request: TurfSearchRequest,
    client: GoogleMapsClient = Depends(get_maps_client),  # noqa: B008
) -> TurfSearchResponse:
    """주소 또는 좌표 주변의 터프를 가까운 순으로 반환합니다.

    도메인 예외(검증/지오코딩/외부 API)는 `main`의 예외 핸들러가 상태 코드로 변환합니다.
    """
    logger.info(
        "Search request received: location=%s lat=%s lng=%s radius_km=%s keyword=%s",
        request.location,
        request.lat,
        request.lng,
        request.radius_km,
        request.keyword,
    )
    query = await resolve_search_query(client, **request.model_dump())
    return await find_turfs(client, query)


@router.post("/distance", response_model=TravelTimeResponse)
async def travel_times_endpoint(
    request: TravelTimeRequest,
    client: GoogleMapsClient = Depends(get_maps_client),  # noqa: B008
) -> TravelTimeResponse:
    """출발지에서 각 장소까지 자동차/자전거 이동 거리와 시간을 반환합니다."""
    origin = Coordinate(lat=request.origin_lat, lng=request.origin_lng)
    distances = await fetch_travel_times(client, origin, request.destinations)
    return TravelTimeResponse(distances=distances)


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """API 키 설정 여부를 포함한 헬스 체크."""
    return HealthResponse(
        status="ok",
        api_key_configured=bool(get_settings().GOOGLE_MAPS_API_KEY),
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/health/ready")
async def readiness() -> JSONResponse:
    """필수 의존성이 준비되지 않았으면 503을 반환합니다."""
    result = await collect_readiness_status()
    status_code = 200 if result["status"] == "ready" else 503
    return JSONResponse(status_code=status_code, content=result)
