"""API 의존성 모음."""

from fastapi import HTTPException, status

from turf_finder.core.exceptions import ConfigurationError
from turf_finder.core.logger import get_logger
from turf_finder.services.google_maps_service import GoogleMapsClient, get_google_maps_client

logger = get_logger(__name__)


def get_maps_client() -> GoogleMapsClient:
    """공유 Google Maps 클라이언트를 제공합니다. API 키가 없으면 500을 반환합니다."""
    try:
        return get_google_maps_client()
    except ConfigurationError as exc:
        logger.error("Google Maps client unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Google Maps API 키가 설정되지 않았습니다.",
        ) from exc
