"""Turf Finder 도메인 예외 정의."""

from __future__ import annotations

from typing import Any

REMEDIATION_TIPS: tuple[str, ...] = (
    "GOOGLE_MAPS_API_KEY가 올바르게 설정되었는지 확인하세요.",
    "Google Cloud Console에서 Geocoding API와 Places API (New)가 활성화되어 있는지 확인하세요.",
    "API 할당량(quota)과 결제(billing) 상태를 확인하세요.",
)


class TurfFinderError(Exception):
    """모든 도메인 예외의 기반 클래스."""

    code = "TURF_FINDER_ERROR"

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(TurfFinderError):
    """호출자 입력이 잘못된 경우 발생합니다."""

    code = "VALIDATION_ERROR"


class ConfigurationError(TurfFinderError):
    """API 키 등 필수 설정이 누락된 경우 발생합니다."""

    code = "CONFIGURATION_ERROR"


class GeocodingError(TurfFinderError):
    """주소를 좌표로 변환하지 못한 경우 발생합니다.

    `no_results`가 True면 제공자가 결과 없음(ZERO_RESULTS)을 보고한 경우로,
    입력을 구체화하면 해결될 수 있습니다.
    """

    code = "GEOCODING_ERROR"

    def __init__(self, message: str, details: Any = None, *, no_results: bool = False) -> None:
        super().__init__(message, details)
        self.no_results = no_results


class RemoteApiError(TurfFinderError):
    """Google API가 성공이 아닌 응답을 반환했거나 호출 자체가 실패한 경우 발생합니다."""

    code = "GOOGLE_API_ERROR"

    def __init__(self, message: str, details: Any = None, *, status_code: int | None = None) -> None:
        super().__init__(message, details)
        self.status_code = status_code
