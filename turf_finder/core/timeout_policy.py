"""요청 데드라인과 Google 호출 타임아웃 정책."""

from __future__ import annotations

from dataclasses import dataclass

from turf_finder.core.config import Settings, get_settings

_FLOOR_SECONDS = 1
_CONNECT_SHARE = 0.3
_CONNECT_CEILING_SECONDS = 5.0


def _seconds(value: int | float | None, fallback: int, ceiling: int | None = None) -> int:
    """설정값을 1초 이상 정수 초로 바꾸고, `ceiling`이 있으면 그 값을 넘지 않게 합니다."""
    try:
        seconds = int(fallback if value is None else value)
    except (TypeError, ValueError):
        seconds = fallback
    seconds = max(_FLOOR_SECONDS, seconds)
    return seconds if ceiling is None else min(seconds, ceiling)


@dataclass(frozen=True, slots=True)
class TimeoutPolicy:
    """HTTP 요청 하나에 적용되는 타임아웃 묶음.

    바깥 단계의 데드라인이 항상 안쪽 단계보다 크거나 같습니다:
    request ≥ external_api ≥ google_maps.
    """

    request_timeout_seconds: int
    external_api_timeout_seconds: int
    google_maps_timeout_seconds: int


def build_timeout_policy(settings: Settings) -> TimeoutPolicy:
    request_deadline = _seconds(settings.REQUEST_TIMEOUT_SECONDS, 60)
    external_deadline = _seconds(settings.EXTERNAL_API_TIMEOUT_SECONDS, 15, ceiling=request_deadline)
    return TimeoutPolicy(
        request_timeout_seconds=request_deadline,
        external_api_timeout_seconds=external_deadline,
        google_maps_timeout_seconds=_seconds(settings.GOOGLE_MAPS_TIMEOUT_SECONDS, 10, ceiling=external_deadline),
    )


def get_timeout_policy(settings: Settings | None = None) -> TimeoutPolicy:
    return build_timeout_policy(settings or get_settings())


def to_requests_timeout(total_timeout_seconds: int) -> tuple[float, float]:
    """전체 예산을 requests의 (connect, read) 타임아웃으로 나눕니다.

    connect는 전체의 30%(1~5초), read는 나머지입니다.
    """
    budget = float(max(_FLOOR_SECONDS, int(total_timeout_seconds)))
    connect = min(_CONNECT_CEILING_SECONDS, max(1.0, budget * _CONNECT_SHARE))
    if budget > connect:
        return (connect, max(1.0, budget - connect))
    return (connect, max(0.5, budget * 0.5))
