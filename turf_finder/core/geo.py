"""거리 계산과 위경도 범위를 다루는 지리 유틸리티."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

EARTH_RADIUS_KM = 6371.0

_MIN_LAT = -90.0
_MAX_LAT = 90.0
_MIN_LNG = -180.0
_MAX_LNG = 180.0
_EPSILON = 1e-6

T = TypeVar("T")


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass(frozen=True, slots=True)
class Coordinate:
    """위도/경도 좌표. 범위를 벗어나면 생성 시 `ValueError`가 발생합니다."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        lat = float(self.lat)
        lng = float(self.lng)
        if not _MIN_LAT <= lat <= _MAX_LAT:
            raise ValueError(f"Latitude out of range: {lat}")
        if not _MIN_LNG <= lng <= _MAX_LNG:
            raise ValueError(f"Longitude out of range: {lng}")
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lng", lng)

    def as_param(self) -> str:
        """Google Web Service 쿼리 파라미터 형식(`lat,lng`)으로 직렬화합니다."""
        return f"{self.lat},{self.lng}"


@dataclass(frozen=True, slots=True)
class GeoBounds:
    """남서/북동 꼭짓점으로 정의되는 위경도 사각형."""

    min_lat: float
    min_lng: float
    max_lat: float
    max_lng: float

    def __post_init__(self) -> None:
        min_lat, max_lat = sorted((float(self.min_lat), float(self.max_lat)))
        min_lng, max_lng = sorted((float(self.min_lng), float(self.max_lng)))

        min_lat = _clamp(min_lat, _MIN_LAT, _MAX_LAT)
        max_lat = _clamp(max_lat, _MIN_LAT, _MAX_LAT)
        min_lng = _clamp(min_lng, _MIN_LNG, _MAX_LNG)
        max_lng = _clamp(max_lng, _MIN_LNG, _MAX_LNG)

        if math.isclose(min_lat, max_lat):
            min_lat = _clamp(min_lat - _EPSILON, _MIN_LAT, _MAX_LAT)
            max_lat = _clamp(max_lat + _EPSILON, _MIN_LAT, _MAX_LAT)
        if math.isclose(min_lng, max_lng):
            min_lng = _clamp(min_lng - _EPSILON, _MIN_LNG, _MAX_LNG)
            max_lng = _clamp(max_lng + _EPSILON, _MIN_LNG, _MAX_LNG)

        object.__setattr__(self, "min_lat", min_lat)
        object.__setattr__(self, "min_lng", min_lng)
        object.__setattr__(self, "max_lat", max_lat)
        object.__setattr__(self, "max_lng", max_lng)

    def contains(self, latitude: float, longitude: float) -> bool:
        """점이 사각형 내부(경계 포함)에 있는지 반환합니다."""
        lat = float(latitude)
        lng = float(longitude)
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng

    def to_geocode_bounds_param(self) -> str:
        """Geocoding API `bounds` 파라미터(`sw_lat,sw_lng|ne_lat,ne_lng`)로 직렬화합니다."""
        return f"{self.min_lat},{self.min_lng}|{self.max_lat},{self.max_lng}"


BANGALORE_BOUNDS = GeoBounds(min_lat=12.7, min_lng=77.3, max_lat=13.2, max_lng=77.9)


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """두 좌표 사이의 대원 거리(km)를 하버사인 공식으로 계산합니다."""
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    delta_lat = math.radians(b.lat - a.lat)
    delta_lng = math.radians(b.lng - a.lng)

    h = math.sin(delta_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def round_distance(distance_km: float) -> float:
    """소수 둘째 자리로 반올림합니다(0.5는 올림)."""
    if math.isinf(distance_km):
        return distance_km
    return math.floor(distance_km * 100 + 0.5) / 100


def within_radius(distance_km: float, radius_km: float) -> bool:
    return distance_km <= radius_km


def sort_by_distance(
    items: Iterable[T],
    origin: Coordinate,
    get_location: Callable[[T], Coordinate | None],
) -> list[tuple[T, float]]:
    """기준점에서 가까운 순으로 정렬된 `(item, 반올림 거리)` 목록을 반환합니다.

    정렬은 안정 정렬이라 거리가 같으면 입력 순서를 유지합니다. 위치가 없는 항목은
    무한대 거리로 취급되어 맨 뒤로 갑니다.
    """
    measured: list[tuple[T, float]] = []
    for item in items:
        location = get_location(item)
        distance = math.inf if location is None else round_distance(haversine_km(origin, location))
        measured.append((item, distance))
    return sorted(measured, key=lambda pair: pair[1])


def is_approximately_bangalore(latitude: float, longitude: float) -> bool:
    return BANGALORE_BOUNDS.contains(latitude, longitude)


def format_distance(distance_km: float) -> str:
    """사람이 읽기 좋은 거리 문자열(`850 m`, `2.35 km`)을 반환합니다."""
    if distance_km < 1:
        return f"{math.floor(distance_km * 1000 + 0.5)} m"
    return f"{round_distance(distance_km)} km"
