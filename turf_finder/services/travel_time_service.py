"""Distance Matrix로 자동차/자전거 이동 거리와 소요 시간을 조회합니다."""

from __future__ import annotations

import asyncio

from turf_finder.core.exceptions import RemoteApiError
from turf_finder.core.geo import Coordinate
from turf_finder.core.logger import get_logger
from turf_finder.schemas.travel import TravelDestination, TravelEstimate, TravelMode, TravelTimes
from turf_finder.services.google_maps_service import MAX_MATRIX_DESTINATIONS, GoogleMapsClient

logger = get_logger(__name__)

TRAVEL_MODES: tuple[TravelMode, ...] = ("driving", "bicycling")


async def _estimates_for_mode(
    client: GoogleMapsClient,
    origin: Coordinate,
    destinations: list[Coordinate],
    mode: TravelMode,
) -> list[TravelEstimate | None]:
    try:
        return await client.distance_matrix(origin, destinations, mode)
    except RemoteApiError as exc:
        logger.warning("Distance matrix fetch failed: mode=%s error=%s", mode, exc)
        return [None] * len(destinations)


async def fetch_travel_times(
    client: GoogleMapsClient,
    origin: Coordinate,
    destinations: list[TravelDestination],
) -> dict[str, TravelTimes]:
    """장소 ID별 이동 시간을 반환합니다.

    목적지는 앞에서부터 25개만 사용합니다. 두 이동 수단은 동시에 조회하며 한쪽이
    실패해도 다른 쪽 결과는 그대로 반환합니다.
    """
    limited = destinations[:MAX_MATRIX_DESTINATIONS]
    coordinates = [Coordinate(lat=destination.lat, lng=destination.lng) for destination in limited]

    per_mode = await asyncio.gather(
        *[_estimates_for_mode(client, origin, coordinates, mode) for mode in TRAVEL_MODES]
    )

    times: dict[str, TravelTimes] = {}
    for index, destination in enumerate(limited):
        estimates = {mode: per_mode[mode_index][index] for mode_index, mode in enumerate(TRAVEL_MODES)}
        times[destination.place_id] = TravelTimes(**estimates)

    logger.info("Travel times completed: destination_count=%d", len(limited))
    return times
