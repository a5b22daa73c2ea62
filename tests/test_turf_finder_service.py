"""터프 검색 파이프라인(검증, 위치 확정, 거리 정렬, 상세 병합) 테스트."""

from __future__ import annotations

import asyncio

import pytest

from tests.mocks.mock_places_service import MockMapsClient, make_place
from turf_finder.core.config import Settings
from turf_finder.core.exceptions import ValidationError
from turf_finder.core.geo import Coordinate
from turf_finder.schemas.geocode import GeocodeResult
from turf_finder.schemas.place import PlaceDetail
from turf_finder.services.turf_finder_service import (
    NO_RESULTS_MESSAGE,
    TurfSearchQuery,
    find_turfs,
    rank_by_distance,
    resolve_search_query,
    validate_search_input,
)

ORIGIN = Coordinate(lat=12.9121, lng=77.6446)


def _settings(**overrides) -> Settings:
    values = {"GOOGLE_MAPS_API_KEY": "test-key", "TURF_CONCURRENCY_LIMIT": 4}
    values.update(overrides)
    return Settings(**values)


def _validate(**overrides) -> None:
    values = {
        "location": None,
        "lat": 12.9121,
        "lng": 77.6446,
        "radius_km": 5.0,
        "max_results": 30,
        "details_limit": 20,
    }
    values.update(overrides)
    validate_search_input(**values)


@pytest.mark.parametrize(
    "overrides",
    [
        {"lat": None, "lng": None},
        {"lng": None},
        {"lat": None},
        {"location": "HSR Layout"},
        {"lat": 95.0},
        {"lng": 181.0},
        {"radius_km": 0},
        {"radius_km": 50.5},
        {"max_results": 0},
        {"details_limit": -1},
    ],
)
def test_validate_search_input_rejects_invalid_input(overrides) -> None:
    with pytest.raises(ValidationError):
        _validate(**overrides)


def test_validate_search_input_accepts_location_or_coordinates() -> None:
    _validate()
    _validate(location="HSR Layout, Bengaluru", lat=None, lng=None, radius_km=50, details_limit=0)


def test_resolve_search_query_geocodes_location_and_applies_defaults() -> None:
    client = MockMapsClient(
        geocoded=GeocodeResult(lat=12.91, lng=77.64, formatted_address="HSR Layout, Bengaluru, Karnataka")
    )

    query = asyncio.run(
        resolve_search_query(client, location="  HSR Layout ", keyword="  ", settings=_settings(TURF_MAX_RESULTS=12))
    )

    assert client.geocode_calls == ["HSR Layout"]
    assert (query.lat, query.lng) == (12.91, 77.64)
    assert query.radius_km == 5.0
    assert query.max_results == 12
    assert query.details_limit == 20
    assert query.keyword is None
    assert query.resolved_address == "HSR Layout, Bengaluru, Karnataka"


def test_resolve_search_query_uses_coordinates_without_geocoding() -> None:
    client = MockMapsClient()

    query = asyncio.run(
        resolve_search_query(client, lat=12.9121, lng=77.6446, radius_km=3, keyword="futsal", settings=_settings())
    )

    assert client.geocode_calls == []
    assert query.radius_km == 3
    assert query.keyword == "futsal"


def test_rank_by_distance_filters_radius_and_drops_missing_locations() -> None:
    places = [
        make_place("far", "Far Ground", lat=13.1, lng=77.6446),
        make_place("near", "Near Ground", lat=12.9130, lng=77.6446),
        make_place("nowhere", "Nowhere Ground", lat=None, lng=None),
        make_place("here", "Here Ground", lat=12.9121, lng=77.6446),
    ]

    ranked = rank_by_distance(places, ORIGIN, radius_km=5)

    assert [place.id for place, _ in ranked] == ["here", "near"]
    assert ranked[0][1] == 0.0
    assert ranked[1][1] == 0.1


def test_find_turfs_enriches_closest_places_only() -> None:
    client = MockMapsClient(
        text_results={
            "turf": [
                make_place("p1", "Kickoff Arena", lat=12.9300, lng=77.6446),
                make_place("p2", "Goal Line Turf", lat=12.9121, lng=77.6446),
                make_place("p3", "Striker Ground", lat=12.9200, lng=77.6446),
            ]
        },
        details={
            "p2": PlaceDetail.model_validate(
                {
                    "id": "p2",
                    "internationalPhoneNumber": "+91 98450 00000",
                    "photos": [{"name": "places/p2/photos/a"}],
                }
            )
        },
    )
    query = TurfSearchQuery(lat=12.9121, lng=77.6446, radius_km=5, keyword="turf", max_results=30, details_limit=2)

    response = asyncio.run(find_turfs(client, query, _settings()))

    assert [result.place_id for result in response.results] == ["p2", "p3"]
    assert response.total_found == 3
    assert response.details_fetched == 2
    assert client.batch_calls == [(["p2", "p3"], 4)]
    assert response.results[0].phone == "+91 98450 00000"
    assert response.results[0].photos == ["https://photos.test/places/p2/photos/a"]
    assert response.results[1].phone is None
    assert response.query.keyword == "turf"
    assert response.message is None


def test_find_turfs_returns_message_when_nothing_in_radius() -> None:
    client = MockMapsClient(
        text_results={"turf": [make_place("p1", "Mysuru Turf", lat=12.2958, lng=76.6394)]},
    )
    query = TurfSearchQuery(lat=12.9121, lng=77.6446, radius_km=5, keyword="turf", max_results=30, details_limit=20)

    response = asyncio.run(find_turfs(client, query, _settings()))

    assert response.results == []
    assert response.total_found == 0
    assert response.message == NO_RESULTS_MESSAGE
    assert client.batch_calls == []
