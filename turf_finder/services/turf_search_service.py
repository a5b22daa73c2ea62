"""여러 키워드 검색을 합쳐 터프 후보를 찾는 검색 집계 서비스."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from turf_finder.core.config import Settings, split_csv
from turf_finder.core.exceptions import RemoteApiError
from turf_finder.core.logger import get_logger
from turf_finder.schemas.place import PlaceSummary
from turf_finder.services.places_service import PlacesServiceProtocol

logger = get_logger(__name__)

PAGE_SIZE_LIMIT = 20
DEFAULT_MAX_RESULTS = 30

DEFAULT_TURF_KEYWORDS: tuple[str, ...] = (
    "turf",
    "football turf",
    "box cricket",
    "turf ground",
    "sports turf",
    "cricket ground",
    "football ground",
    "futsal",
    "five a side football",
    "seven a side football",
)

SPORTS_VENUE_TYPES: tuple[str, ...] = ("sports_club", "sports_complex", "stadium", "gym")

DEFAULT_EXCLUDE_KEYWORDS: tuple[str, ...] = (
    "bowling",
    "bowl",
    "arcade",
    "gaming zone",
    "game zone",
    "virtual reality",
    "vr arena",
    "laser tag",
    "escape room",
    "trampoline",
    "go kart",
    "karting",
    "billiard",
    "pool table",
    "snooker",
    "paintball",
    "shooting range",
    "ice skating",
    "roller skating",
    "spa",
    "salon",
    "restaurant",
    "cafe",
    "bar",
    "pub",
    "lounge",
)

DEFAULT_EXCLUDE_TYPES: tuple[str, ...] = (
    "bowling_alley",
    "amusement_center",
    "movie_theater",
    "night_club",
    "casino",
    "bar",
    "restaurant",
    "cafe",
)


@dataclass(frozen=True, slots=True)
class TurfFilter:
    """터프가 아닌 장소를 걸러내는 이름/유형 제외 규칙."""

    exclude_keywords: tuple[str, ...] = DEFAULT_EXCLUDE_KEYWORDS
    exclude_types: tuple[str, ...] = DEFAULT_EXCLUDE_TYPES

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "exclude_keywords",
            tuple(keyword.strip().lower() for keyword in self.exclude_keywords if keyword.strip()),
        )
        object.__setattr__(self, "exclude_types", tuple(t.strip() for t in self.exclude_types if t.strip()))

    @classmethod
    def from_settings(cls, settings: Settings) -> TurfFilter:
        """설정에 제외 목록이 있으면 기본 목록 대신 사용합니다."""
        keywords = split_csv(settings.TURF_EXCLUDE_KEYWORDS)
        types = split_csv(settings.TURF_EXCLUDE_TYPES)
        return cls(
            exclude_keywords=tuple(keywords) or DEFAULT_EXCLUDE_KEYWORDS,
            exclude_types=tuple(types) or DEFAULT_EXCLUDE_TYPES,
        )

    def exclusion_reason(self, place: PlaceSummary) -> str | None:
        """제외 대상이면 사유를, 아니면 None을 반환합니다."""
        name = (place.name or "").lower()
        for keyword in self.exclude_keywords:
            if keyword in name:
                return f"keyword:{keyword}"

        place_types = set(place.types)
        for place_type in self.exclude_types:
            if place_type in place_types:
                return f"type:{place_type}"
        return None

    def apply(self, places: Iterable[PlaceSummary]) -> list[PlaceSummary]:
        kept: list[PlaceSummary] = []
        for place in places:
            reason = self.exclusion_reason(place)
            if reason is None:
                kept.append(place)
                continue
            logger.debug("Excluding place: name=%s reason=%s", place.name, reason)
        return kept


def build_keyword_plan(
    custom_keyword: str | None,
    default_keywords: Sequence[str] = DEFAULT_TURF_KEYWORDS,
) -> list[str]:
    """검색할 키워드 순서를 만듭니다.

    사용자 키워드가 있으면 맨 앞에 두고, 기본 목록에서는 같은 키워드를
    (대소문자 무시) 빼서 같은 텍스트로 두 번 검색하지 않습니다.
    """
    keyword = (custom_keyword or "").strip()
    if not keyword:
        return list(default_keywords)
    normalized = keyword.lower()
    return [keyword, *[k for k in default_keywords if k.strip().lower() != normalized]]


def _add_unique(places: Iterable[PlaceSummary], seen_ids: set[str], collected: list[PlaceSummary]) -> int:
    added = 0
    for place in places:
        if place.id in seen_ids:
            continue
        seen_ids.add(place.id)
        collected.append(place)
        added += 1
    return added


async def search_turfs(
    places_service: PlacesServiceProtocol,
    lat: float,
    lng: float,
    radius_km: float,
    keyword: str | None = None,
    max_results: int = DEFAULT_MAX_RESULTS,
    *,
    turf_filter: TurfFilter | None = None,
    default_keywords: Sequence[str] = DEFAULT_TURF_KEYWORDS,
) -> list[PlaceSummary]:
    """유형 기반 Nearby Search와 키워드별 Text Search 결과를 합쳐 반환합니다.

    처리 순서:
    1. 스포츠 시설 유형으로 Nearby Search를 한 번 수행합니다(실패해도 계속).
    2. 키워드마다 순서대로 Text Search를 수행합니다(키워드별 실패는 건너뜀).
    3. `id` 기준으로 처음 발견된 항목만 남깁니다.
    4. 키워드 검색 후 누적 결과가 `max_results`에 도달하면 남은 키워드를 생략합니다.
    5. 제외 규칙을 적용하고 발견 순서대로 `max_results`개까지 자릅니다.

    거리 정렬은 하지 않습니다. 호출 측에서 기준점과 반경으로 정렬합니다.
    """
    if max_results < 1:
        raise ValueError("max_results must be at least 1.")

    turf_filter = turf_filter or TurfFilter()
    radius_m = radius_km * 1000
    page_size = min(PAGE_SIZE_LIMIT, max_results)
    seen_ids: set[str] = set()
    collected: list[PlaceSummary] = []

    try:
        nearby_places = await places_service.nearby_search(
            lat=lat,
            lng=lng,
            radius_m=radius_m,
            included_types=list(SPORTS_VENUE_TYPES),
            max_result_count=page_size,
        )
        added = _add_unique(nearby_places, seen_ids, collected)
        logger.info("Nearby search completed: result_count=%d added=%d", len(nearby_places), added)
    except RemoteApiError as exc:
        logger.warning("Nearby search failed, continuing with keyword search: error=%s", exc)

    keywords = build_keyword_plan(keyword, default_keywords)
    for index, text_query in enumerate(keywords, start=1):
        try:
            places = await places_service.text_search(
                text_query=text_query,
                lat=lat,
                lng=lng,
                radius_m=radius_m,
                max_result_count=page_size,
            )
        except RemoteApiError as exc:
            logger.warning("Text search failed, skipping keyword: keyword=%s error=%s", text_query, exc)
            continue

        added = _add_unique(places, seen_ids, collected)
        logger.info(
            "Text search completed: keyword=%s result_count=%d added=%d total=%d",
            text_query,
            len(places),
            added,
            len(collected),
        )
        if len(collected) >= max_results:
            logger.info("Result cap reached: skipped_keywords=%d", len(keywords) - index)
            break

    filtered = turf_filter.apply(collected)
    logger.info(
        "Turf search completed: unique_count=%d filtered_count=%d max_results=%d",
        len(collected),
        len(filtered),
        max_results,
    )
    return filtered[:max_results]
