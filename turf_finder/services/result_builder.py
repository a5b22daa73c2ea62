"""요약 레코드와 상세 레코드를 하나의 결과로 병합합니다.

필드마다 독립적으로 상세 값 → 요약 값 → 고정 기본값 순서로 채웁니다.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from turf_finder.schemas.place import PlaceDetail, PlaceReview, PlaceSummary
from turf_finder.schemas.turf import TurfResult, TurfReview

T = TypeVar("T")

UNKNOWN_NAME = "Unknown"
ADDRESS_NOT_AVAILABLE = "Address not available"
ANONYMOUS_AUTHOR = "Anonymous"
ELLIPSIS = "..."
REVIEW_LIMIT = 3
PHOTO_LIMIT = 3
REVIEW_TEXT_MAX_LENGTH = 240

PhotoUrlBuilder = Callable[[str], str]


def truncate_text(text: str, max_length: int = REVIEW_TEXT_MAX_LENGTH) -> str:
    """`max_length`를 넘으면 말줄임표를 포함해 정확히 `max_length`자로 자릅니다."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def fallback_maps_url(place_id: str) -> str:
    return f"https://www.google.com/maps/place/?q=place_id:{place_id}"


def _first_text(*values: str | None) -> str | None:
    return next((value for value in values if value), None)


def _first_present(*values: T | None) -> T | None:
    return next((value for value in values if value is not None), None)


def resolve_phone(detail: PlaceDetail | None) -> str | None:
    """상세 레코드에서 국제 형식 번호를 우선, 없으면 국내 형식 번호를 반환합니다."""
    if detail is None:
        return None
    return _first_text(detail.international_phone_number, detail.national_phone_number)


def _build_review(review: PlaceReview, text_max_length: int) -> TurfReview:
    author = review.author_attribution.display_name if review.author_attribution else None
    text = _first_text(
        review.text.text if review.text else None,
        review.original_text.text if review.original_text else None,
    )
    return TurfReview(
        author=author or ANONYMOUS_AUTHOR,
        rating=review.rating,
        relative_time=review.relative_publish_time_description or "",
        text=truncate_text(text or "", text_max_length),
    )


def build_turf_result(
    summary: PlaceSummary,
    detail: PlaceDetail | None,
    distance_km: float,
    *,
    photo_url_builder: PhotoUrlBuilder,
    review_limit: int = REVIEW_LIMIT,
    photo_limit: int = PHOTO_LIMIT,
    review_text_max_length: int = REVIEW_TEXT_MAX_LENGTH,
) -> TurfResult:
    """검색 요약과 (있다면) 상세 정보를 병합해 `TurfResult`를 만듭니다.

    Args:
        summary: 검색 단계에서 얻은 장소 요약
        detail: 상세 조회 결과. 조회 실패 시 None
        distance_km: 기준점으로부터 계산된 거리
        photo_url_builder: 사진 리소스 이름을 URL로 바꾸는 함수

    Returns:
        병합된 결과. 리뷰는 제공자 순서를 유지한 채 앞에서부터 잘라냅니다.
    """
    summary_location = summary.location
    detail_location = detail.location if detail else None

    open_now = _first_present(
        detail.regular_opening_hours.open_now if detail and detail.regular_opening_hours else None,
        summary.regular_opening_hours.open_now if summary.regular_opening_hours else None,
    )
    photos = (detail.photos if detail else None) or summary.photos
    reviews = detail.reviews[:review_limit] if detail else []

    return TurfResult(
        place_id=summary.id,
        name=_first_text(detail.name if detail else None, summary.name) or UNKNOWN_NAME,
        distance_km=distance_km,
        address=_first_text(detail.formatted_address if detail else None, summary.formatted_address)
        or ADDRESS_NOT_AVAILABLE,
        maps_url=_first_text(detail.google_maps_uri if detail else None) or fallback_maps_url(summary.id),
        phone=resolve_phone(detail),
        open_now=open_now,
        rating=_first_present(detail.rating if detail else None, summary.rating),
        user_ratings_total=_first_present(detail.user_rating_count if detail else None, summary.user_rating_count),
        photos=[photo_url_builder(photo.name) for photo in photos[:photo_limit]],
        top_reviews=[_build_review(review, review_text_max_length) for review in reviews],
        lat=_first_present(
            detail_location.latitude if detail_location else None,
            summary_location.latitude if summary_location else None,
        ),
        lng=_first_present(
            detail_location.longitude if detail_location else None,
            summary_location.longitude if summary_location else None,
        ),
    )
