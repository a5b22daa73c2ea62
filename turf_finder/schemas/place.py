"""Google Places API (New) 응답을 표현하는 Place 모델.

응답 필드는 camelCase로 내려오므로 alias로 받고, 코드에서는 snake_case로 다룹니다.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from turf_finder.core.geo import Coordinate


class GoogleModel(BaseModel):
    """Google 응답 공통 설정(camelCase alias, 알 수 없는 필드 무시, 불변)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class LocalizedText(GoogleModel):
    text: str | None = None
    language_code: str | None = None


class PlaceLocation(GoogleModel):
    latitude: float | None = None
    longitude: float | None = None


class AuthorAttribution(GoogleModel):
    display_name: str | None = None
    uri: str | None = None
    photo_uri: str | None = None


class PlacePhoto(GoogleModel):
    """사진 리소스. `name`은 `places/{place_id}/photos/{photo_id}` 형식입니다."""

    name: str
    width_px: int | None = None
    height_px: int | None = None
    author_attributions: list[AuthorAttribution] = Field(default_factory=list)


class PlaceReview(GoogleModel):
    name: str | None = None
    relative_publish_time_description: str | None = None
    rating: float | None = None
    text: LocalizedText | None = None
    original_text: LocalizedText | None = None
    author_attribution: AuthorAttribution | None = None
    publish_time: str | None = None


class OpeningHours(GoogleModel):
    open_now: bool | None = None
    weekday_descriptions: list[str] = Field(default_factory=list)


class PlaceSummary(GoogleModel):
    """Nearby/Text Search 결과 한 건. 식별자는 `id`입니다."""

    id: str = Field(..., description="Google Places 고유 ID")
    display_name: LocalizedText | None = Field(default=None, description="장소 이름")
    formatted_address: str | None = Field(default=None, description="장소 주소")
    location: PlaceLocation | None = Field(default=None, description="장소 좌표")
    rating: float | None = Field(default=None, description="평점")
    user_rating_count: int | None = Field(default=None, description="평점 참여 수")
    photos: list[PlacePhoto] = Field(default_factory=list, description="사진 리소스 목록")
    regular_opening_hours: OpeningHours | None = Field(default=None, description="영업 시간")
    business_status: str | None = Field(default=None, description="영업 상태")
    types: list[str] = Field(default_factory=list, description="장소 유형 목록")

    @property
    def name(self) -> str | None:
        return self.display_name.text if self.display_name else None

    def coordinate(self) -> Coordinate | None:
        """좌표가 온전하면 `Coordinate`를, 아니면 None을 반환합니다."""
        if self.location is None:
            return None
        latitude = self.location.latitude
        longitude = self.location.longitude
        if latitude is None or longitude is None:
            return None
        try:
            return Coordinate(lat=latitude, lng=longitude)
        except ValueError:
            return None


class PlaceDetail(PlaceSummary):
    """Place Details 응답. 요약 필드에 연락처, 리뷰, 링크가 더해집니다."""

    national_phone_number: str | None = Field(default=None, description="국내 형식 전화번호")
    international_phone_number: str | None = Field(default=None, description="국제 형식 전화번호")
    reviews: list[PlaceReview] = Field(default_factory=list, description="리뷰 목록(제공자 순서)")
    google_maps_uri: str | None = Field(default=None, description="구글 맵 URL")
    website_uri: str | None = Field(default=None, description="웹사이트 URL")
