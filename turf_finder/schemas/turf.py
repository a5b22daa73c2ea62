"""터프 검색 API 요청/응답 모델."""

from datetime import datetime

from pydantic import BaseModel, Field


class TurfSearchRequest(BaseModel):
    """터프 검색 요청 본문.

    `location`(주소 텍스트) 또는 `lat`/`lng` 쌍 중 하나가 필요합니다. 범위와
    상호 배타 조건은 서비스 계층에서 검증해 400으로 응답합니다.
    """

    location: str | None = Field(default=None, description="주소 텍스트 (예: HSR Layout, Bengaluru)")
    lat: float | None = Field(default=None, description="위도")
    lng: float | None = Field(default=None, description="경도")
    radius_km: float | None = Field(default=None, description="검색 반경(km), 0 초과 50 이하")
    keyword: str | None = Field(default=None, description="우선 검색할 키워드 (예: box cricket)")
    max_results: int | None = Field(default=None, description="탐색 단계 최대 결과 수")
    details_limit: int | None = Field(default=None, description="상세 정보를 조회할 최대 장소 수")


class TurfReview(BaseModel):
    """결과에 포함되는 리뷰 요약."""

    author: str = Field(..., description="작성자 표시 이름")
    rating: float | None = Field(default=None, description="리뷰 평점")
    relative_time: str = Field(default="", description="상대 작성 시각 (예: 2 weeks ago)")
    text: str = Field(default="", description="잘라낸 리뷰 본문")


class TurfResult(BaseModel):
    """요약 레코드와 상세 레코드를 병합한 최종 결과 한 건."""

    place_id: str = Field(..., description="Google Places 고유 ID")
    name: str = Field(..., description="장소 이름")
    distance_km: float = Field(..., description="검색 기준점으로부터의 직선 거리(km)")
    address: str = Field(..., description="장소 주소")
    maps_url: str = Field(..., description="구글 맵 링크")
    phone: str | None = Field(default=None, description="전화번호(국제 형식 우선)")
    open_now: bool | None = Field(default=None, description="현재 영업 여부")
    rating: float | None = Field(default=None, description="평점")
    user_ratings_total: int | None = Field(default=None, description="평점 참여 수")
    photos: list[str] = Field(default_factory=list, description="사진 URL 목록")
    top_reviews: list[TurfReview] = Field(default_factory=list, description="상위 리뷰")
    lat: float | None = Field(default=None, description="장소 위도")
    lng: float | None = Field(default=None, description="장소 경도")


class SearchQueryEcho(BaseModel):
    """응답에 되돌려 주는 실제 검색 조건."""

    lat: float
    lng: float
    radius_km: float
    keyword: str | None = None
    location: str | None = None


class TurfSearchResponse(BaseModel):
    """터프 검색 응답."""

    query: SearchQueryEcho
    generated_at: datetime
    total_found: int = Field(..., description="반경 내에서 찾은 전체 장소 수")
    details_fetched: int = Field(..., description="상세 정보를 병합한 결과 수")
    results: list[TurfResult] = Field(default_factory=list)
    message: str | None = Field(default=None, description="결과가 없을 때의 안내 문구")


class HealthResponse(BaseModel):
    status: str
    api_key_configured: bool
    timestamp: datetime
