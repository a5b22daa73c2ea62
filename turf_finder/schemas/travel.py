"""Distance Matrix 기반 이동 시간 API 모델."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TravelMode = Literal["driving", "bicycling"]


class TravelDestination(BaseModel):
    place_id: str = Field(..., description="결과를 묶을 장소 ID")
    lat: float = Field(..., ge=-90, le=90, description="목적지 위도")
    lng: float = Field(..., ge=-180, le=180, description="목적지 경도")


class TravelTimeRequest(BaseModel):
    """출발지 하나와 목적지 여러 곳에 대한 이동 시간 요청."""

    origin_lat: float = Field(..., ge=-90, le=90, description="출발지 위도")
    origin_lng: float = Field(..., ge=-180, le=180, description="출발지 경도")
    destinations: list[TravelDestination] = Field(..., min_length=1, description="목적지 목록(최대 25개 사용)")


class TravelEstimate(BaseModel):
    """제공자가 포맷한 거리/소요 시간 텍스트."""

    model_config = ConfigDict(frozen=True)

    distance: str
    duration: str


class TravelTimes(BaseModel):
    driving: TravelEstimate | None = None
    bicycling: TravelEstimate | None = None


class TravelTimeResponse(BaseModel):
    distances: dict[str, TravelTimes] = Field(default_factory=dict)
