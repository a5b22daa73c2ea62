"""Geocoding 결과 모델."""

from pydantic import BaseModel, ConfigDict, Field


class GeocodeResult(BaseModel):
    """주소 텍스트를 좌표로 변환한 결과."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., description="위도")
    lng: float = Field(..., description="경도")
    formatted_address: str = Field(..., description="제공자가 정규화한 주소")
