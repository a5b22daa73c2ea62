"""애플리케이션 전역 설정을 관리하는 모듈."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def split_csv(value: str | None) -> list[str]:
    """쉼표로 구분된 설정 문자열을 공백 제거된 목록으로 변환합니다."""
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class Settings(BaseSettings):
    """환경 변수 기반 설정 모델."""

    GOOGLE_MAPS_API_KEY: str | None = None
    GOOGLE_MAPS_TIMEOUT_SECONDS: int = 10
    GOOGLE_GEOCODE_REGION: str = "in"
    REQUEST_TIMEOUT_SECONDS: int = 60
    EXTERNAL_API_TIMEOUT_SECONDS: int = 15
    CACHE_TTL_SECONDS: int = 600
    TURF_DEFAULT_RADIUS_KM: float = 5.0
    TURF_MAX_RESULTS: int = 30
    TURF_DETAILS_LIMIT: int = 20
    TURF_CONCURRENCY_LIMIT: int = 5
    TURF_EXCLUDE_KEYWORDS: str = ""
    TURF_EXCLUDE_TYPES: str = ""
    TURF_REVIEW_LIMIT: int = 3
    TURF_PHOTO_LIMIT: int = 3
    TURF_REVIEW_TEXT_MAX_LENGTH: int = 240
    EXPOSE_INTERNAL_ERRORS: bool = False
    CORS_ALLOW_ORIGINS: str = ""
    CORS_ALLOW_METHODS: str = "GET,POST,OPTIONS"
    CORS_ALLOW_HEADERS: str = "Content-Type"
    CORS_ALLOW_CREDENTIALS: bool = False
    SECURITY_HEADERS_ENABLED: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("TURF_CONCURRENCY_LIMIT", mode="before")
    @classmethod
    def _clamp_turf_concurrency_limit(cls, value: object) -> int:
        try:
            numeric = int(value) if value is not None else 5
        except (TypeError, ValueError):
            numeric = 5
        return min(20, max(1, numeric))

    @field_validator("CACHE_TTL_SECONDS", mode="before")
    @classmethod
    def _clamp_cache_ttl_seconds(cls, value: object) -> int:
        try:
            numeric = int(value) if value is not None else 600
        except (TypeError, ValueError):
            numeric = 600
        return max(1, numeric)

    @field_validator("TURF_REVIEW_LIMIT", "TURF_PHOTO_LIMIT", mode="before")
    @classmethod
    def _clamp_result_limits(cls, value: object) -> int:
        try:
            numeric = int(value) if value is not None else 3
        except (TypeError, ValueError):
            numeric = 3
        return max(0, numeric)

    @field_validator("TURF_REVIEW_TEXT_MAX_LENGTH", mode="before")
    @classmethod
    def _clamp_review_text_max_length(cls, value: object) -> int:
        # 말줄임표("...") 3자를 담을 수 있어야 합니다.
        try:
            numeric = int(value) if value is not None else 240
        except (TypeError, ValueError):
            numeric = 240
        return max(4, numeric)


@lru_cache
def get_settings() -> Settings:
    """Settings 인스턴스를 반환한다. 최초 호출 시에만 생성되고 이후 캐싱된다."""
    return Settings()
