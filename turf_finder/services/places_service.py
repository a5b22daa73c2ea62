"""Places 서비스 추상 프로토콜 정의."""

from abc import ABC, abstractmethod

from turf_finder.schemas.place import PlaceDetail, PlaceSummary


class PlacesServiceProtocol(ABC):
    """터프 검색 파이프라인이 의존하는 Places 호출 인터페이스."""

    @abstractmethod
    async def nearby_search(
        self,
        lat: float,
        lng: float,
        radius_m: float,
        included_types: list[str] | None = None,
        max_result_count: int = 20,
    ) -> list[PlaceSummary]:
        """유형 코드로 제한한 원형 영역 내 장소를 검색합니다.

        Raises:
            RemoteApiError: 제공자가 성공이 아닌 응답을 반환한 경우
        """
        raise NotImplementedError

    @abstractmethod
    async def text_search(
        self,
        text_query: str,
        lat: float,
        lng: float,
        radius_m: float,
        max_result_count: int = 20,
    ) -> list[PlaceSummary]:
        """자유 텍스트로 원형 영역 내 장소를 검색합니다.

        Raises:
            RemoteApiError: 제공자가 성공이 아닌 응답을 반환한 경우
        """
        raise NotImplementedError

    @abstractmethod
    async def get_place_details(self, place_id: str) -> PlaceDetail | None:
        """장소 상세 정보를 조회합니다. 실패하면 예외 대신 None을 반환합니다."""
        raise NotImplementedError
