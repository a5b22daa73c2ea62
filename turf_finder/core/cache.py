"""인메모리 TTL 캐시.

외부 API 응답을 짧은 시간 재사용하기 위한 단순 캐시입니다. 만료된 항목은 조회
시점에 지연 삭제되며, `prune()`을 호출해야만 일괄 정리됩니다.
"""

from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, TypeVar

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 10 * 60


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    data: T
    expires_at: float


@dataclass(frozen=True, slots=True)
class CacheStats:
    size: int
    ttl_seconds: float


def _normalize(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): _normalize(value[key]) for key in sorted(value, key=str)}
    if isinstance(value, (list, tuple)):
        return [_normalize(item) for item in value]
    return value


class TtlCache(Generic[T]):
    """만료 시각이 있는 key → value 저장소."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive.")
        self._ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def generate_key(params: Mapping[str, Any]) -> str:
        """쿼리 파라미터로 캐시 키를 생성합니다. 키 순서는 결과에 영향을 주지 않습니다."""
        return "&".join(
            f"{key}={json.dumps(_normalize(params[key]), sort_keys=True, separators=(',', ':'), default=str)}"
            for key in sorted(params)
        )

    def get(self, key: str) -> T | None:
        """만료되지 않은 값을 반환합니다. 만료된 항목은 이 시점에 삭제됩니다."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() > entry.expires_at:
                del self._entries[key]
                return None
            return entry.data

    def set(self, key: str, data: T) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(data=data, expires_at=self._clock() + self._ttl_seconds)

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def prune(self) -> int:
        """만료된 항목을 모두 제거하고 제거한 개수를 반환합니다."""
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(size=len(self._entries), ttl_seconds=self._ttl_seconds)
