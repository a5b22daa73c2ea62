"""애플리케이션 준비성(readiness) 체크 유틸."""

from __future__ import annotations

import asyncio
import socket

from turf_finder.core.config import Settings, get_settings
from turf_finder.core.timeout_policy import TimeoutPolicy, get_timeout_policy

ReadinessCheck = dict[str, str | bool]

_PROVIDER_HOSTS = {
    "google_maps": ("maps.googleapis.com", "Google Maps API"),
    "google_places": ("places.googleapis.com", "Google Places API"),
}


def _ok(detail: str, *, required: bool = True) -> ReadinessCheck:
    return {"status": "ok", "ok": True, "required": required, "detail": detail}


def _fail(detail: str, *, required: bool = True) -> ReadinessCheck:
    return {"status": "fail", "ok": False, "required": required, "detail": detail}


async def _check_tcp_connectivity(host: str, port: int, timeout_seconds: int, label: str) -> ReadinessCheck:
    def _connect() -> None:
        with socket.create_connection((host, port), timeout=timeout_seconds):
            return None

    try:
        await asyncio.to_thread(_connect)
        return _ok(f"{label} 연결 가능 ({host}:{port})")
    except OSError as exc:
        return _fail(f"{label} 연결 실패 ({host}:{port}): {exc}")


def _check_api_key(settings: Settings) -> ReadinessCheck:
    if not settings.GOOGLE_MAPS_API_KEY:
        return _fail("GOOGLE_MAPS_API_KEY가 설정되지 않았습니다.")
    return _ok("GOOGLE_MAPS_API_KEY 설정 확인 완료")


async def collect_readiness_status() -> dict[str, object]:
    """API 키와 Google 엔드포인트 연결 상태를 점검합니다."""
    settings = get_settings()
    timeout_policy: TimeoutPolicy = get_timeout_policy(settings)

    connectivity = await asyncio.gather(
        *[
            _check_tcp_connectivity(
                host=host,
                port=443,
                timeout_seconds=timeout_policy.external_api_timeout_seconds,
                label=label,
            )
            for host, label in _PROVIDER_HOSTS.values()
        ]
    )

    checks: dict[str, ReadinessCheck] = {"api_key": _check_api_key(settings)}
    checks.update(zip(_PROVIDER_HOSTS.keys(), connectivity))
    required_checks_ok = all(bool(check["ok"]) for check in checks.values() if bool(check.get("required", True)))

    return {
        "status": "ready" if required_checks_ok else "not_ready",
        "checks": checks,
    }
