"""FastAPI 애플리케이션 진입점."""

from __future__ import annotations

import asyncio

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.cors import CORSMiddleware

from turf_finder.api import turfs
from turf_finder.core.config import get_settings, split_csv
from turf_finder.core.exceptions import (
    REMEDIATION_TIPS,
    GeocodingError,
    RemoteApiError,
    TurfFinderError,
    ValidationError,
)
from turf_finder.core.logger import get_logger
from turf_finder.core.logging_config import configure_logging
from turf_finder.core.timeout_policy import get_timeout_policy

configure_logging()
logger = get_logger(__name__)
settings = get_settings()
timeout_policy = get_timeout_policy(settings)


def _configure_cors(app_: FastAPI) -> None:
    origins = split_csv(settings.CORS_ALLOW_ORIGINS)
    if not origins:
        return

    allow_methods = split_csv(settings.CORS_ALLOW_METHODS) or ["GET"]
    allow_headers = split_csv(settings.CORS_ALLOW_HEADERS) or ["Content-Type"]
    allow_credentials = settings.CORS_ALLOW_CREDENTIALS

    if "*" in origins and allow_credentials:
        logger.warning(
            "CORS_ALLOW_ORIGINS에 '*'와 CORS_ALLOW_CREDENTIALS=true가 함께 설정되어 "
            "allow_credentials를 false로 강제합니다."
        )
        allow_credentials = False

    app_.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=allow_methods,
        allow_headers=allow_headers,
    )


def _status_code_for(exc: TurfFinderError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, GeocodingError):
        return 404 if exc.no_results else 502
    if isinstance(exc, RemoteApiError):
        return 502
    return 500


app = FastAPI(title="Turf Finder", version="1.0.0")

_configure_cors(app)
app.include_router(turfs.router)


@app.middleware("http")
async def enforce_request_timeout(request: Request, call_next) -> Response:
    """요청 전체에 데드라인을 적용합니다. 초과 시 진행 중인 하위 작업은 취소됩니다."""
    try:
        return await asyncio.wait_for(call_next(request), timeout=timeout_policy.request_timeout_seconds)
    except asyncio.TimeoutError:
        logger.warning(
            "Request timed out: method=%s path=%s timeout=%ss",
            request.method,
            request.url.path,
            timeout_policy.request_timeout_seconds,
        )
        return JSONResponse(status_code=504, content={"detail": "요청 처리 시간이 초과되었습니다."})


@app.middleware("http")
async def add_security_headers(request: Request, call_next) -> Response:
    """기본 보안 헤더를 응답에 추가합니다."""
    response = await call_next(request)
    if not settings.SECURITY_HEADERS_ENABLED:
        return response

    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    response.headers.setdefault("Cache-Control", "no-store")
    return response


@app.exception_handler(TurfFinderError)
async def turf_finder_exception_handler(request: Request, exc: TurfFinderError) -> JSONResponse:
    """도메인 예외를 사용자 메시지와 조치 안내가 담긴 응답으로 변환합니다."""
    status_code = _status_code_for(exc)
    log = logger.warning if status_code < 500 else logger.error
    log("Request failed on %s %s: code=%s error=%s", request.method, request.url.path, exc.code, exc)

    content: dict[str, object] = {"detail": exc.message, "code": exc.code}
    if not isinstance(exc, ValidationError):
        content["tips"] = list(REMEDIATION_TIPS)
    if settings.EXPOSE_INTERNAL_ERRORS and exc.details is not None:
        content["details"] = exc.details if isinstance(exc.details, (dict, list, str)) else str(exc.details)
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """예상하지 못한 예외를 표준 형식으로 처리합니다."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    message = str(exc) if settings.EXPOSE_INTERNAL_ERRORS else "내부 서버 오류가 발생했습니다."
    return JSONResponse(status_code=500, content={"detail": message})


@app.get("/")
def health_check() -> dict:
    """헬스 체크 엔드포인트."""
    return {"status": "ok", "message": "Turf Finder Server is running"}
