"""uvicorn 로그 포맷을 애플리케이션 전체에 적용하는 dictConfig 구성."""

from __future__ import annotations

import copy
import logging
import logging.config
import os
from typing import Any

from uvicorn.config import LOGGING_CONFIG as UVICORN_LOGGING_CONFIG

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
_FALLBACK_LEVEL = "INFO"


def _level_name(level: str | None) -> str:
    # 잘못된 LOG_LEVEL은 dictConfig를 실패시키므로 INFO로 대체합니다.
    name = (level or os.getenv("LOG_LEVEL") or _FALLBACK_LEVEL).strip().upper()
    return name if isinstance(logging.getLevelName(name), int) else _FALLBACK_LEVEL


def build_logging_config(level: str | None = None) -> dict[str, Any]:
    """uvicorn 핸들러를 루트 로거에도 붙인 설정 사본을 반환합니다.

    `turf_finder` 하위 로거는 `get_logger`가 직접 핸들러를 붙이므로 여기서는
    루트와 uvicorn 로거의 레벨만 맞춥니다.
    """
    level_name = _level_name(level)
    config = copy.deepcopy(UVICORN_LOGGING_CONFIG)
    config["disable_existing_loggers"] = False
    config["root"] = {"handlers": ["default"], "level": level_name}
    config["loggers"].update(
        {name: {**config["loggers"].get(name, {}), "level": level_name} for name in _UVICORN_LOGGERS}
    )
    return config


def configure_logging(level: str | None = None) -> None:
    logging.config.dictConfig(build_logging_config(level))
