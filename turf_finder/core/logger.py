"""표준화된 로거 모듈.

프로젝트 전체에서 일관된 로깅 형식을 제공합니다. 로그 레벨은 `LOG_LEVEL`
환경 변수로 조정하며, 기본값은 INFO입니다.
"""

import logging
import os
import sys

_LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level() -> int:
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """표준화된 로거를 반환합니다.

    Args:
        name: 로거 이름 (일반적으로 __name__ 사용).

    Returns:
        stdout 핸들러가 연결된 로거 인스턴스.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        level = _resolve_level()
        logger.setLevel(level)

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
