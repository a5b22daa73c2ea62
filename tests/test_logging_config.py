"""로깅 구성 테스트."""

from turf_finder.core.logger import get_logger
from turf_finder.core.logging_config import build_logging_config


def test_build_logging_config_sets_root_and_uvicorn_levels() -> None:
    config = build_logging_config("debug")

    assert config["disable_existing_loggers"] is False
    assert config["root"] == {"handlers": ["default"], "level": "DEBUG"}
    assert config["loggers"]["uvicorn.access"]["level"] == "DEBUG"


def test_build_logging_config_falls_back_on_unknown_level(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    assert build_logging_config()["root"]["level"] == "INFO"


def test_get_logger_attaches_single_handler() -> None:
    first = get_logger("turf_finder.tests.logger")
    second = get_logger("turf_finder.tests.logger")

    assert first is second
    assert len(first.handlers) == 1
    assert first.propagate is False
