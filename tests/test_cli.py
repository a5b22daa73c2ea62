"""CLI 동작 테스트. Google 호출은 Mock 클라이언트로 대체한다."""

from __future__ import annotations

import json

from tests.mocks.mock_places_service import MockMapsClient, make_place
from turf_finder import cli
from turf_finder.core.config import get_settings
from turf_finder.schemas.place import PlaceDetail
from turf_finder.services.turf_finder_service import NO_RESULTS_MESSAGE


def _set_required_env(monkeypatch, **overrides: str) -> None:
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "test-key")
    for key, value in overrides.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()


def _install_client(monkeypatch, client: MockMapsClient) -> None:
    monkeypatch.setattr(cli.GoogleMapsClient, "from_settings", classmethod(lambda cls: client))


def _sample_client() -> MockMapsClient:
    return MockMapsClient(
        text_results={
            "turf": [
                make_place("p1", "Kickoff Arena", lat=12.9300, lng=77.6446, rating=4.2),
                make_place("p2", "Goal Line Turf", lat=12.9121, lng=77.6446),
            ]
        },
        details={
            "p1": PlaceDetail.model_validate(
                {
                    "id": "p1",
                    "nationalPhoneNumber": "080 1234 5678",
                    "reviews": [
                        {
                            "rating": 5,
                            "relativePublishTimeDescription": "a week ago",
                            "text": {"text": "Good lighting and a well kept turf for night games."},
                            "authorAttribution": {"displayName": "Ravi"},
                        }
                    ],
                }
            )
        },
    )


def test_cli_prints_results_and_writes_json(monkeypatch, tmp_path, capsys) -> None:
    _set_required_env(monkeypatch)
    _install_client(monkeypatch, _sample_client())
    output_path = tmp_path / "results.json"

    exit_code = cli.main(["--lat", "12.9121", "--lng", "77.6446", "--radius-km", "3", "--output", str(output_path)])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "Goal Line Turf" in out
    assert "080 1234 5678" in out
    assert "📊 Summary:" in out
    saved = json.loads(output_path.read_text(encoding="utf-8"))
    assert [result["place_id"] for result in saved["results"]] == ["p2", "p1"]


def test_cli_quiet_mode_prints_one_line_per_result(monkeypatch, capsys) -> None:
    _set_required_env(monkeypatch)
    _install_client(monkeypatch, _sample_client())

    exit_code = cli.main(["--lat", "12.9121", "--lng", "77.6446", "--quiet", "--no-output"])

    assert exit_code == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines == [
        "1. Goal Line Turf (0.0 km) - No phone",
        "2. Kickoff Arena (1.99 km) - 080 1234 5678",
    ]


def test_cli_reports_error_with_tips(monkeypatch, capsys) -> None:
    _set_required_env(monkeypatch)
    _install_client(monkeypatch, MockMapsClient())

    exit_code = cli.main(["--lat", "12.9121", "--no-output"])

    assert exit_code == 1
    err = capsys.readouterr().err
    assert "lng is required when lat is specified" in err
    assert "💡 Tips:" in err
    assert "Traceback" not in err


def test_cli_quiet_mode_prints_message_without_results(monkeypatch, capsys) -> None:
    _set_required_env(monkeypatch)
    _install_client(monkeypatch, MockMapsClient())

    exit_code = cli.main(["--lat", "12.9121", "--lng", "77.6446", "--quiet"])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == NO_RESULTS_MESSAGE


def test_cli_reports_unwritable_output_path(monkeypatch, tmp_path, capsys) -> None:
    _set_required_env(monkeypatch)
    _install_client(monkeypatch, _sample_client())

    exit_code = cli.main(["--lat", "12.9121", "--lng", "77.6446", "--quiet", "--output", str(tmp_path)])

    assert exit_code == 1
    err = capsys.readouterr().err
    assert "❌ Error:" in err
    assert "💡 Tips:" in err
    assert "Traceback" not in err
