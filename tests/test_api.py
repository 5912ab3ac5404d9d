from __future__ import annotations

from pathlib import Path
from typing import Iterable

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from fastapi.testclient import TestClient

from praytimes import parse_time


@pytest.fixture(scope="module")
def api_client() -> Iterable[TestClient]:
    from praytimes_api import app

    with TestClient(app) as client:
        yield client


def _times(client: TestClient, **params) -> dict:
    query = {"lat": 40.7, "lon": -74.0, "date": "2024-03-20", "utc_offset": -5}
    query.update(params)
    response = client.get("/times", params=query)
    assert response.status_code == 200, response.text
    return response.json()


def test_health_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert "ISNA" in payload["methods"]


def test_methods_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/methods")
    assert response.status_code == 200
    methods = {item["id"]: item for item in response.json()}
    assert methods["Makkah"]["isha_minutes"] == 90.0
    assert methods["Makkah"]["isha_angle"] is None
    assert methods["Jafari"]["midnight_mode"] == "Jafari"


def test_times_endpoint(api_client: TestClient) -> None:
    payload = _times(api_client, method="ISNA")
    assert payload["ok"] is True
    assert payload["method"] == "ISNA"
    assert payload["utc_offset"] == -5.0
    assert list(payload["times"]) == ["fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha"]
    assert payload["unavailable"] == []
    times = {name: parse_time(value) for name, value in payload["times"].items()}
    assert times["fajr"] < times["sunrise"] < times["dhuhr"] < times["asr"]
    assert times["asr"] < times["maghrib"] < times["isha"]


def test_hanafi_query(api_client: TestClient) -> None:
    standard = _times(api_client, method="MWL")
    hanafi = _times(api_client, method="MWL", asr="Hanafi")
    assert hanafi["asr_factor"] == 2.0
    assert parse_time(hanafi["times"]["asr"]) > parse_time(standard["times"]["asr"])


def test_twelve_hour_query(api_client: TestClient) -> None:
    payload = _times(api_client, time_format="12h")
    assert payload["times"]["isha"].endswith(" pm")
    assert payload["times"]["fajr"].endswith(" am")


def test_high_latitude_query(api_client: TestClient) -> None:
    params = {"lat": 55.0, "lon": 0.0, "date": "2024-06-21", "utc_offset": 0, "method": "ISNA"}
    plain = _times(api_client, **params)
    assert plain["unavailable"] == ["fajr", "isha"]
    assert plain["times"]["fajr"] == "-----"
    adjusted = _times(api_client, high_lats="NightMiddle", **params)
    assert adjusted["unavailable"] == []
    assert adjusted["high_latitude_rule"] == "NightMiddle"


def test_auto_offset(api_client: TestClient) -> None:
    payload = _times(api_client, utc_offset="auto")
    assert -24.0 <= payload["utc_offset"] <= 24.0


def test_unknown_method(api_client: TestClient) -> None:
    response = api_client.get(
        "/times", params={"lat": 10, "lon": 10, "date": "2024-01-01", "method": "Nowhere"}
    )
    assert response.status_code == 400
    payload = response.json()
    assert payload["code"] == "unknown_method"
    assert payload["ok"] is False


def test_conflicting_override(api_client: TestClient) -> None:
    response = api_client.get(
        "/times",
        params={
            "lat": 10,
            "lon": 10,
            "date": "2024-01-01",
            "isha_angle": 17,
            "isha_minutes": 90,
        },
    )
    assert response.status_code == 400
    assert response.json()["code"] == "configuration_conflict"


@pytest.mark.parametrize("utc_offset", ["abc", "30", "-24.5"])
def test_bad_utc_offset_is_rejected(api_client: TestClient, utc_offset: str) -> None:
    response = api_client.get(
        "/times",
        params={"lat": 21.42, "lon": 39.83, "date": "2024-05-01", "utc_offset": utc_offset},
    )
    assert response.status_code == 422
    payload = response.json()
    assert payload == {"ok": False, "code": "validation_error", "error": payload["error"]}
    assert "utc_offset" in payload["error"]
