from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from mmcal.api import public
from mmcal.api.app import app
from mmcal.api.public import get_myanmar_day, get_myanmar_range, get_myanmar_year
from mmcal.core.errors import InvalidInput, UnknownMonthIndex


def _client(**kwargs) -> TestClient:
    return TestClient(app, **kwargs)


def test_day_endpoint():
    r = _client().get("/api/v1/myanmar/day", params={"date": "2020-01-01"})
    assert r.status_code == 200
    body = r.json()
    assert body["date"] == "2020-01-01"
    assert body["jdn"] == 2458850
    assert body["error"] is None
    assert body["myanmar"]["month_name"] == "Pyatho"
    assert body["myanmar"]["day"] == 7
    assert body["myanmar"]["moon_phase"] == "Waxing"


def test_day_endpoint_outside_era_is_not_an_http_error():
    r = _client().get("/api/v1/myanmar/day", params={"date": "1900-01-01"})
    assert r.status_code == 200
    body = r.json()
    assert body["myanmar"] is None
    assert "outside supported range" in body["error"]


def test_day_endpoint_bad_date():
    r = _client().get("/api/v1/myanmar/day", params={"date": "2020-02-30"})
    assert r.status_code == 422


def test_day_endpoint_timing_flag():
    r = _client().get("/api/v1/myanmar/day", params={"date": "2023-08-01", "timing": "true"})
    assert r.status_code == 200
    assert r.json()["myanmar"]["month_name"] == "Second Waso"


def test_range_endpoint():
    r = _client().get("/api/v1/myanmar/range", params={"start": "2020-01-01", "end": "2020-01-03"})
    assert r.status_code == 200
    days = r.json()["days"]
    assert [d["date"] for d in days] == ["2020-01-01", "2020-01-02", "2020-01-03"]
    assert [d["myanmar"]["day"] for d in days] == [7, 8, 9]


def test_range_endpoint_rejects():
    c = _client()
    assert c.get("/api/v1/myanmar/range", params={"start": "2020-01-03", "end": "2020-01-01"}).status_code == 422
    r = c.get("/api/v1/myanmar/range", params={"start": "2020-01-01", "end": "2020-01-03", "limit_days": 2})
    assert r.status_code == 422


def test_range_limit_from_env(monkeypatch):
    monkeypatch.setenv("NAYTAK_MAX_RANGE_DAYS", "2")
    r = _client().get("/api/v1/myanmar/range", params={"start": "2020-01-01", "end": "2020-01-03"})
    assert r.status_code == 422

    monkeypatch.setenv("NAYTAK_MAX_RANGE_DAYS", "junk")
    r = _client().get("/api/v1/myanmar/range", params={"start": "2020-01-01", "end": "2020-01-03"})
    assert r.status_code == 200


def test_year_endpoint():
    c = _client()
    body = c.get("/api/v1/myanmar/year/1385").json()
    assert body["year_type"] == "big watat"
    assert body["year_length"] == 385
    assert body["tagu_first_day"] == "2023-03-21"
    assert body["second_waso_full_moon"] == "2023-08-01"

    body = c.get("/api/v1/myanmar/year/1381").json()
    assert body["year_type"] == "common"
    assert body["is_watat"] is False
    assert body["tagu_first_day"] == "2019-04-05"
    assert body["second_waso_full_moon"] is None

    assert c.get("/api/v1/myanmar/year/1312").status_code == 422


def test_unknown_month_index_is_a_server_error(monkeypatch):
    def _broken(*args, **kwargs):
        raise UnknownMonthIndex(99, "forced")

    monkeypatch.setattr(public, "try_convert", _broken)
    r = _client(raise_server_exceptions=False).get("/api/v1/myanmar/day", params={"date": "2020-01-01"})
    assert r.status_code == 500


def test_function_style_twins():
    day = get_myanmar_day("2026-01-15")
    assert day["myanmar"]["month_name"] == "Pyatho"
    assert day["myanmar"]["fortnight_day"] == 13

    rng = get_myanmar_range("2019-11-10", "2019-11-12")
    assert rng["range"] == {"start": "2019-11-10", "end": "2019-11-12"}
    assert [d["myanmar"]["moon_phase"] for d in rng["days"]] == ["Waxing", "Full Moon", "Waning"]

    with pytest.raises(InvalidInput):
        get_myanmar_range("2020-01-02", "2020-01-01")

    assert get_myanmar_year(1377)["year_type"] == "big watat"
