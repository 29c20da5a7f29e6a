from __future__ import annotations

from datetime import date

import pytest

from mmcal.core.errors import InvalidInput
from mmcal.core.julian import (
    date_to_jdn,
    gregorian_to_jd,
    iter_dates,
    jd_to_jdn,
    jdn_to_date,
    parse_date_any,
    validate_gregorian,
)


@pytest.mark.parametrize(
    "ymd, jd",
    [
        ((2000, 1, 1), 2451544.5),
        ((2020, 1, 1), 2458849.5),
        ((1957, 10, 4), 2436115.5),
        ((2024, 2, 29), 2460369.5),
    ],
)
def test_gregorian_to_jd_reference(ymd, jd):
    assert gregorian_to_jd(*ymd) == jd


def test_jd_to_jdn_whole_civil_day():
    # 00:00 and 11:59 of 2020-01-01 are the same day number
    assert jd_to_jdn(2458849.5) == 2458850
    assert jd_to_jdn(2458850.49) == 2458850
    assert jd_to_jdn(2458850.5) == 2458851


def test_jdn_matches_date_ordinal():
    for d in (date(1952, 1, 1), date(2020, 1, 1), date(2100, 12, 31)):
        assert jd_to_jdn(gregorian_to_jd(d.year, d.month, d.day)) == date_to_jdn(d)
        assert jdn_to_date(date_to_jdn(d)) == d


@pytest.mark.parametrize(
    "ymd",
    [
        (2021, 2, 29),
        (2020, 13, 1),
        (2020, 0, 1),
        (2020, 4, 31),
        (2020, 1, 0),
        (True, 1, 1),
        (2020, 1.5, 1),
        (float("nan"), 1, 1),
        ("2020", 1, 1),
    ],
)
def test_validate_gregorian_rejects(ymd):
    with pytest.raises(InvalidInput):
        validate_gregorian(*ymd)


def test_validate_gregorian_normalizes_integral_floats():
    assert validate_gregorian(2020.0, 2, 29) == (2020, 2, 29)
    assert validate_gregorian(1900, 2, 28) == (1900, 2, 28)
    with pytest.raises(InvalidInput):
        validate_gregorian(1900, 2, 29)


@pytest.mark.parametrize("bad", [float("inf"), float("-inf"), float("nan"), None, "2458849.5"])
def test_jd_to_jdn_rejects_non_finite(bad):
    with pytest.raises(InvalidInput):
        jd_to_jdn(bad)


def test_invalid_input_is_value_error():
    with pytest.raises(ValueError):
        gregorian_to_jd(2021, 2, 29)


def test_parse_date_any():
    assert parse_date_any("2020-01-01") == date(2020, 1, 1)
    assert parse_date_any(" 2020-01-01 ") == date(2020, 1, 1)
    assert parse_date_any(date(2020, 1, 1)) == date(2020, 1, 1)
    with pytest.raises(InvalidInput):
        parse_date_any("2020/01/01")


def test_iter_dates_half_open():
    days = list(iter_dates(date(2020, 2, 27), date(2020, 3, 2)))
    assert days == [date(2020, 2, 27), date(2020, 2, 28), date(2020, 2, 29), date(2020, 3, 1)]
    assert list(iter_dates(date(2020, 1, 1), date(2020, 1, 1))) == []
