from __future__ import annotations

from datetime import date

import pytest

from mmcal.core.errors import InvalidInput
from mmcal.core.julian import date_to_jdn, gregorian_to_jd
from mmcal.core.lunar_date import (
    FIRST_WASO,
    LATE_TAGU,
    MoonPhase,
    day_in_month_from_fortnight,
    decompose,
    decompose_jdn,
    month_length_for,
    month_length_of,
    myanmar_to_jdn,
)
from mmcal.core.watat import YearType


def _span(start: date, end: date) -> range:
    return range(date_to_jdn(start), date_to_jdn(end))


def test_reference_2020_01_01():
    d = decompose(gregorian_to_jd(2020, 1, 1))
    assert d.jdn == 2458850
    assert d.myanmar_year == 1381
    assert d.month_index == 10
    assert d.day_in_month == 7
    assert d.fortnight_day == 7
    assert d.moon_phase == MoonPhase.WAXING
    assert d.year_type == YearType.COMMON


def test_reference_2023_08_01_second_waso_full_moon():
    d = decompose_jdn(date_to_jdn(date(2023, 8, 1)))
    assert (d.myanmar_year, d.month_index, d.day_in_month) == (1385, 4, 15)
    assert d.is_full_moon
    assert d.year_type == YearType.BIG_WATAT


def test_reference_2026_01_15_waning():
    d = decompose_jdn(date_to_jdn(date(2026, 1, 15)))
    assert (d.myanmar_year, d.month_index, d.day_in_month) == (1387, 10, 28)
    assert d.moon_phase == MoonPhase.WANING
    assert d.fortnight_day == 13
    assert d.month_length == 30


def test_any_instant_of_the_day_maps_the_same():
    jd = gregorian_to_jd(2020, 1, 1)
    assert decompose(jd) == decompose(jd + 0.25) == decompose(jd + 0.999)


def test_day_properties_over_decades():
    for jdn in _span(date(2000, 1, 1), date(2040, 1, 1)):
        d = decompose_jdn(jdn)
        assert 1 <= d.fortnight_day <= 15
        assert 1 <= d.day_in_month <= d.month_length
        assert d.is_full_moon == (d.day_in_month == 15)
        assert d.is_new_moon == (d.day_in_month == d.month_length)
        if d.moon_phase == MoonPhase.WAXING:
            assert d.day_in_month < 15
        if d.moon_phase == MoonPhase.WANING:
            assert 15 < d.day_in_month < d.month_length
        if d.month_index == FIRST_WASO:
            assert d.year_type != YearType.COMMON


def test_consecutive_days():
    prev = decompose_jdn(date_to_jdn(date(1960, 1, 1)))
    for jdn in _span(date(1960, 1, 2), date(2060, 1, 1)):
        d = decompose_jdn(jdn)
        if d.day_in_month == 1:
            assert prev.day_in_month == prev.month_length, jdn
        else:
            assert d.day_in_month == prev.day_in_month + 1, jdn
            # the month only continues across a New Year (Late Tagu/Kason -> Tagu/Kason)
            assert d.month_index % 12 == prev.month_index % 12 or d.month_index == prev.month_index
        assert d.myanmar_year in (prev.myanmar_year, prev.myanmar_year + 1)
        prev = d


def test_new_moon_is_last_waning_day():
    for jdn in _span(date(2019, 4, 1), date(2020, 4, 30)):
        d = decompose_jdn(jdn)
        if d.is_new_moon:
            nxt = decompose_jdn(jdn + 1)
            assert nxt.day_in_month == 1
            assert nxt.moon_phase == MoonPhase.WAXING


def test_late_months_appear_before_new_year():
    seen = set()
    for jdn in _span(date(2000, 1, 1), date(2030, 1, 1)):
        d = decompose_jdn(jdn)
        if d.is_late_month:
            seen.add(d.myanmar_year)
            nxt = decompose_jdn(jdn + 1)
            assert nxt.myanmar_year in (d.myanmar_year, d.myanmar_year + 1)
    assert seen


def test_round_trip():
    for jdn in _span(date(2015, 1, 1), date(2030, 1, 1)):
        d = decompose_jdn(jdn)
        assert myanmar_to_jdn(d.myanmar_year, d.month_index, d.day_in_month) == jdn


def test_month_length_of():
    assert month_length_of(1, YearType.COMMON) == 29
    assert month_length_of(2, YearType.COMMON) == 30
    assert month_length_of(3, YearType.LITTLE_WATAT) == 29
    assert month_length_of(3, YearType.BIG_WATAT) == 30
    assert month_length_of(FIRST_WASO, YearType.BIG_WATAT) == 30
    assert month_length_of(LATE_TAGU, YearType.COMMON) == 29


def test_month_length_for_rejects_first_waso_in_common_year():
    assert month_length_for(1385, FIRST_WASO) == 30
    with pytest.raises(InvalidInput):
        month_length_for(1381, FIRST_WASO)


@pytest.mark.parametrize(
    "phase, fd, mml, expected",
    [
        (MoonPhase.WAXING, 7, 30, 7),
        (MoonPhase.FULL_MOON, 0, 29, 15),
        (MoonPhase.WANING, 13, 30, 28),
        (MoonPhase.WANING, 13, 29, 28),
        (MoonPhase.WANING, 14, 29, None),
        (MoonPhase.NEW_MOON, 0, 29, 29),
        (MoonPhase.WAXING, 15, 30, None),
    ],
)
def test_day_in_month_from_fortnight(phase, fd, mml, expected):
    if expected is None:
        with pytest.raises(InvalidInput):
            day_in_month_from_fortnight(phase, fd, mml)
    else:
        assert day_in_month_from_fortnight(phase, fd, mml) == expected


@pytest.mark.parametrize(
    "args",
    [
        (1381, 15, 1),
        (1381, -1, 1),
        (1381, 1, 30),
        (1381, 2, 0),
        (1381, True, 1),
        (1200, 1, 1),
    ],
)
def test_myanmar_to_jdn_rejects(args):
    with pytest.raises(InvalidInput):
        myanmar_to_jdn(*args)


@pytest.mark.parametrize("d", [date(1900, 1, 1), date(1950, 1, 1), date(2700, 1, 1)])
def test_decompose_outside_era(d):
    with pytest.raises(InvalidInput):
        decompose_jdn(date_to_jdn(d))


def test_decompose_rejects_non_finite():
    with pytest.raises(InvalidInput):
        decompose(float("nan"))
