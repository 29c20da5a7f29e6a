# src/mmcal/core/julian.py
from __future__ import annotations

import math
from datetime import date, timedelta
from numbers import Integral, Real

from .errors import InvalidInput

# JDN of 0001-01-01 (proleptic Gregorian) minus one, i.e. date.toordinal() offset.
_ORDINAL_JDN_OFFSET = 1721425


def _require_int(value: object, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidInput(f"{name} must be an integer (got bool)")
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, Real):
        f = float(value)
        if not math.isfinite(f):
            raise InvalidInput(f"{name} must be finite (got {value!r})")
        if f.is_integer():
            return int(f)
    raise InvalidInput(f"{name} must be an integer (got {value!r})")


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month: int) -> int:
    if month == 2:
        return 29 if is_leap_year(year) else 28
    return 30 if month in (4, 6, 9, 11) else 31


def validate_gregorian(year: object, month: object, day: object) -> tuple[int, int, int]:
    """
    Validate a proleptic Gregorian (year, month, day) triple.

    Returns
    -------
    tuple[int, int, int]
        The normalized integer fields.

    Raises
    ------
    InvalidInput
        If a field is not integral/finite or is outside its calendar domain.
    """
    y = _require_int(year, "year")
    m = _require_int(month, "month")
    d = _require_int(day, "day")
    if not (1 <= m <= 12):
        raise InvalidInput(f"month out of range 1..12: {m}")
    dim = days_in_month(y, m)
    if not (1 <= d <= dim):
        raise InvalidInput(f"day out of range 1..{dim} for {y:04d}-{m:02d}: {d}")
    return y, m, d


def gregorian_to_jd(year: int, month: int, day: int) -> float:
    """
    Julian date at 00:00 of a proleptic Gregorian date.

    January and February are counted as months 13 and 14 of the previous
    year so the leap day falls at the end of the computational year.
    The result is .5-aligned (2020-01-01 -> 2458849.5).
    """
    y, m, d = validate_gregorian(year, month, day)
    if m <= 2:
        y -= 1
        m += 12

    a = y // 100
    b = 2 - a + a // 4
    return math.floor(365.25 * (y + 4716)) + math.floor(30.6001 * (m + 1)) + d + b - 1524.5


def date_to_jd(d: date) -> float:
    return gregorian_to_jd(d.year, d.month, d.day)


def jd_to_jdn(jd: float) -> int:
    """Julian day number (noon-based integer day) containing the Julian date."""
    if isinstance(jd, bool) or not isinstance(jd, Real):
        raise InvalidInput(f"julian date must be a real number (got {jd!r})")
    f = float(jd)
    if not math.isfinite(f):
        raise InvalidInput(f"julian date must be finite (got {jd!r})")
    return math.floor(f + 0.5)


def jdn_to_date(jdn: int) -> date:
    """Inverse of the day-number conversion for dates representable by datetime.date."""
    n = _require_int(jdn, "jdn")
    ordinal = n - _ORDINAL_JDN_OFFSET
    if not (date.min.toordinal() <= ordinal <= date.max.toordinal()):
        raise InvalidInput(f"julian day number outside datetime.date range: {n}")
    return date.fromordinal(ordinal)


def date_to_jdn(d: date) -> int:
    return d.toordinal() + _ORDINAL_JDN_OFFSET


def parse_date_any(x: str | date) -> date:
    if isinstance(x, date):
        return x
    try:
        return date.fromisoformat(str(x).strip())
    except ValueError as e:
        raise InvalidInput(f"Invalid date format: {x} (expected YYYY-MM-DD)") from e


def iter_dates(start: date, end: date):
    """Yield every date in [start, end)."""
    cur = start
    while cur < end:
        yield cur
        cur = cur + timedelta(days=1)
