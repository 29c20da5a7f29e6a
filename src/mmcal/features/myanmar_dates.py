# src/mmcal/features/myanmar_dates.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from mmcal.core.config import DEFAULT_ERA_CONFIG, MyanmarEraConfig
from mmcal.core.errors import MyanmarCalendarError, UnknownMonthIndex
from mmcal.core.julian import gregorian_to_jd, jdn_to_date, parse_date_any
from mmcal.core.lunar_date import (
    MoonPhase,
    MyanmarDate,
    day_in_month_from_fortnight,
    decompose,
    month_length_for,
    myanmar_to_jdn,
)
from mmcal.core.watat import YearType, year_type_label
from mmcal.features.config import month_name_from_index, moon_phase_label


@dataclass(frozen=True)
class MyanmarDateRecord:
    """
    Public view of a Myanmar calendar day (names resolved).

    - day: day in month (1..30)
    - fortnight_day: day within the waxing/waning half (1..15)
    """
    myanmar_year: int
    month_index: int
    month_name: str
    day: int
    fortnight_day: int
    moon_phase: MoonPhase
    moon_phase_label: str
    is_watat: bool
    year_type: YearType

    def __str__(self) -> str:
        s = f"{self.myanmar_year} {self.month_name} {self.moon_phase_label}"
        if self.moon_phase in (MoonPhase.WAXING, MoonPhase.WANING):
            s += f" {self.fortnight_day}"
        return s

    def to_dict(self) -> Dict[str, Any]:
        return {
            "myanmar_year": int(self.myanmar_year),
            "month_index": int(self.month_index),
            "month_name": self.month_name,
            "day": int(self.day),
            "fortnight_day": int(self.fortnight_day),
            "moon_phase": self.moon_phase_label,
            "is_watat": bool(self.is_watat),
            "year_type": year_type_label(self.year_type),
        }


@dataclass(frozen=True)
class ConversionResult:
    """Success-or-error value returned by try_convert()."""
    record: Optional[MyanmarDateRecord] = None
    error: Optional[MyanmarCalendarError] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def to_public_record(d: MyanmarDate) -> MyanmarDateRecord:
    """Resolve names for a decomposed day. UnknownMonthIndex propagates."""
    return MyanmarDateRecord(
        myanmar_year=d.myanmar_year,
        month_index=d.month_index,
        month_name=month_name_from_index(d.month_index, d.is_watat),
        day=d.day_in_month,
        fortnight_day=d.fortnight_day,
        moon_phase=d.moon_phase,
        moon_phase_label=moon_phase_label(d.moon_phase),
        is_watat=d.is_watat,
        year_type=d.year_type,
    )


def convert(
    year: int,
    month: int,
    day: int,
    *,
    config: MyanmarEraConfig = DEFAULT_ERA_CONFIG,
) -> MyanmarDateRecord:
    """
    Gregorian (year, month, day) -> Myanmar calendar day.

    Raises InvalidInput / YearClassificationUnresolved for dates the
    calendar cannot represent.
    """
    jd = gregorian_to_jd(year, month, day)
    return to_public_record(decompose(jd, config))


def convert_date(
    d: Union[str, date],
    *,
    config: MyanmarEraConfig = DEFAULT_ERA_CONFIG,
) -> MyanmarDateRecord:
    g = parse_date_any(d)
    return convert(g.year, g.month, g.day, config=config)


def try_convert(
    year: int,
    month: int,
    day: int,
    *,
    config: MyanmarEraConfig = DEFAULT_ERA_CONFIG,
) -> ConversionResult:
    """
    Like convert(), but input and classification failures come back as a value.

    UnknownMonthIndex is an internal bug and is not converted.
    """
    try:
        return ConversionResult(record=convert(year, month, day, config=config))
    except UnknownMonthIndex:
        raise
    except MyanmarCalendarError as e:
        return ConversionResult(error=e)


def convert_between(
    start: Union[str, date],
    end: Union[str, date],
    *,
    config: MyanmarEraConfig = DEFAULT_ERA_CONFIG,
) -> List[Tuple[date, MyanmarDateRecord]]:
    """Convert every day in [start, end)."""
    s = parse_date_any(start)
    e = parse_date_any(end)
    if not (s < e):
        return []

    out: List[Tuple[date, MyanmarDateRecord]] = []
    cur = s
    while cur < e:
        out.append((cur, convert(cur.year, cur.month, cur.day, config=config)))
        cur += timedelta(days=1)
    return out


def myanmar_to_gregorian(
    myanmar_year: int,
    month_index: int,
    day: int,
    *,
    moon_phase: Optional[MoonPhase] = None,
    config: MyanmarEraConfig = DEFAULT_ERA_CONFIG,
) -> date:
    """
    Myanmar day -> Gregorian date.

    Without moon_phase, `day` is the day in month (1..30). With moon_phase,
    `day` is the fortnight day (ignored for full moon and new moon).
    """
    if moon_phase is not None:
        mml = month_length_for(myanmar_year, month_index, config)
        day = day_in_month_from_fortnight(MoonPhase(moon_phase), day, mml)
    return jdn_to_date(myanmar_to_jdn(myanmar_year, month_index, day, config))


def full_moon_days_between(
    start: Union[str, date],
    end: Union[str, date],
    *,
    config: MyanmarEraConfig = DEFAULT_ERA_CONFIG,
) -> Iterable[Tuple[date, MyanmarDateRecord]]:
    """Calendar full-moon days in [start, end)."""
    for g, rec in convert_between(start, end, config=config):
        if rec.moon_phase == MoonPhase.FULL_MOON:
            yield g, rec

