# src/mmcal/core/lunar_date.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import IntEnum

from .config import DEFAULT_ERA_CONFIG, MyanmarEraConfig
from .errors import InvalidInput, UnknownMonthIndex
from .julian import jd_to_jdn
from .watat import YEAR_LENGTH_BY_TYPE, MyanmarYearInfo, YearType, classify_year

log = logging.getLogger(__name__)

# Month indices (see features/config.py for the names).
FIRST_WASO = 0
TAGU = 1
NAYON = 3
WASO = 4
LATE_TAGU = 13
LATE_KASON = 14
MONTH_INDEX_MIN = FIRST_WASO
MONTH_INDEX_MAX = LATE_KASON

FORTNIGHT_DAYS = 15


class MoonPhase(IntEnum):
    WAXING = 0
    FULL_MOON = 1
    WANING = 2
    NEW_MOON = 3


@dataclass(frozen=True)
class MyanmarDate:
    """
    A day of the Myanmar lunar calendar.

    - month_index: 0..14 (0 = First Waso, 1 = Tagu, ..., 12 = Tabaung,
      13/14 = Late Tagu/Late Kason at the tail of the year)
    - day_in_month: 1..30
    - fortnight_day: 1..15 within the waxing or waning half
    """
    jdn: int
    myanmar_year: int
    month_index: int
    day_in_month: int
    fortnight_day: int
    moon_phase: MoonPhase
    month_length: int
    year_type: YearType

    @property
    def is_watat(self) -> bool:
        return self.year_type != YearType.COMMON

    @property
    def is_full_moon(self) -> bool:
        return self.moon_phase == MoonPhase.FULL_MOON

    @property
    def is_new_moon(self) -> bool:
        return self.moon_phase == MoonPhase.NEW_MOON

    @property
    def is_late_month(self) -> bool:
        return self.month_index >= LATE_TAGU


def month_length_of(month_index: int, year_type: YearType) -> int:
    """Odd months have 29 days, even months 30; Nayon gains a day in a big watat year."""
    length = 30 - month_index % 2
    if month_index == NAYON and year_type == YearType.BIG_WATAT:
        length += 1
    return length


def moon_phase_of(day_in_month: int, month_length: int) -> MoonPhase:
    # 1..14 waxing, 15 full moon, 16.. waning, last day new moon
    md = day_in_month
    return MoonPhase((md + 1) // 16 + md // 16 + md // month_length)


def fortnight_day_of(day_in_month: int) -> int:
    return day_in_month - FORTNIGHT_DAYS * (day_in_month // 16)


def myanmar_year_of_jdn(jdn: int, config: MyanmarEraConfig = DEFAULT_ERA_CONFIG) -> int:
    """Myanmar era year whose New Year precedes the day (mean solar years since the epoch)."""
    return math.floor((jdn - 0.5 - config.epoch_jd) / config.solar_year)


def _split_year_days(dd: int, info: MyanmarYearInfo) -> tuple[int, int]:
    """
    Split a 1-based day count from Tagu 1 into (month_index, day_in_month).

    Month starts follow the mean month 29.544 days with the 29/30 pattern;
    the threshold term `a` flips once the count is past the inserted month,
    removing the First Waso (common year) or adding Nayon's extra day (big watat).
    """
    big = 1 if info.year_type == YearType.BIG_WATAT else 0
    common = 1 if info.year_type == YearType.COMMON else 0

    a = (dd + 423) // 512
    mm = math.floor((dd - big * a + common * a * 30 + 29.26) / 29.544)
    e = (mm + 12) // 16
    f = (mm + 11) // 16
    md = dd - math.floor(29.544 * mm - 29.26) - big * e + common * f * 30
    mm += f * 3 - e * 4
    return mm, md


def decompose_jdn(jdn: int, config: MyanmarEraConfig = DEFAULT_ERA_CONFIG) -> MyanmarDate:
    my = myanmar_year_of_jdn(jdn, config)
    if not config.supports(my):
        log.debug("decompose: jdn=%d -> my=%d rejected", jdn, my)
        raise InvalidInput(
            f"julian day {jdn} falls in Myanmar year {my}, outside supported range "
            f"{config.first_year}..{config.last_year}"
        )

    info = classify_year(my, config)
    year_length = YEAR_LENGTH_BY_TYPE[info.year_type]

    dd = jdn - info.year_start_day + 1
    # days past the next Tagu 1 still belong to this year until its New Year
    late = (dd - 1) // year_length
    dd -= late * year_length

    mm, md = _split_year_days(dd, info)
    mm += 12 * late

    if late not in (0, 1) or not (MONTH_INDEX_MIN <= mm <= MONTH_INDEX_MAX):
        raise UnknownMonthIndex(mm, f"jdn={jdn} my={my} day_count={dd} late={late}")
    if mm == FIRST_WASO and info.year_type == YearType.COMMON:
        raise UnknownMonthIndex(mm, f"First Waso in common year {my}")

    mml = month_length_of(mm, info.year_type)
    if not (1 <= md <= mml):
        raise UnknownMonthIndex(mm, f"day {md} outside month length {mml}")

    return MyanmarDate(
        jdn=jdn,
        myanmar_year=my,
        month_index=mm,
        day_in_month=md,
        fortnight_day=fortnight_day_of(md),
        moon_phase=moon_phase_of(md, mml),
        month_length=mml,
        year_type=info.year_type,
    )


def decompose(jd: float, config: MyanmarEraConfig = DEFAULT_ERA_CONFIG) -> MyanmarDate:
    """
    Julian date -> Myanmar calendar day.

    The Julian date is first rounded to its day number, so any instant of
    the civil day (00:00 is the .5 boundary) maps to the same result.

    Raises
    ------
    InvalidInput
        If jd is not finite or falls outside the supported Myanmar years.
    YearClassificationUnresolved
        Propagated from the year classifier.
    """
    return decompose_jdn(jd_to_jdn(jd), config)


# ============================================================
# Reverse direction
# ============================================================

def month_length_for(
    myanmar_year: int,
    month_index: int,
    config: MyanmarEraConfig = DEFAULT_ERA_CONFIG,
) -> int:
    info = classify_year(myanmar_year, config)
    _require_month_in_year(month_index, info)
    return month_length_of(month_index, info.year_type)


def _require_month_in_year(month_index: int, info: MyanmarYearInfo) -> None:
    if isinstance(month_index, bool) or not isinstance(month_index, int):
        raise InvalidInput(f"month_index must be an integer (got {month_index!r})")
    if not (MONTH_INDEX_MIN <= month_index <= MONTH_INDEX_MAX):
        raise InvalidInput(f"month_index out of range {MONTH_INDEX_MIN}..{MONTH_INDEX_MAX}: {month_index}")
    if month_index == FIRST_WASO and not info.is_watat:
        raise InvalidInput(f"Myanmar year {info.myanmar_year} is not watat and has no First Waso")


def day_in_month_from_fortnight(moon_phase: MoonPhase, fortnight_day: int, month_length: int) -> int:
    """
    Day in month for a (moon phase, fortnight day) pair.

    Full moon and new moon ignore fortnight_day: they are day 15 and the
    last day of the month respectively.
    """
    phase = MoonPhase(moon_phase)
    if phase == MoonPhase.FULL_MOON:
        return FORTNIGHT_DAYS
    if phase == MoonPhase.NEW_MOON:
        return month_length
    waning_days = month_length - FORTNIGHT_DAYS
    limit = FORTNIGHT_DAYS - 1 if phase == MoonPhase.WAXING else waning_days - 1
    if not (1 <= fortnight_day <= limit):
        raise InvalidInput(f"fortnight day out of range 1..{limit} for {phase.name.lower()}: {fortnight_day}")
    return fortnight_day + (FORTNIGHT_DAYS if phase == MoonPhase.WANING else 0)


def myanmar_to_jdn(
    myanmar_year: int,
    month_index: int,
    day_in_month: int,
    config: MyanmarEraConfig = DEFAULT_ERA_CONFIG,
) -> int:
    """
    Myanmar (year, month index, day in month) -> Julian day number.

    Inverse of decompose_jdn() for every day the year actually contains.
    """
    info = classify_year(myanmar_year, config)
    _require_month_in_year(month_index, info)
    mml = month_length_of(month_index, info.year_type)
    if isinstance(day_in_month, bool) or not isinstance(day_in_month, int) or not (1 <= day_in_month <= mml):
        raise InvalidInput(f"day_in_month out of range 1..{mml}: {day_in_month!r}")

    big = 1 if info.year_type == YearType.BIG_WATAT else 0
    common = 1 if info.year_type == YearType.COMMON else 0

    late = month_index // 13
    mm = month_index % 13 + late
    # back to the sequential numbering used by _split_year_days (First Waso -> 4)
    mm += 4 - ((mm + 15) // 16) * 4 + (mm + 12) // 16

    dd = day_in_month + math.floor(29.544 * mm - 29.26) - common * ((mm + 11) // 16) * 30 + big * ((mm + 12) // 16)
    dd += late * info.year_length
    return dd + info.year_start_day - 1
