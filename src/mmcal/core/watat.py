# src/mmcal/core/watat.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from typing import Iterable

from .config import (
    COMMON_YEAR_DAYS,
    DEFAULT_ERA_CONFIG,
    KALI_YUGA_OFFSET,
    TAGU_OFFSET_FROM_WASO_FULL_MOON,
    MyanmarEraConfig,
)
from .errors import InvalidInput, YearClassificationUnresolved

log = logging.getLogger(__name__)


class YearType(IntEnum):
    COMMON = 0
    LITTLE_WATAT = 1
    BIG_WATAT = 2


YEAR_LENGTH_BY_TYPE = {
    YearType.COMMON: COMMON_YEAR_DAYS,
    YearType.LITTLE_WATAT: COMMON_YEAR_DAYS + 30,
    YearType.BIG_WATAT: COMMON_YEAR_DAYS + 31,
}

YEAR_TYPE_LABELS = {
    YearType.COMMON: "common",
    YearType.LITTLE_WATAT: "little watat",
    YearType.BIG_WATAT: "big watat",
}


def round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


@dataclass(frozen=True)
class WatatInfo:
    """
    Result of the excess-day test for a single year.

    full_moon_day: JDN of the (second) Waso full moon.
    """
    year: int
    is_watat: bool
    full_moon_day: int
    excess_days: float


@dataclass(frozen=True)
class MyanmarYearInfo:
    """
    Classification of one Myanmar era year.

    - year_start_day: JDN of Tagu 1 (the first day of the first month).
    - anchor_year: nearest preceding watat year the start day is counted from.
    """
    myanmar_year: int
    year_type: YearType
    year_start_day: int
    full_moon_day: int
    anchor_year: int

    @property
    def is_watat(self) -> bool:
        return self.year_type != YearType.COMMON

    @property
    def is_big_watat(self) -> bool:
        return self.year_type == YearType.BIG_WATAT

    @property
    def year_length(self) -> int:
        return YEAR_LENGTH_BY_TYPE[self.year_type]


@lru_cache(maxsize=4096)
def watat_info(myanmar_year: int, config: MyanmarEraConfig = DEFAULT_ERA_CONFIG) -> WatatInfo:
    """
    Excess-day test of the modern era.

    The excess days are what remains of the solar years since the Kali Yuga
    epoch after removing whole lunar months. A year is watat when that
    residue lands in the window [watat_threshold, lunar_month + adjust_threshold),
    whose width is exactly one year's increment (solar_year - 12 * lunar_month).
    """
    sy = config.solar_year
    lm = config.lunar_month

    ed = (sy * (myanmar_year + KALI_YUGA_OFFSET)) % lm
    if ed < config.adjust_threshold:
        ed += lm

    fm = round_half_up(sy * myanmar_year + config.epoch_jd - ed + 4.5 * lm + config.watat_offset)
    fm += config.full_moon_offset(myanmar_year)

    watat = ed >= config.watat_threshold
    override = config.watat_override(myanmar_year)
    if override is not None:
        watat = override

    return WatatInfo(year=myanmar_year, is_watat=watat, full_moon_day=fm, excess_days=ed)


def is_watat(myanmar_year: int, config: MyanmarEraConfig = DEFAULT_ERA_CONFIG) -> bool:
    return watat_info(myanmar_year, config).is_watat


def _nearest_watat_before(myanmar_year: int, config: MyanmarEraConfig) -> WatatInfo:
    for back in range(1, config.watat_lookback + 1):
        info = watat_info(myanmar_year - back, config)
        if info.is_watat:
            return info
    raise YearClassificationUnresolved(
        myanmar_year,
        f"no watat year within {config.watat_lookback} preceding years",
    )


@lru_cache(maxsize=1024, typed=True)
def classify_year(myanmar_year: int, config: MyanmarEraConfig = DEFAULT_ERA_CONFIG) -> MyanmarYearInfo:
    """
    Classify a Myanmar year as common / little watat / big watat and locate Tagu 1.

    Only watat years pin the calendar: the year start is counted forward
    from the second Waso full moon of the nearest preceding watat year.
    Whether a watat year also gains a day (big watat) follows from how far
    its own second Waso full moon lies from that anchor: 30 days beyond
    whole common years for a little watat, 31 for a big watat.

    Raises
    ------
    InvalidInput
        If the year is outside the configured era.
    YearClassificationUnresolved
        If no anchor is found or the full moon distance is not 30/31 days.
    """
    if isinstance(myanmar_year, bool) or not isinstance(myanmar_year, int):
        raise InvalidInput(f"myanmar_year must be an integer (got {myanmar_year!r})")
    if not config.supports(myanmar_year):
        raise InvalidInput(
            f"Myanmar year {myanmar_year} outside supported range "
            f"{config.first_year}..{config.last_year}"
        )

    this = watat_info(myanmar_year, config)
    anchor = _nearest_watat_before(myanmar_year, config)

    year_type = YearType.COMMON
    full_moon_day = this.full_moon_day
    if this.is_watat:
        nd = (this.full_moon_day - anchor.full_moon_day) % COMMON_YEAR_DAYS
        if nd == 30:
            year_type = YearType.LITTLE_WATAT
        elif nd == 31:
            year_type = YearType.BIG_WATAT
        else:
            raise YearClassificationUnresolved(
                myanmar_year,
                f"second Waso full moon is {nd} days past the anchor year {anchor.year} (expected 30 or 31)",
            )
    else:
        full_moon_day = anchor.full_moon_day + COMMON_YEAR_DAYS * (myanmar_year - anchor.year)

    start = anchor.full_moon_day + COMMON_YEAR_DAYS * (myanmar_year - anchor.year) - TAGU_OFFSET_FROM_WASO_FULL_MOON

    log.debug(
        "classify_year: my=%d type=%s anchor=%d tagu1=%d fm=%d ed=%.6f",
        myanmar_year,
        YEAR_TYPE_LABELS[year_type],
        anchor.year,
        start,
        full_moon_day,
        this.excess_days,
    )

    return MyanmarYearInfo(
        myanmar_year=myanmar_year,
        year_type=year_type,
        year_start_day=start,
        full_moon_day=full_moon_day,
        anchor_year=anchor.year,
    )


def watat_years_between(
    first: int,
    last: int,
    *,
    config: MyanmarEraConfig = DEFAULT_ERA_CONFIG,
) -> Iterable[MyanmarYearInfo]:
    """Yield the classification of every watat year in [first, last]."""
    for y in range(first, last + 1):
        info = classify_year(y, config)
        if info.is_watat:
            yield info


def year_type_label(year_type: YearType) -> str:
    return YEAR_TYPE_LABELS[YearType(year_type)]
