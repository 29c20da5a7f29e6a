# src/mmcal/core/config.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

# Mean solar year and mean synodic month of the Myanmar astronomical calendar.
SOLAR_YEAR: float = 1577917828 / 4320000
LUNAR_MONTH: float = 1577917828 / 53433336

# Julian date of the beginning of Myanmar era year 0.
MYANMAR_EPOCH_JD: float = 1954168.050623

# Days in a year of 12 alternating 29/30-day months.
COMMON_YEAR_DAYS: int = 354

# Tagu 1 lies this many days before the second Waso full moon of the anchor year.
TAGU_OFFSET_FROM_WASO_FULL_MOON: int = 102

# Offset between the Myanmar era and the Kali Yuga count used by the excess-day formula.
KALI_YUGA_OFFSET: int = 3739

# First year of the modern (post-independence) era.
MODERN_ERA_START: int = 1312


@dataclass(frozen=True)
class MyanmarEraConfig:
    """
    Parameters of the modern Myanmar astronomical calendar.

    The defaults reproduce the canonical third-era rules. Only years in
    [first_year, last_year] are accepted; every anchor year the classifier
    may look back to stays inside the era for those years.
    """
    solar_year: float = SOLAR_YEAR
    lunar_month: float = LUNAR_MONTH
    epoch_jd: float = MYANMAR_EPOCH_JD

    # watat offset applied to the second Waso full moon
    watat_offset: float = -0.5
    # number of months used to place the excess-day thresholds
    threshold_months: int = 8

    # full moon day corrections: (ME year, days)
    full_moon_offsets: Tuple[Tuple[int, int], ...] = ((1377, 1),)
    # watat decisions that override the excess-day rule: (ME year, watat)
    watat_overrides: Tuple[Tuple[int, bool], ...] = ((1344, True), (1345, False))

    # how far back to look for the anchoring watat year
    watat_lookback: int = 3

    first_year: int = MODERN_ERA_START + 1
    last_year: int = 1999

    @property
    def adjust_threshold(self) -> float:
        """Excess days below this value belong to the next lunar month."""
        return (self.solar_year / 12 - self.lunar_month) * (12 - self.threshold_months)

    @property
    def watat_threshold(self) -> float:
        """A year is watat when its (adjusted) excess days reach this value."""
        return self.lunar_month - (self.solar_year / 12 - self.lunar_month) * self.threshold_months

    def full_moon_offset(self, myanmar_year: int) -> int:
        for year, days in self.full_moon_offsets:
            if year == myanmar_year:
                return int(days)
        return 0

    def watat_override(self, myanmar_year: int) -> Optional[bool]:
        for year, watat in self.watat_overrides:
            if year == myanmar_year:
                return bool(watat)
        return None

    def supports(self, myanmar_year: int) -> bool:
        return self.first_year <= myanmar_year <= self.last_year


DEFAULT_ERA_CONFIG = MyanmarEraConfig()
