# src/mmcal/core/errors.py
from __future__ import annotations


class MyanmarCalendarError(Exception):
    """Base class for every conversion failure raised by mmcal."""


class InvalidInput(MyanmarCalendarError, ValueError):
    """
    A Gregorian field is outside its domain, a Julian date is not finite,
    or the date falls outside the Myanmar years the calendar is validated for.
    """


class YearClassificationUnresolved(MyanmarCalendarError, RuntimeError):
    """
    No anchoring watat year was found within the lookback bound, or the
    distance between second Waso full moons is not 30/31 days.
    """

    def __init__(self, myanmar_year: int, reason: str) -> None:
        super().__init__(f"cannot classify Myanmar year {myanmar_year}: {reason}")
        self.myanmar_year = myanmar_year
        self.reason = reason


class UnknownMonthIndex(MyanmarCalendarError, AssertionError):
    """
    Internal invariant violation: a decomposed month index (or day) does not
    fit the month table. Never expected for validated inputs.
    """

    def __init__(self, month_index: int, detail: str = "") -> None:
        msg = f"unknown Myanmar month index: {month_index}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
        self.month_index = month_index
