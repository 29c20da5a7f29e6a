# src/mmcal/features/config.py
from __future__ import annotations

"""
Feature-level constants: month names and moon-phase labels.

- month index 0..14 => name (First Waso, Tagu..Tabaung, Late Tagu, Late Kason)
- moon phase 0..3 => label

The month index numbering and these labels are consumed verbatim by
presentation code; changing either is a breaking change.
"""

from typing import Dict, Tuple

from mmcal.core.errors import InvalidInput, UnknownMonthIndex
from mmcal.core.lunar_date import WASO, MoonPhase

# ============================================================
# Month names
#   NOTE:
#     index 0 only exists in watat years (the inserted 30-day month).
#     In a watat year the regular Waso (index 4) is called Second Waso.
#     13/14 are the Tagu/Kason days at the end of the year, before the
#     next New Year.
# ============================================================

MONTH_NAMES: Tuple[str, ...] = (
    "First Waso",
    "Tagu",
    "Kason",
    "Nayon",
    "Waso",
    "Wagaung",
    "Tawthalin",
    "Thadingyut",
    "Tazaungmon",
    "Nadaw",
    "Pyatho",
    "Tabodwe",
    "Tabaung",
    "Late Tagu",
    "Late Kason",
)

SECOND_WASO = "Second Waso"

MOON_PHASE_LABELS: Dict[MoonPhase, str] = {
    MoonPhase.WAXING: "Waxing",
    MoonPhase.FULL_MOON: "Full Moon",
    MoonPhase.WANING: "Waning",
    MoonPhase.NEW_MOON: "New Moon",
}

_MONTH_INDEX_BY_NAME: Dict[str, int] = {name.lower(): i for i, name in enumerate(MONTH_NAMES)}
_MOON_PHASE_BY_LABEL: Dict[str, MoonPhase] = {label.lower(): p for p, label in MOON_PHASE_LABELS.items()}


def month_name_from_index(month_index: int, is_watat: bool = False) -> str:
    """
    Month name for a decomposed month index.

    Raises UnknownMonthIndex for indices outside the table; the decomposer
    never produces one, so this signals a bug upstream.
    """
    i = int(month_index)
    if not (0 <= i < len(MONTH_NAMES)):
        raise UnknownMonthIndex(i)
    if i == WASO and is_watat:
        return SECOND_WASO
    return MONTH_NAMES[i]


def month_index_from_name(name: str) -> int:
    """Reverse lookup (case-insensitive). "Second Waso" maps to the Waso index."""
    key = " ".join(str(name).split()).lower()
    if key == SECOND_WASO.lower():
        return WASO
    try:
        return _MONTH_INDEX_BY_NAME[key]
    except KeyError as e:
        raise InvalidInput(f"unknown Myanmar month name: {name!r}") from e


def moon_phase_label(phase: MoonPhase) -> str:
    return MOON_PHASE_LABELS[MoonPhase(phase)]


def moon_phase_from_label(label: str) -> MoonPhase:
    key = " ".join(str(label).split()).lower()
    try:
        return _MOON_PHASE_BY_LABEL[key]
    except KeyError as e:
        raise InvalidInput(f"unknown moon phase label: {label!r}") from e
