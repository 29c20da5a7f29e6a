from __future__ import annotations

import logging
import os
import time
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, HTTPException, Path as PathParam, Query
from pydantic import BaseModel, Field

from mmcal.core.errors import InvalidInput, MyanmarCalendarError, UnknownMonthIndex
from mmcal.core.julian import date_to_jdn, jdn_to_date, parse_date_any
from mmcal.core.watat import classify_year, year_type_label
from mmcal.features.myanmar_dates import MyanmarDateRecord, try_convert

router = APIRouter(prefix="/api/v1", tags=["myanmar"])

log = logging.getLogger("mmcal.api.public")


# ============================================================
# Response Models
# ============================================================
class MyanmarDateModel(BaseModel):
    myanmar_year: int
    month_index: int = Field(description="0=First Waso, 1=Tagu .. 12=Tabaung, 13/14=Late Tagu/Late Kason")
    month_name: str
    day: int = Field(description="day in month (1..30)")
    fortnight_day: int = Field(description="day in the waxing/waning fortnight (1..15)")
    moon_phase: str
    is_watat: bool = False
    year_type: str


class DayResponse(BaseModel):
    date: date
    jdn: int
    myanmar: Optional[MyanmarDateModel] = None
    error: Optional[str] = Field(default=None, description="why the Myanmar date is unavailable")


class RangeResponse(BaseModel):
    start: date
    end: date
    days: List[DayResponse]


class YearResponse(BaseModel):
    myanmar_year: int
    year_type: str
    is_watat: bool
    is_big_watat: bool
    year_length: int
    tagu_first_day: date
    second_waso_full_moon: Optional[date] = None


# ============================================================
# Config (env)
# ============================================================
NAYTAK_MAX_RANGE_DAYS_ENV = "NAYTAK_MAX_RANGE_DAYS"
DEFAULT_MAX_RANGE_DAYS = 370


def _max_range_days() -> int:
    v = os.environ.get(NAYTAK_MAX_RANGE_DAYS_ENV, "").strip()
    if not v:
        return DEFAULT_MAX_RANGE_DAYS
    try:
        n = int(v)
    except ValueError:
        log.warning("ignoring %s=%r (not an integer)", NAYTAK_MAX_RANGE_DAYS_ENV, v)
        return DEFAULT_MAX_RANGE_DAYS
    return n if n > 0 else DEFAULT_MAX_RANGE_DAYS


# ============================================================
# Helpers: parsing
# ============================================================
def _parse_iso_date(s: str) -> date:
    try:
        return parse_date_any(s)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _checked_range(start: date, end: date, limit_days: int) -> int:
    if end < start:
        raise HTTPException(status_code=422, detail="end must be >= start")
    days_count = (end - start).days + 1
    if days_count > limit_days:
        raise HTTPException(status_code=422, detail=f"range too large: {days_count} days (limit_days={limit_days})")
    return days_count


# ============================================================
# Public JSON API (function-style, HTTP-ready)
# ============================================================
def _day_payload(d: date) -> Tuple[Optional[MyanmarDateRecord], Optional[str]]:
    """
    Myanmar date for one day, or (None, reason).
    Out-of-era dates keep the Gregorian day and drop the lunar part.
    """
    try:
        res = try_convert(d.year, d.month, d.day)
    except UnknownMonthIndex:
        log.exception("myanmar conversion failed: date=%s", d)
        raise
    if res.ok:
        return res.record, None
    log.warning("myanmar conversion unavailable: date=%s error=%s", d, res.error)
    return None, str(res.error)


def _day_dict(d: date) -> Dict[str, Any]:
    rec, err = _day_payload(d)
    return {
        "date": d.isoformat(),
        "jdn": date_to_jdn(d),
        "myanmar": None if rec is None else rec.to_dict(),
        "error": err,
    }


def get_myanmar_day(date_: str | date) -> dict:
    d = parse_date_any(date_)
    return _day_dict(d)


def get_myanmar_range(start: str | date, end: str | date) -> dict:
    s = parse_date_any(start)
    e = parse_date_any(end)
    if e < s:
        raise InvalidInput("end must be >= start")

    days: List[dict] = []
    cur = s
    while cur <= e:
        days.append(_day_dict(cur))
        cur = cur + timedelta(days=1)

    return {
        "range": {"start": s.isoformat(), "end": e.isoformat()},
        "days": days,
    }


def get_myanmar_year(myanmar_year: int) -> dict:
    info = classify_year(myanmar_year)
    return {
        "myanmar_year": info.myanmar_year,
        "year_type": year_type_label(info.year_type),
        "is_watat": info.is_watat,
        "is_big_watat": info.is_big_watat,
        "year_length": info.year_length,
        "tagu_first_day": jdn_to_date(info.year_start_day).isoformat(),
        "second_waso_full_moon": jdn_to_date(info.full_moon_day).isoformat() if info.is_watat else None,
    }


# ============================================================
# Endpoints
# ============================================================
@router.get("/myanmar/day", response_model=DayResponse)
def get_day(
    date_str: str = Query(..., alias="date", description="YYYY-MM-DD"),
    timing: bool = Query(False, description="log timing (diagnostics)"),
) -> DayResponse:
    d = _parse_iso_date(date_str)

    t0 = time.perf_counter()
    payload = _day_dict(d)
    t1 = time.perf_counter()

    if timing:
        log.warning("timing /myanmar/day date=%s total=%.6fs", d, t1 - t0)

    return DayResponse(**payload)


@router.get("/myanmar/range", response_model=RangeResponse)
def get_range(
    start_str: str = Query(..., alias="start", description="YYYY-MM-DD"),
    end_str: str = Query(..., alias="end", description="YYYY-MM-DD"),
    limit_days: Optional[int] = Query(None, ge=1, le=5000, description="max days per request"),
    timing: bool = Query(False, description="log timing (diagnostics)"),
) -> RangeResponse:
    start = _parse_iso_date(start_str)
    end = _parse_iso_date(end_str)
    days_count = _checked_range(start, end, limit_days or _max_range_days())

    t0 = time.perf_counter()
    payload = get_myanmar_range(start, end)
    t1 = time.perf_counter()

    if timing:
        log.warning("timing /myanmar/range start=%s end=%s days=%d total=%.6fs", start, end, days_count, t1 - t0)

    return RangeResponse(
        start=start,
        end=end,
        days=[DayResponse(**x) for x in payload["days"]],
    )


@router.get("/myanmar/year/{myanmar_year}", response_model=YearResponse)
def get_year(
    myanmar_year: int = PathParam(..., description="Myanmar era year"),
) -> YearResponse:
    try:
        return YearResponse(**get_myanmar_year(myanmar_year))
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except MyanmarCalendarError as e:
        log.exception("year classification failed: my=%d", myanmar_year)
        raise HTTPException(status_code=422, detail=str(e)) from e
