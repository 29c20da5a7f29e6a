from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging

from skyfield.api import Loader
from skyfield import almanac

log = logging.getLogger(__name__)

# almanac.moon_phases event codes
NEW_MOON_EVENT = 0
FULL_MOON_EVENT = 2


# ----------------------------
# Ephemeris path resolution
# ----------------------------
def _project_data_dir() -> Path:
    return Path(__file__).resolve().parents[4] / "data"


def _default_ephemeris_path() -> Path:
    """
    Prefer de440s (longer coverage) if present; otherwise fall back to de421.
    """
    data_dir = _project_data_dir()
    p440s = data_dir / "de440s.bsp"
    p421 = data_dir / "de421.bsp"
    return p440s if p440s.exists() else p421


def _resolve_ephemeris_path(
    *,
    ephemeris_path: Optional[Path],
    ephemeris: Optional[Union[str, Path]],
) -> Path:
    """
    Resolution priority:
      1) ephemeris_path (Path) if provided
      2) ephemeris (str|Path) if provided:
         - absolute path -> use as is
         - relative path / filename -> resolve under project data dir
      3) default: prefer de440s if present else de421
    """
    if ephemeris_path is not None:
        return ephemeris_path

    if ephemeris is not None:
        p = ephemeris if isinstance(ephemeris, Path) else Path(ephemeris)
        if p.is_absolute():
            return p
        return _project_data_dir() / p

    return _default_ephemeris_path()


@dataclass(frozen=True)
class SkyfieldProvider:
    """
    Astronomical moon phases from a JPL ephemeris.

    Only used to check the arithmetic calendar against the real sky; the
    calendar itself runs on mean motions and never needs an ephemeris.
    """

    ephemeris_path: Optional[Path] = None
    ephemeris: Optional[Union[str, Path]] = None

    def __post_init__(self) -> None:
        resolved = _resolve_ephemeris_path(
            ephemeris_path=self.ephemeris_path,
            ephemeris=self.ephemeris,
        )
        object.__setattr__(self, "ephemeris_path", resolved)

        if not self.ephemeris_path.exists():
            data_dir = _project_data_dir()
            candidates = [
                data_dir / "de440s.bsp",
                data_dir / "de421.bsp",
            ]
            cand_str = "\n".join(f"  - {p}" for p in candidates)
            raise FileNotFoundError(
                f"Ephemeris not found: {self.ephemeris_path}\n"
                f"Place one of the following files under {data_dir}:\n"
                f"{cand_str}\n"
                "Or pass ephemeris='de440s.bsp' / ephemeris_path=Path(...)."
            )

        loader = Loader(str(self.ephemeris_path.parent))
        eph = loader(self.ephemeris_path.name)
        ts = loader.timescale()

        object.__setattr__(self, "_eph", eph)
        object.__setattr__(self, "_ts", ts)

        start_utc, end_utc = self._compute_ephemeris_utc_range()
        object.__setattr__(self, "_ephem_start_utc", start_utc)
        object.__setattr__(self, "_ephem_end_utc", end_utc)

    def _compute_ephemeris_utc_range(self) -> Tuple[datetime, datetime]:
        """
        Compute coverage from SPK segments.
        Skyfield throws EphemerisRangeError deep inside; we surface a clearer error earlier.
        """
        segments = getattr(self._eph, "spk", None)
        if segments is None or not getattr(segments, "segments", None):
            return (
                datetime.min.replace(tzinfo=timezone.utc),
                datetime.max.replace(tzinfo=timezone.utc),
            )

        segs = segments.segments
        start_jd = min(s.start_jd for s in segs)
        end_jd = max(s.end_jd for s in segs)

        t0 = self._ts.tt_jd(start_jd)
        t1 = self._ts.tt_jd(end_jd)
        start_utc = t0.utc_datetime().replace(tzinfo=timezone.utc)
        end_utc = t1.utc_datetime().replace(tzinfo=timezone.utc)
        return start_utc, end_utc

    def _check_ephemeris_range(self, dt_utc: datetime) -> None:
        if dt_utc.tzinfo is None:
            raise ValueError("dt_utc must be timezone-aware")
        dt = dt_utc.astimezone(timezone.utc)
        start = self._ephem_start_utc
        end = self._ephem_end_utc

        if dt < start or dt > end:
            raise ValueError(
                "Requested datetime is outside ephemeris coverage.\n"
                f"  requested: {dt.isoformat()}\n"
                f"  ephemeris: {self.ephemeris_path}\n"
                f"  coverage : {start.isoformat()} .. {end.isoformat()}\n"
                "Hint: use de440s.bsp (place it under ./data or pass ephemeris='de440s.bsp')."
            )

    def moon_phase_events_utc(self, start_utc: datetime, end_utc: datetime) -> List[Tuple[datetime, int]]:
        """
        Principal moon phases in [start_utc, end_utc) as (instant, event) pairs.
        event: 0=new moon, 1=first quarter, 2=full moon, 3=last quarter.
        """
        self._check_ephemeris_range(start_utc)
        self._check_ephemeris_range(end_utc)

        t0 = self._ts.from_datetime(start_utc.astimezone(timezone.utc))
        t1 = self._ts.from_datetime(end_utc.astimezone(timezone.utc))
        times, events = almanac.find_discrete(t0, t1, almanac.moon_phases(self._eph))

        out: List[Tuple[datetime, int]] = []
        for t, ev in zip(times, events):
            dt = t.utc_datetime()
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            out.append((dt, int(ev)))
        return out

    def full_moon_dates(self, start: date, end: date, tzinfo_local: tzinfo) -> List[date]:
        """Local civil dates of the full moons whose local date lies in [start, end)."""
        if tzinfo_local is None:
            raise ValueError("tzinfo_local must be provided")

        start_utc = datetime(start.year, start.month, start.day, tzinfo=tzinfo_local).astimezone(timezone.utc)
        end_utc = datetime(end.year, end.month, end.day, tzinfo=tzinfo_local).astimezone(timezone.utc)

        out: List[date] = []
        for dt, ev in self.moon_phase_events_utc(start_utc - timedelta(days=1), end_utc + timedelta(days=1)):
            if ev != FULL_MOON_EVENT:
                continue
            d_local = dt.astimezone(tzinfo_local).date()
            if start <= d_local < end:
                out.append(d_local)

        if not out:
            log.warning("no full moon found: start=%s end=%s ephemeris=%s", start, end, self.ephemeris_path)
        return out
