from __future__ import annotations

"""
Full moon check script.

Uses:
- mmcal.features.myanmar_dates.full_moon_days_between
- mmcal.core.providers.skyfield_provider.SkyfieldProvider

Compares the calendar's full-moon days with astronomical full moons.
The calendar runs on mean motions, so offsets of a day or two are normal.
"""

import argparse
from collections import Counter
from datetime import date
from zoneinfo import ZoneInfo

from mmcal.core.providers.skyfield_provider import SkyfieldProvider
from mmcal.features.myanmar_dates import full_moon_days_between

from tools.common import add_common_args, resolve_date_range, resolve_ephemeris, dump_json, skip

MAX_OFFSET_DAYS = 2


def _nearest(d: date, candidates: list[date]) -> date | None:
    if not candidates:
        return None
    return min(candidates, key=lambda c: abs((c - d).days))


def main() -> None:
    parser = argparse.ArgumentParser(description="Myanmar full moon vs astronomical full moon")
    add_common_args(parser)
    args = parser.parse_args()

    start, end = resolve_date_range(args)
    if start is None or end is None:
        parser.error("--date or --start/--end required")

    eph = resolve_ephemeris(args.ephemeris, args.ephemeris_path)
    if eph.skip_reason:
        skip(eph.skip_reason)

    provider = SkyfieldProvider(ephemeris_path=eph.path)
    tz = ZoneInfo(args.tz)
    astro = provider.full_moon_dates(start, end, tz)

    rows = []
    offsets: Counter = Counter()
    for g, rec in full_moon_days_between(start, end):
        a = _nearest(g, astro)
        delta = None if a is None else (g - a).days
        if delta is not None:
            offsets[delta] += 1
        rows.append(
            {
                "date": g.isoformat(),
                "myanmar": str(rec),
                "astronomical": None if a is None else a.isoformat(),
                "delta_days": delta,
            }
        )

    if args.json:
        dump_json({"rows": rows, "offsets": dict(sorted(offsets.items()))})
        return

    for r in rows:
        flag = "" if r["delta_days"] is not None and abs(r["delta_days"]) <= MAX_OFFSET_DAYS else "  NG"
        if args.verbose or flag:
            print(f"{r['date']}  {r['myanmar']:<32}  astro={r['astronomical']}  delta={r['delta_days']}{flag}")

    print(f"full_moons={len(rows)} offsets=" + " ".join(f"{k:+d}:{v}" for k, v in sorted(offsets.items())))


if __name__ == "__main__":
    main()
