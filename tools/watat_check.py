from __future__ import annotations

"""
Watat cadence check.

Uses:
- mmcal.core.watat.classify_year
- mmcal.core.watat.watat_years_between

Lists the watat years of a Myanmar era range with their type, the
Gregorian date of Tagu 1 and the gap to the previous watat year.
"""

import argparse
from collections import Counter

from mmcal.core.config import DEFAULT_ERA_CONFIG
from mmcal.core.julian import jdn_to_date
from mmcal.core.watat import classify_year, watat_years_between, year_type_label

from tools.common import dump_json


def main() -> None:
    parser = argparse.ArgumentParser(description="Myanmar watat year check")
    parser.add_argument("--first", type=int, default=DEFAULT_ERA_CONFIG.first_year)
    parser.add_argument("--last", type=int, default=DEFAULT_ERA_CONFIG.last_year)
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    if args.last < args.first:
        parser.error("--last must be >= --first")

    rows = []
    gaps: Counter = Counter()
    prev = None
    for info in watat_years_between(args.first, args.last):
        gap = None if prev is None else info.myanmar_year - prev
        if gap is not None:
            gaps[gap] += 1
        prev = info.myanmar_year
        rows.append(
            {
                "myanmar_year": info.myanmar_year,
                "year_type": year_type_label(info.year_type),
                "tagu_first_day": jdn_to_date(info.year_start_day).isoformat(),
                "second_waso_full_moon": jdn_to_date(info.full_moon_day).isoformat(),
                "gap": gap,
            }
        )

    # year starts must advance by exactly the year length
    broken = []
    for y in range(args.first, args.last):
        a = classify_year(y)
        b = classify_year(y + 1)
        if b.year_start_day - a.year_start_day != a.year_length:
            broken.append(y)

    if args.json:
        dump_json({"rows": rows, "gaps": dict(sorted(gaps.items())), "broken_year_starts": broken})
        return

    if args.verbose:
        for r in rows:
            print(
                f"{r['myanmar_year']}  {r['year_type']:<12}  tagu1={r['tagu_first_day']}  "
                f"fm={r['second_waso_full_moon']}  gap={r['gap']}"
            )

    big = sum(1 for r in rows if r["year_type"] == "big watat")
    print(f"years={args.first}..{args.last} watat={len(rows)} big_watat={big}")
    print("gaps=" + " ".join(f"{k}:{v}" for k, v in sorted(gaps.items())))
    if broken:
        print(f"NG year starts: {broken}")
    else:
        print("OK year starts")


if __name__ == "__main__":
    main()
