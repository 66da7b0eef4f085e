from __future__ import annotations

import argparse
import random
from typing import List, Optional

from calkit.registry import CalendarRegistry


def parse_calendars(s: str) -> List[str]:
    # "hebrew,islamic" -> ["hebrew", "islamic"]
    return [x.strip() for x in s.split(",") if x.strip()]


def roundtrip_test(
    reg: CalendarRegistry,
    name: str,
    N: int,
    jd_start: float,
    jd_end: float,
    seed: int,
    *,
    max_failures: int,
) -> int:
    """Julian Day -> fields -> Julian Day for N random instants; returns the failure count."""
    random.seed(seed)
    failures = 0

    for _ in range(N):
        # whole milliseconds, so the trip back is exact
        jd0 = jd_start + random.randint(0, int((jd_end - jd_start) * 86400000)) / 86400000
        d = reg.from_julian_day(name, jd0)
        back = reg.create(name, d.fields)
        if back.rd != d.rd:
            failures += 1
            print("\nFAIL")
            print("calendar:", name)
            print("jd0:", jd0)
            print("fields:", d.fields)
            print("back:", back.julian_day())
            if failures >= max_failures:
                return failures

    return failures


def main(argv: Optional[List[str]] = None) -> int:
    from calkit.api import default_registry

    p = argparse.ArgumentParser(prog="calkit diag round-trip", description="Random round trips: JD -> calendar fields -> JD.")
    p.add_argument("--calendars", type=str, default="gregorian,julian,coptic,ethiopic,hebrew,islamic,persian-algo,thaisolar",
                   help="Comma-separated calendar list.")
    p.add_argument("--N", type=int, default=2000, help="Trials per calendar.")
    p.add_argument("--jd-start", type=float, default=2305447.5, help="Start JD (default 1600-01-01).")
    p.add_argument("--jd-end", type=float, default=2598007.5, help="End JD (default 2401-01-01).")
    p.add_argument("--seed", type=int, default=123, help="RNG seed.")
    p.add_argument("--max-failures", type=int, default=5, help="Stop after this many failures per calendar.")
    args = p.parse_args(argv)

    reg = default_registry()
    total = 0
    for name in parse_calendars(args.calendars):
        n = roundtrip_test(reg, name, args.N, args.jd_start, args.jd_end, args.seed, max_failures=args.max_failures)
        print(f"{name:14s} failures: {n}/{args.N}")
        total += n
    return 1 if total else 0


if __name__ == "__main__":
    raise SystemExit(main())
