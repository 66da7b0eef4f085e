#!/usr/bin/env python3
from __future__ import annotations

import argparse
from collections import Counter
from typing import Dict, List, Optional, Tuple

from calkit.registry import CalendarRegistry


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "calkit[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "calkit[diagnostics]"') from e


def year_lengths(reg: CalendarRegistry, name: str, start: int, end: int) -> List[Tuple[int, int, int]]:
    """(year, days, months) for each year in [start, end] that exists in the calendar."""
    policy = reg.get(name).policy
    out: List[Tuple[int, int, int]] = []
    for y in range(start, end + 1):
        n = policy.num_months(y)
        if n == 0:
            continue
        out.append((y, policy.days_in_year(y), n))
    return out


def histogram(rows: List[Tuple[int, int, int]]) -> Dict[int, int]:
    return dict(sorted(Counter(days for _, days, _ in rows).items()))


def summarize(rows: List[Tuple[int, int, int]]) -> Dict[str, float]:
    np = _need_numpy()
    days = np.array([d for _, d, _ in rows], dtype=float)
    return {
        "years": float(days.size),
        "mean": float(days.mean()),
        "std": float(days.std()),
        "min": float(days.min()),
        "max": float(days.max()),
    }


def main(argv: Optional[List[str]] = None) -> int:
    from calkit.api import default_registry

    p = argparse.ArgumentParser(prog="calkit diag year-lengths", description="Tabulate year lengths of a calendar.")
    p.add_argument("--calendar", default="gregorian")
    p.add_argument("--start", type=int, default=2000)
    p.add_argument("--end", type=int, default=2100)
    p.add_argument("--out-png", default=None, help="write a plot of year length against year")
    args = p.parse_args(argv)

    reg = default_registry()
    rows = year_lengths(reg, args.calendar, args.start, args.end)
    if not rows:
        print("No years in range.")
        return 1

    print(f"{args.calendar}: {rows[0][0]}..{rows[-1][0]}")
    for days, count in histogram(rows).items():
        print(f"  {days:4d} days: {count}")

    stats = summarize(rows)
    print(f"  mean year = {stats['mean']:.6f} days (std {stats['std']:.4f})")

    if args.out_png:
        plt = _need_matplotlib()
        fig, ax = plt.subplots(figsize=(12, 4))
        ax.scatter([y for y, _, _ in rows], [d for _, d, _ in rows], s=4)
        ax.set_xlabel("Year")
        ax.set_ylabel("Days")
        ax.set_title(f"Year lengths ({args.calendar})")
        ax.grid(True, alpha=0.3)
        plt.tight_layout()
        plt.savefig(args.out_png, dpi=150)
        print(f"Plot saved to {args.out_png}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
