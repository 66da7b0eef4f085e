from __future__ import annotations

import argparse
import importlib
import inspect
import logging
from typing import List, Optional

from .core.errors import CalkitError


def _run_module_main(modpath: str, argv: List[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def _parse_fields(s: str) -> dict:
    """'5784-7-1' or '5784-7-1T18:30' -> field keywords (negative years allowed: '-44-3-15')."""
    date_part, _, time_part = s.partition("T")
    sign = -1 if date_part.startswith("-") else 1
    y, m, d = date_part.lstrip("-").split("-")
    out = {"year": sign * int(y), "month": int(m), "day": int(d)}
    if time_part:
        hms = [int(x) for x in time_part.split(":")]
        for key, value in zip(("hour", "minute", "second"), hms):
            out[key] = value
    return out


def _fmt(date) -> str:
    f = date.fields
    s = f"{f.year}-{f.month:02d}-{f.day:02d} {f.hour:02d}:{f.minute:02d}:{f.second:02d}"
    if f.leap_month:
        s += " (leap month)"
    return s


def cmd_convert(argv: List[str]) -> int:
    import calkit
    from calkit.timezone import get_zone

    p = argparse.ArgumentParser(prog="calkit convert", description="Convert a date between calendars")
    p.add_argument("date", help="YYYY-MM-DD[THH:MM[:SS]] in the source calendar")
    p.add_argument("--calendar", default="gregorian", help="source calendar")
    p.add_argument("--to", action="append", default=[], help="target calendar (repeatable; default: all)")
    p.add_argument("--tz", default="UTC", help="time zone: UTC, +HH:MM or an IANA name")
    args = p.parse_args(argv)

    reg = calkit.default_registry()
    d = reg.create(args.calendar, timezone=get_zone(args.tz), **_parse_fields(args.date))
    print(f"{args.calendar:14s} {_fmt(d)}  (JD {d.julian_day():.6f}, weekday {d.day_of_week()})")
    for name in args.to or reg.list():
        if name == args.calendar:
            continue
        print(f"{name:14s} {_fmt(reg.convert(d, name))}")
    return 0


def cmd_list(argv: List[str]) -> int:
    from calkit.registry import build_registry

    p = argparse.ArgumentParser(prog="calkit list", description="List the available calendars")
    p.parse_args(argv)
    for name in build_registry().list():
        print(name)
    return 0


def cmd_astro(argv: List[str]) -> int:
    import calkit
    from calkit.calendars.gregorian import gregorian_year_from_rd
    from calkit.core.ratadie import GREGORIAN_EPOCH

    p = argparse.ArgumentParser(prog="calkit astro", description="Solar/lunar positions, equinoxes and new moons at a JD (UT).")
    p.add_argument("--jd", type=float, default=2451545.0, help="Julian Day, universal time (default: J2000.0)")
    args = p.parse_args(argv)

    eng = calkit.load_coefficients()
    jd = args.jd
    year = gregorian_year_from_rd(jd - GREGORIAN_EPOCH)

    print(f"JD = {jd:.6f}  (Gregorian year {year})")
    print(f"  delta T            = {eng.delta_t(year):.2f} s")
    print(f"  solar longitude    = {eng.solar_longitude(jd):.6f} deg")
    print(f"  lunar longitude    = {eng.lunar_longitude(jd):.6f} deg")
    print(f"  lunar phase        = {eng.lunar_solar_angle(jd):.6f} deg")
    nut = eng.nutation(jd)
    print(f"  nutation           = dpsi {nut.delta_psi * 3600:.3f}\"  deps {nut.delta_epsilon * 3600:.3f}\"")
    print(f"  equation of time   = {eng.equation_of_time(jd) * 1440:.3f} min")
    print(f"  new moon before    = {eng.new_moon_before(jd):.6f}")
    print(f"  new moon on/after  = {eng.new_moon_at_or_after(jd):.6f}")
    print()
    print(f"Equinoxes and solstices of {year} (JDE):")
    for which, label in enumerate(("March equinox", "June solstice", "September equinox", "December solstice")):
        print(f"  {label:18s} = {eng.equinox(year, which):.6f}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="calkit")
    p.add_argument("--log-level", default="WARNING", help="logging level (DEBUG, INFO, ...)")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("convert", help="Convert a date between calendars")
    sub.add_parser("list", help="List the available calendars")
    sub.add_parser("astro", help="Solar/lunar positions, equinoxes and new moons at a JD")

    p_diag = sub.add_parser("diag", help="Diagnostics")
    p_diag.add_argument(
        "tool",
        choices=["year-lengths", "round-trip"],
        help="Which diagnostic to run",
    )

    args, rest = p.parse_known_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.cmd == "convert":
            return cmd_convert(rest)

        if args.cmd == "list":
            return cmd_list(rest)

        if args.cmd == "astro":
            return cmd_astro(rest)

        if args.cmd == "diag":
            tool_map = {
                "year-lengths": "calkit.diagnostics.year_lengths",
                "round-trip": "calkit.diagnostics.round_trip",
            }
            return _run_module_main(tool_map[args.tool], rest)
    except CalkitError as e:
        print(f"error: {e}")
        return 2

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
