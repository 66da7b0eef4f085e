from __future__ import annotations

"""
calkit.astro.coefficients

Numeric tables behind the astronomical routines: equinox polynomials, the annual
delta-T table, Laskar's obliquity terms, the nutation series, solar and lunar
longitude series and the new-moon correction terms.

The tables are shipped as JSON (calkit/astro/data/<name>.json) and loaded once per
process. Search order:
  1) CALKIT_COEFFICIENTS environment variable (path to a JSON file)
  2) packaged data (calkit.astro.data/<name>.json)
"""

import asyncio
import importlib
import importlib.resources
import json
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Tuple

from ..core.errors import DataNotLoaded

log = logging.getLogger(__name__)

ENV_VAR = "CALKIT_COEFFICIENTS"

Row = Tuple[float, ...]


@dataclass(frozen=True)
class CoefficientTable:
    name: str
    equinox_mean_1000: Tuple[Row, ...]     # 4 rows x 5 polynomial terms, years < 1000
    equinox_mean_2000: Tuple[Row, ...]     # 4 rows x 5 polynomial terms, years >= 1000
    equinox_periodic: Tuple[Row, ...]      # (A, B, C): A cos(B + C T)
    delta_t_first_year: int
    delta_t: Tuple[float, ...]             # seconds, one entry per year
    obliquity: Tuple[float, ...]           # arcseconds, powers of u = T/100
    nutation: Tuple[Row, ...]              # (D, M, M', F, Omega, psi, psi T, eps, eps T)
    nutation_short_a: Tuple[float, ...]
    nutation_short_b: Tuple[float, ...]
    ephemeris_18th: Tuple[float, ...]
    ephemeris_19th: Tuple[float, ...]
    solar_longitude: Tuple[Row, ...]       # (coefficient, addend, multiplier)
    lunar_mean_moon: Tuple[float, ...]
    lunar_elongation: Tuple[float, ...]
    lunar_solar_anomaly: Tuple[float, ...]
    lunar_anomaly: Tuple[float, ...]
    lunar_node: Tuple[float, ...]
    lunar_eccentricity: Tuple[float, ...]
    lunar_longitude: Tuple[Row, ...]       # (D, M, M', F, sine coefficient in 1e-6 deg)
    new_moon_approx: Tuple[float, ...]
    new_moon_cap_e: Tuple[float, ...]
    new_moon_solar_anomaly: Tuple[float, ...]
    new_moon_lunar_anomaly: Tuple[float, ...]
    new_moon_argument: Tuple[float, ...]
    new_moon_cap_omega: Tuple[float, ...]
    new_moon_extra: Tuple[float, ...]
    new_moon_periodic: Tuple[Row, ...]     # (E power, solar, lunar, moon, sine)
    new_moon_additional: Tuple[Row, ...]   # (constant, coefficient, factor)

    @property
    def delta_t_last_year(self) -> int:
        return self.delta_t_first_year + len(self.delta_t) - 1

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "CoefficientTable":
        def rows(key: str) -> Tuple[Row, ...]:
            return tuple(tuple(float(x) for x in r) for r in data[key])

        def vec(key: str) -> Tuple[float, ...]:
            return tuple(float(x) for x in data[key])

        try:
            table = cls(
                name=str(data.get("name", "astro")),
                equinox_mean_1000=rows("equinox_mean_1000"),
                equinox_mean_2000=rows("equinox_mean_2000"),
                equinox_periodic=rows("equinox_periodic"),
                delta_t_first_year=int(data["delta_t_first_year"]),
                delta_t=vec("delta_t"),
                obliquity=vec("obliquity"),
                nutation=rows("nutation"),
                nutation_short_a=vec("nutation_short_a"),
                nutation_short_b=vec("nutation_short_b"),
                ephemeris_18th=vec("ephemeris_18th"),
                ephemeris_19th=vec("ephemeris_19th"),
                solar_longitude=rows("solar_longitude"),
                lunar_mean_moon=vec("lunar_mean_moon"),
                lunar_elongation=vec("lunar_elongation"),
                lunar_solar_anomaly=vec("lunar_solar_anomaly"),
                lunar_anomaly=vec("lunar_anomaly"),
                lunar_node=vec("lunar_node"),
                lunar_eccentricity=vec("lunar_eccentricity"),
                lunar_longitude=rows("lunar_longitude"),
                new_moon_approx=vec("new_moon_approx"),
                new_moon_cap_e=vec("new_moon_cap_e"),
                new_moon_solar_anomaly=vec("new_moon_solar_anomaly"),
                new_moon_lunar_anomaly=vec("new_moon_lunar_anomaly"),
                new_moon_argument=vec("new_moon_argument"),
                new_moon_cap_omega=vec("new_moon_cap_omega"),
                new_moon_extra=vec("new_moon_extra"),
                new_moon_periodic=rows("new_moon_periodic"),
                new_moon_additional=rows("new_moon_additional"),
            )
        except KeyError as e:
            raise DataNotLoaded(f"Coefficient table is missing key {e}") from e
        table._check()
        return table

    def _check(self) -> None:
        if len(self.equinox_mean_1000) != 4 or len(self.equinox_mean_2000) != 4:
            raise DataNotLoaded("Equinox tables must have one row per season")
        if len(self.obliquity) != 10:
            raise DataNotLoaded("Obliquity series must have 10 terms")
        if any(len(r) != 9 for r in self.nutation):
            raise DataNotLoaded("Nutation rows must have 9 columns")


def _read_json(text: str, source: str) -> CoefficientTable:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DataNotLoaded(f"Coefficient table {source} is not valid JSON: {e}") from e
    table = CoefficientTable.from_mapping(data)
    log.info("Loaded coefficient table '%s' from %s", table.name, source)
    log.debug(
        "delta-T %d..%d, %d nutation terms, %d solar terms, %d lunar terms",
        table.delta_t_first_year, table.delta_t_last_year,
        len(table.nutation), len(table.solar_longitude), len(table.lunar_longitude),
    )
    return table


@lru_cache(maxsize=None)
def _load_table(name: str) -> CoefficientTable:
    # 1) explicit override
    p = os.environ.get(ENV_VAR, "").strip()
    if p:
        path = Path(p).expanduser()
        if not path.is_file():
            raise DataNotLoaded(f"{ENV_VAR} points to a missing file: {path}")
        return _read_json(path.read_text(encoding="utf-8"), str(path))

    # 2) packaged data
    pkg = importlib.import_module("calkit.astro.data")
    res = importlib.resources.files(pkg).joinpath(f"{name}.json")
    if not res.is_file():
        raise DataNotLoaded(f"Coefficient table '{name}' not found")
    return _read_json(res.read_text(encoding="utf-8"), f"package data {name}.json")


def load_table(name: str = "astro") -> CoefficientTable:
    """
    Load a coefficient table by name; cached, so every caller shares one instance.

    Raises DataNotLoaded when no source provides the table.
    """
    return _load_table(name)


def clear_cache() -> None:
    """Forget loaded tables, e.g. after changing the override variable."""
    _load_table.cache_clear()


async def aload_table(name: str = "astro") -> CoefficientTable:
    """Asynchronous variant of load_table(); file access runs in a worker thread."""
    return await asyncio.to_thread(_load_table, name)
