from __future__ import annotations

"""
calkit.astro.engine

Low-precision solar and lunar ephemeris used by the astronomical calendars
(Persian, Han). Sources:

- Jean Meeus, Astronomical Algorithms (2nd ed.): equinoxes (ch. 27),
  nutation (ch. 22), equation of time (ch. 28), new moons (ch. 49).
- Reingold & Dershowitz, Calendrical Calculations: solar longitude,
  lunar longitude, ephemeris correction, solar-longitude search.
- Fourmilab's astro.js: delta-T table and the sunpos/obliquity helpers.

Times are Julian Days. Functions documented as taking "universal time" subtract
the ephemeris correction themselves; `equinox()` returns dynamical time (JDE).
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..calendars.gregorian import gregorian_rd, gregorian_year_from_rd
from ..core.errors import DataNotLoaded
from ..core.ratadie import GREGORIAN_EPOCH
from ..core.search import bisection_search
from ..core.types import Nutation, SunPosition
from .coefficients import CoefficientTable

log = logging.getLogger(__name__)

J2000 = 2451545.0
MEAN_SYNODIC_MONTH = 29.530588853
MEAN_TROPICAL_YEAR = 365.242189

# JD offset of the first mean new moon counted by new_moon_time()
_NEW_MOON_ZERO = 11.450086114414322

# The phase-based guess lands within two lunations; longer scans are logged.
_SCAN_WARN = 4


# ------------------------------------------------------------
# Angle helpers (degrees unless noted)
# ------------------------------------------------------------

def dtr(d: float) -> float:
    return d * math.pi / 180.0

def rtd(r: float) -> float:
    return r * 180.0 / math.pi

def dsin(d: float) -> float:
    return math.sin(dtr(d))

def dcos(d: float) -> float:
    return math.cos(dtr(d))

def fixangle(a: float) -> float:
    """Range-reduce degrees to [0, 360)."""
    return a - 360.0 * math.floor(a / 360.0)

def fixangr(a: float) -> float:
    """Range-reduce radians to [0, 2 pi)."""
    return a - (2 * math.pi) * math.floor(a / (2 * math.pi))

def poly(x: float, coefficients: Sequence[float]) -> float:
    """Sum of coefficients[i] * x**i."""
    result = coefficients[0]
    xpow = x
    for c in coefficients[1:]:
        result += c * xpow
        xpow *= x
    return result

def universal_from_local(jd: float, zone_minutes: float) -> float:
    return jd - zone_minutes / 1440.0

def local_from_universal(jd: float, zone_minutes: float) -> float:
    return jd + zone_minutes / 1440.0

def floor_to_jd(jd: float) -> float:
    """Start (midnight) of the civil day containing jd."""
    return math.floor(jd - 0.5) + 0.5

def ceil_to_jd(jd: float) -> float:
    """Midnight at the end of the civil day containing jd."""
    return math.ceil(jd + 0.5) - 0.5


@dataclass(frozen=True)
class AstroSettings:
    # days; independent of core.search.DEFAULT_PRECISION
    solar_longitude_precision: float = 1e-6


class AstroEngine:
    """
    Handle to the ephemeris routines bound to one coefficient table.

    An engine built without a table is valid but raises DataNotLoaded from every
    routine that needs coefficients, so calendar objects can be wired up before
    the table is available.
    """

    def __init__(self, table: Optional[CoefficientTable] = None, settings: Optional[AstroSettings] = None):
        self._table = table
        self.settings = settings or AstroSettings()

    def __repr__(self) -> str:
        name = self._table.name if self._table is not None else None
        return f"AstroEngine(table={name!r})"

    @property
    def loaded(self) -> bool:
        return self._table is not None

    @property
    def table(self) -> CoefficientTable:
        if self._table is None:
            raise DataNotLoaded("Astronomical coefficients are not loaded; call calkit.load_coefficients() first")
        return self._table

    # ------------------------------------------------------------
    # Equinoxes, delta-T, obliquity
    # ------------------------------------------------------------

    def equinox(self, year: int, which: int) -> float:
        """
        JDE of an equinox or solstice.

        which: 0 = March equinox, 1 = June solstice, 2 = September equinox,
        3 = December solstice.
        """
        t = self.table
        if year < 1000:
            row = t.equinox_mean_1000[which]
            y = year / 1000.0
        else:
            row = t.equinox_mean_2000[which]
            y = (year - 2000) / 1000.0
        jde0 = poly(y, row)
        T = (jde0 - J2000) / 36525.0
        W = 35999.373 * T - 2.47
        delta_l = 1 + 0.0334 * dcos(W) + 0.0007 * dcos(2 * W)
        s = sum(a * dcos(b + c * T) for a, b, c in t.equinox_periodic)
        return jde0 + (s * 0.00001) / delta_l

    def delta_t(self, year: float) -> float:
        """TT - UT in seconds for a (possibly fractional) year."""
        t = self.table
        first = t.delta_t_first_year
        if first <= year <= 2014:
            i = math.floor(year - first)
            f = (year - first) - i
            return t.delta_t[i] + (t.delta_t[i + 1] - t.delta_t[i]) * f
        u = (year - 2000) / 100.0
        if year < 948:
            return 2177 + 497 * u + 44.1 * u * u
        dt = 102 + 102 * u + 25.3 * u * u
        if 2000 < year < 2100:
            dt += 0.37 * (year - 2100)
        return dt

    def obliquity(self, jd: float) -> float:
        """
        Mean obliquity of the ecliptic in degrees (Laskar).

        The series is only valid within 10000 years of J2000; outside that range
        the J2000 value is returned unchanged.
        """
        u = v = (jd - J2000) / 3652500.0
        eps = 23 + 26 / 60.0 + 21.448 / 3600.0
        if abs(u) < 1.0:
            for term in self.table.obliquity:
                eps += (term / 3600.0) * v
                v *= u
        return eps

    # ------------------------------------------------------------
    # Sun position, nutation, equation of time
    # ------------------------------------------------------------

    def sun_position(self, jd: float) -> SunPosition:
        T = (jd - J2000) / 36525.0
        T2 = T * T
        T3 = T * T2
        L0 = fixangle(280.46646 + 36000.76983 * T + 0.0003032 * T2)
        M = fixangle(357.52911 + 35999.05029 * T - 0.0001537 * T2 - 0.00000048 * T3)
        e = 0.016708634 - 0.000042037 * T - 0.0000001267 * T2
        C = ((1.914602 - 0.004817 * T - 0.000014 * T2) * dsin(M)
             + (0.019993 - 0.000101 * T) * dsin(2 * M)
             + 0.000289 * dsin(3 * M))
        sun_long = L0 + C
        omega = 125.04 - 1934.136 * T
        apparent = sun_long - 0.00569 - 0.00478 * dsin(omega)
        epsilon = self.obliquity(jd) + 0.00256 * dcos(omega)
        inclination = fixangle(23.4392911 - 0.013004167 * T - 0.00000016389 * T2 + 0.0000005036 * T3)
        ra = fixangle(rtd(math.atan2(dcos(epsilon) * dsin(apparent), dcos(apparent))))
        return SunPosition(
            mean_longitude=L0,
            mean_anomaly=M,
            eccentricity=e,
            equation_of_center=C,
            sun_longitude=sun_long,
            apparent_longitude=apparent,
            inclination=inclination,
            apparent_right_ascension=ra,
        )

    def nutation(self, jd: float) -> Nutation:
        t = (jd - J2000) / 36525.0
        t2 = t * t
        t3 = t * t2
        # D, M, M', F, Omega
        ta = (
            dtr(297.850363 + 445267.11148 * t - 0.0019142 * t2 + t3 / 189474.0),
            dtr(357.52772 + 35999.05034 * t - 0.0001603 * t2 - t3 / 300000.0),
            dtr(134.96298 + 477198.867398 * t + 0.0086972 * t2 + t3 / 56250.0),
            dtr(93.27191 + 483202.017538 * t - 0.0036825 * t2 + t3 / 327270.0),
            dtr(125.04452 - 1934.136261 * t + 0.0020708 * t2 + t3 / 450000.0),
        )
        ta = tuple(fixangr(a) for a in ta)
        to10 = t / 10.0
        dp = 0.0
        de = 0.0
        for row in self.table.nutation:
            ang = sum(mult * arg for mult, arg in zip(row[:5], ta) if mult)
            dp += (row[5] + row[6] * to10) * math.sin(ang)
            de += (row[7] + row[8] * to10) * math.cos(ang)
        # series units are 0.0001 arcsecond
        return Nutation(delta_psi=dp / (3600.0 * 10000.0), delta_epsilon=de / (3600.0 * 10000.0))

    def equation_of_time(self, jd: float) -> float:
        """Apparent minus mean solar time, as a fraction of a day."""
        tau = (jd - J2000) / 365250.0
        L0 = fixangle(
            280.4664567 + 360007.6982779 * tau + 0.03032028 * tau ** 2
            + tau ** 3 / 49931 - tau ** 4 / 15300 - tau ** 5 / 2000000
        )
        alpha = self.sun_position(jd).apparent_right_ascension
        nut = self.nutation(jd)
        epsilon = self.obliquity(jd) + nut.delta_epsilon
        E = L0 - 0.0057183 - alpha + nut.delta_psi * dcos(epsilon)
        # L0 and alpha in different quadrants
        if E > 180:
            E -= 360
        return E * 4 / (24 * 60)

    # ------------------------------------------------------------
    # Calendrical Calculations time scales
    # ------------------------------------------------------------

    @staticmethod
    def aberration(c: float) -> float:
        return 9.74e-05 * dcos(177.63 + 35999.01848 * c) - 0.005575

    def nutation_short(self, c: float) -> float:
        a = poly(c, self.table.nutation_short_a)
        b = poly(c, self.table.nutation_short_b)
        return -0.004778 * dsin(a) - 0.0003667 * dsin(b)

    def ephemeris_correction(self, jd: float) -> float:
        """Dynamical minus universal time, in days."""
        year = gregorian_year_from_rd(jd - GREGORIAN_EPOCH)
        if 1988 <= year <= 2019:
            return (year - 1933) / 86400.0
        if 1800 <= year <= 1987:
            # RD 693596 is 1900-01-01
            theta = (gregorian_rd(year, 7, 1) - 693596) / 36525.0
            coeffs = self.table.ephemeris_19th if year >= 1900 else self.table.ephemeris_18th
            return poly(theta, coeffs)
        if 1620 <= year <= 1799:
            y = year - 1600
            return (196.58333 - 4.0675 * y + 0.0219167 * y * y) / 86400.0
        # RD 660724 is 1810-01-01
        x = 0.5 + (gregorian_rd(year, 1, 1) - 660724)
        return ((x * x / 41048480) - 15) / 86400.0

    def ephemeris_from_universal(self, jd: float) -> float:
        return jd + self.ephemeris_correction(jd)

    def universal_from_ephemeris(self, jd: float) -> float:
        return jd - self.ephemeris_correction(jd)

    def julian_centuries(self, jd: float) -> float:
        return (self.ephemeris_from_universal(jd) - J2000) / 36525.0

    # ------------------------------------------------------------
    # Longitudes
    # ------------------------------------------------------------

    def solar_longitude(self, jd: float) -> float:
        """Apparent solar longitude in degrees, [0, 360), for a universal-time JD."""
        c = self.julian_centuries(jd)
        lon = 0.0
        for coeff, addend, multiplier in self.table.solar_longitude:
            lon += coeff * dsin(addend + multiplier * c)
        lon *= 5.729577951308232e-06
        lon += 282.7771834 + 36000.76953744 * c
        lon += self.aberration(c) + self.nutation_short(c)
        return fixangle(lon)

    def lunar_longitude(self, jd: float) -> float:
        """Apparent lunar longitude in degrees, [0, 360), for a universal-time JD."""
        t = self.table
        c = self.julian_centuries(jd)
        mean_moon = fixangle(poly(c, t.lunar_mean_moon))
        elongation = fixangle(poly(c, t.lunar_elongation))
        solar_anomaly = fixangle(poly(c, t.lunar_solar_anomaly))
        lunar_anomaly = fixangle(poly(c, t.lunar_anomaly))
        node = fixangle(poly(c, t.lunar_node))
        e = poly(c, t.lunar_eccentricity)
        total = 0.0
        for d, m, mp, f, sine in t.lunar_longitude:
            total += sine * e ** abs(m) * dsin(d * elongation + m * solar_anomaly + mp * lunar_anomaly + f * node)
        correction = total / 1000000.0
        venus = 3958.0 / 1000000 * dsin(119.75 + c * 131.849)
        jupiter = 318.0 / 1000000 * dsin(53.09 + c * 479264.29)
        flat_earth = 1962.0 / 1000000 * dsin(mean_moon - node)
        return fixangle(mean_moon + correction + venus + jupiter + flat_earth + self.nutation_short(c))

    def lunar_solar_angle(self, jd: float) -> float:
        """Lunar phase in degrees: 0 new, 90 first quarter, 180 full."""
        return fixangle(self.lunar_longitude(jd) - self.solar_longitude(jd))

    # ------------------------------------------------------------
    # New moons
    # ------------------------------------------------------------

    def new_moon_time(self, n: int) -> float:
        """Universal-time JD of the n-th new moon (n = 0 is 0001-01-11)."""
        t = self.table
        k = n - 24724
        c = k / 1236.85
        approx = poly(c, t.new_moon_approx)
        cap_e = poly(c, t.new_moon_cap_e)
        solar_anomaly = poly(c, t.new_moon_solar_anomaly)
        lunar_anomaly = poly(c, t.new_moon_lunar_anomaly)
        moon_argument = poly(c, t.new_moon_argument)
        cap_omega = poly(c, t.new_moon_cap_omega)
        correction = -0.00017 * dsin(cap_omega)
        for e_pow, solar, lunar, moon, sine in t.new_moon_periodic:
            correction += sine * cap_e ** e_pow * dsin(solar * solar_anomaly + lunar * lunar_anomaly + moon * moon_argument)
        additional = 0.0
        for const, coeff, factor in t.new_moon_additional:
            additional += factor * dsin(const + coeff * k)
        extra = 0.000325 * dsin(poly(c, t.new_moon_extra))
        return self.universal_from_ephemeris(approx + correction + extra + additional + GREGORIAN_EPOCH)

    def _new_moon_guess(self, jd: float) -> int:
        phase = self.lunar_solar_angle(jd)
        return round((jd - _NEW_MOON_ZERO - GREGORIAN_EPOCH) / MEAN_SYNODIC_MONTH - phase / 360)

    def new_moon_before(self, jd: float) -> float:
        """Last new moon strictly before jd."""
        guess = self._new_moon_guess(jd) - 1
        current = last = self.new_moon_time(guess)
        steps = 0
        while current < jd:
            guess += 1
            last = current
            current = self.new_moon_time(guess)
            steps += 1
        if steps > _SCAN_WARN:
            log.debug("new_moon_before(%s) scanned %d lunations", jd, steps)
        return last

    def new_moon_at_or_after(self, jd: float) -> float:
        """First new moon at or after jd."""
        guess = self._new_moon_guess(jd)
        steps = 0
        while True:
            current = self.new_moon_time(guess)
            if not current < jd:
                break
            guess += 1
            steps += 1
        if steps > _SCAN_WARN:
            log.debug("new_moon_at_or_after(%s) scanned %d lunations", jd, steps)
        return current

    # ------------------------------------------------------------
    # Solar longitude search
    # ------------------------------------------------------------

    def next_solar_longitude(self, jd: float, longitude: float) -> float:
        """First moment at or after jd when the sun reaches the given longitude."""
        rate = MEAN_TROPICAL_YEAR / 360.0
        tau = jd + rate * fixangle(longitude - self.solar_longitude(jd))
        start = max(jd, tau - 5.0)
        end = tau + 5.0
        return bisection_search(
            0,
            start,
            end,
            self.settings.solar_longitude_precision,
            lambda l: 180 - fixangle(self.solar_longitude(l) - longitude),
        )
