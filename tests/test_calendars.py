# tests/test_calendars.py
"""
Arithmetic calendars. Reference dates from Reingold & Dershowitz,
Calendrical Calculations (3rd ed.), and published civil calendars.
"""

import random

import pytest

from calkit.calendars.ethiopic import COPTIC, ETHIOPIC, CopticDate, EthiopicDate
from calkit.calendars.gregorian import (
    GREGORIAN,
    GregorianDate,
    GregorianPolicy,
    gregorian_rd,
    gregorian_year_from_rd,
)
from calkit.calendars.hebrew import (
    HEBREW,
    HebrewDate,
    days_in_year as hebrew_days_in_year,
    long_heshvan,
    long_kislev,
)
from calkit.calendars.islamic import GREGORIAN_DIFF, ISLAMIC, IslamicDate
from calkit.calendars.julian import JULIAN, JulianDate, julian_rd
from calkit.calendars.persian_algo import PERSIAN_ALGO, PersianAlgoDate
from calkit.calendars.thaisolar import DAY_OFFSET, THAI_SOLAR, ThaiSolarDate
from calkit.core.errors import InvalidDateComponents
from calkit.core.types import DateFields

ARITHMETIC = [GREGORIAN, JULIAN, ETHIOPIC, COPTIC, HEBREW, ISLAMIC, PERSIAN_ALGO, THAI_SOLAR]


def greg(y, m, d, **kw):
    return GregorianDate.from_fields(GREGORIAN, year=y, month=m, day=d, **kw)


def ymd(date):
    return (date.year, date.month, date.day)


# ============================================================
# Shared properties
# ============================================================

@pytest.mark.parametrize("policy", ARITHMETIC, ids=lambda p: p.name)
def test_rd_round_trip(policy):
    random.seed(1234)
    for _ in range(2000):
        rd = random.randint(-200000, 1000000) + random.randint(0, 86399999) / 86400000
        fields = policy.fields_from_rd(rd)
        policy.validate(fields)
        assert policy.rd_from_fields(fields) == pytest.approx(rd, abs=1e-7)


@pytest.mark.parametrize("policy", ARITHMETIC, ids=lambda p: p.name)
def test_consecutive_days(policy):
    """Walking day by day visits every (month, day) exactly once per year."""
    year = policy.fields_from_rd(700000).year + 1
    first = DateFields(year)
    rd = policy.rd_from_fields(first) - (policy.day_of_year(first) - 1)
    f = policy.fields_from_rd(rd)
    assert f.day == 1
    seen = 0
    prev = f
    while f.year == year:
        if seen:
            assert (f.month == prev.month and f.day == prev.day + 1) or (f.month != prev.month and f.day == 1)
        prev = f
        seen += 1
        rd += 1
        f = policy.fields_from_rd(rd)
    assert seen == policy.days_in_year(year)
    assert sum(policy.month_length(m, year) for m in range(1, policy.num_months(year) + 1)) == seen


@pytest.mark.parametrize("policy", [GREGORIAN, JULIAN, ETHIOPIC, COPTIC, THAI_SOLAR], ids=lambda p: p.name)
def test_leap_year_matches_year_span(policy):
    """A year is leap exactly when first day to first day spans 366 days."""
    random.seed(42)
    years = [y for y in random.sample(range(-600, 3000), 600) if policy.num_months(y)]
    for y in years:
        nxt = y + 1 if policy.num_months(y + 1) else y + 2
        span = policy.rd_from_fields(DateFields(nxt, 1, 1)) - policy.rd_from_fields(DateFields(y, 1, 1))
        assert (span == 366) == policy.is_leap_year(y)
        assert span == policy.days_in_year(y)


@pytest.mark.parametrize("policy", ARITHMETIC, ids=lambda p: p.name)
def test_day_of_year(policy):
    random.seed(99)
    for _ in range(300):
        rd = random.randint(0, 900000)
        f = policy.fields_from_rd(rd)
        # day of year counts from the first day of the civil year's first month
        assert 1 <= policy.day_of_year(f) <= policy.days_in_year(f.year)


@pytest.mark.parametrize("policy", ARITHMETIC, ids=lambda p: p.name)
def test_month_length_out_of_range(policy):
    assert policy.month_length(0, 2000) == 0
    assert policy.month_length(14, 2000) == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(year=2023, month=2, day=29),
        dict(year=2024, month=13, day=1),
        dict(year=2024, month=0, day=1),
        dict(year=2024, month=4, day=31),
        dict(year=2024, month=1, day=1, hour=24),
        dict(year=2024, month=1, day=1, minute=60),
        dict(year=2024, month=1, day=1, second=-1),
        dict(year=2024, month=1, day=1, millisecond=1000),
    ],
)
def test_invalid_gregorian_fields(kwargs):
    with pytest.raises(InvalidDateComponents):
        GregorianDate.from_fields(GREGORIAN, **kwargs)


def test_invalid_fields_is_value_error():
    with pytest.raises(ValueError):
        greg(2023, 2, 30)


# ============================================================
# Gregorian
# ============================================================

def test_gregorian_leap_years():
    assert GREGORIAN.is_leap_year(2000)
    assert not GREGORIAN.is_leap_year(1900)
    assert GREGORIAN.is_leap_year(2024)
    assert not GREGORIAN.is_leap_year(2023)
    assert GREGORIAN.is_leap_year(0)
    assert GREGORIAN.month_length(2, 2024) == 29
    assert GREGORIAN.month_length(2, 1900) == 28


def test_gregorian_fixed_days():
    assert gregorian_rd(1, 1, 1) == 1
    assert gregorian_rd(2000, 1, 1) == 730120
    assert gregorian_rd(1945, 11, 12) == 710347
    assert gregorian_year_from_rd(gregorian_rd(2000, 12, 31)) == 2000
    assert gregorian_year_from_rd(gregorian_rd(2001, 1, 1)) == 2001
    assert gregorian_year_from_rd(0) == 0
    assert gregorian_year_from_rd(-365) == 0
    assert gregorian_year_from_rd(-366) == -1


def test_gregorian_leap_day_plus_one():
    d = greg(2024, 2, 29, hour=10)
    nxt = d.plus_days(1)
    assert ymd(nxt) == (2024, 3, 1)
    assert nxt.hour == 10
    assert nxt.day_of_year() == 61


def test_gregorian_julian_day_and_weekday():
    d = greg(2000, 1, 1, hour=12)
    assert d.julian_day() == 2451545.0
    assert d.day_of_week() == 6
    assert d.is_leap_year()
    assert d.months_in_year() == 12
    assert d.days_in_month() == 31


def test_gregorian_time_fields():
    d = greg(2024, 5, 17, hour=13, minute=45, second=30, millisecond=250)
    assert (d.hour, d.minute, d.second, d.millisecond) == (13, 45, 30, 250)
    assert d.fields.time_of_day_ms() == ((13 * 60 + 45) * 60 + 30) * 1000 + 250


def test_gregorian_era():
    assert greg(1, 1, 1).era() == 1
    assert greg(0, 12, 31).era() == -1


def test_gregorian_navigation():
    d = greg(2024, 5, 15)  # a Wednesday
    assert d.day_of_week() == 3
    assert ymd(d.on_or_before(0)) == (2024, 5, 12)
    assert ymd(d.on_or_after(0)) == (2024, 5, 19)
    assert ymd(d.before(3)) == (2024, 5, 8)
    assert ymd(d.after(3)) == (2024, 5, 22)
    assert ymd(d.on_or_after(3)) == (2024, 5, 15)


def test_ordering_and_equality():
    a = greg(2024, 1, 1)
    b = greg(2024, 1, 2)
    assert a < b and b > a and a <= a and b >= a
    assert a == JulianDate.from_date(JULIAN, a)
    assert len({a, JulianDate.from_date(JULIAN, a)}) == 1


# ============================================================
# Julian
# ============================================================

def test_julian_gregorian_reform():
    g = greg(1582, 10, 15)
    j = g.convert(JulianDate, JULIAN)
    assert ymd(j) == (1582, 10, 5)
    assert j.day_of_week() == g.day_of_week() == 5


def test_julian_leap_years():
    assert JULIAN.is_leap_year(1900)
    assert JULIAN.is_leap_year(-1)
    assert JULIAN.is_leap_year(-5)
    assert not JULIAN.is_leap_year(-4)


def test_julian_has_no_year_zero():
    assert JULIAN.num_months(0) == 0
    assert julian_rd(-1, 12, 31) + 1 == julian_rd(1, 1, 1)
    with pytest.raises(InvalidDateComponents):
        JulianDate.from_fields(JULIAN, year=0, month=1, day=1)
    d = JulianDate.from_fields(JULIAN, year=1, month=1, day=1).plus_days(-1)
    assert ymd(d) == (-1, 12, 31)
    assert d.era() == -1


# ============================================================
# Islamic
# ============================================================

def test_islamic_epoch():
    d = IslamicDate.from_fields(ISLAMIC, year=1, month=1, day=1)
    assert d.rd.value == 0
    assert d.day_of_week() == 5  # Friday
    assert ymd(d.convert(JulianDate, JULIAN)) == (622, 7, 16)
    g = d.convert(GregorianDate, GREGORIAN)
    assert ymd(g) == (622, 7, 19)
    assert g.rd.value == GREGORIAN_DIFF


def test_islamic_ramadan_1445():
    d = IslamicDate.from_fields(ISLAMIC, year=1445, month=9, day=1)
    assert ymd(d.convert(GregorianDate, GREGORIAN)) == (2024, 3, 11)


def test_islamic_leap_years():
    leaps = [y for y in range(1, 31) if ISLAMIC.is_leap_year(y)]
    assert leaps == [2, 5, 7, 10, 13, 16, 18, 21, 24, 26, 29]
    assert ISLAMIC.month_length(12, 1445) == 30
    assert ISLAMIC.month_length(12, 1446) == 29
    assert ISLAMIC.days_in_year(1445) == 355


def test_islamic_last_day_of_leap_year():
    d = IslamicDate.from_fields(ISLAMIC, year=1445, month=12, day=30)
    assert ymd(d) == (1445, 12, 30)
    assert ymd(d.plus_days(1)) == (1446, 1, 1)


# ============================================================
# Ethiopic / Coptic
# ============================================================

def test_ethiopic_and_coptic_new_year_2023():
    e = EthiopicDate.from_fields(ETHIOPIC, year=2016, month=1, day=1)
    c = CopticDate.from_fields(COPTIC, year=1740, month=1, day=1)
    assert e == c
    assert ymd(e.convert(GregorianDate, GREGORIAN)) == (2023, 9, 12)
    assert e.day_of_week() == 2  # Tuesday


def test_ethiopic_epagomenal_month():
    assert ETHIOPIC.is_leap_year(2015)
    assert ETHIOPIC.month_length(13, 2015) == 6
    assert ETHIOPIC.month_length(13, 2016) == 5
    d = EthiopicDate.from_fields(ETHIOPIC, year=2015, month=13, day=6)
    assert ymd(d.plus_days(1)) == (2016, 1, 1)
    with pytest.raises(InvalidDateComponents):
        EthiopicDate.from_fields(ETHIOPIC, year=2016, month=13, day=6)


# ============================================================
# Hebrew
# ============================================================

def test_hebrew_leap_years():
    leaps = [y for y in range(5701, 5720) if HEBREW.is_leap_year(y)]
    assert sorted(y % 19 for y in leaps) == [0, 3, 6, 8, 11, 14, 17]
    assert HEBREW.is_leap_year(5784)
    assert HEBREW.num_months(5784) == 13
    assert HEBREW.num_months(5785) == 12


def test_hebrew_rosh_hashanah():
    d = HebrewDate.from_fields(HEBREW, year=5784, month=7, day=1, hour=12)
    g = d.convert(GregorianDate, GREGORIAN)
    assert ymd(g) == (2023, 9, 16)
    assert g.hour == 12
    assert d.day_of_week() == 6
    nxt = HebrewDate.from_fields(HEBREW, year=5785, month=7, day=1, hour=12)
    assert ymd(nxt.convert(GregorianDate, GREGORIAN)) == (2024, 10, 3)


def test_hebrew_year_lengths():
    assert hebrew_days_in_year(5783) == 355
    assert hebrew_days_in_year(5784) == 383
    assert hebrew_days_in_year(5786) == 354
    assert long_heshvan(5783) and long_kislev(5783)
    assert not long_heshvan(5784) and not long_kislev(5784)
    assert HEBREW.month_length(8, 5784) == 29
    assert HEBREW.month_length(9, 5784) == 29
    assert HEBREW.month_length(12, 5784) == 30
    assert HEBREW.month_length(13, 5784) == 29
    assert HEBREW.month_length(12, 5785) == 29
    assert HEBREW.month_length(13, 5785) == 0


def test_hebrew_passover_5784():
    d = HebrewDate.from_fields(HEBREW, year=5784, month=1, day=15, hour=12)
    assert ymd(d.convert(GregorianDate, GREGORIAN)) == (2024, 4, 23)


def test_hebrew_day_starts_at_six_pm():
    eve = HebrewDate.from_fields(HEBREW, year=5784, month=7, day=1, hour=19)
    g = eve.convert(GregorianDate, GREGORIAN)
    assert ymd(g) == (2023, 9, 15)
    assert g.hour == 19
    assert (eve.year, eve.month, eve.day, eve.hour) == (5784, 7, 1, 19)
    # same civil day, before 18:00, is still the previous Hebrew date
    before = greg(2023, 9, 15, hour=17).convert(HebrewDate, HEBREW)
    assert (before.year, before.month, before.day) == (5783, 6, 29)


def test_hebrew_long_heshvan_round_trip():
    # 5783 has a 30-day Heshvan
    d = HebrewDate.from_fields(HEBREW, year=5783, month=8, day=30)
    assert (d.month, d.day) == (8, 30)
    assert (d.plus_days(1).month, d.plus_days(1).day) == (9, 1)


def test_hebrew_parts():
    d = HebrewDate.from_fields(HEBREW, year=5784, month=7, day=10, hour=3, parts=540)
    assert (d.hour, d.minute, d.second) == (3, 30, 0)
    assert d.halaqim() == pytest.approx(540)
    one = HebrewDate.from_fields(HEBREW, year=5784, month=7, day=10, hour=3, parts=1)
    assert (one.minute, one.second, one.millisecond) == (0, 3, 333)
    with pytest.raises(InvalidDateComponents):
        HebrewDate.from_fields(HEBREW, year=5784, month=7, day=10, parts=1080)


def test_hebrew_day_of_year_counts_from_tishri():
    assert HEBREW.day_of_year(DateFields(5784, 7, 1)) == 1
    assert HEBREW.day_of_year(DateFields(5784, 6, 29)) == 383


# ============================================================
# Persian (arithmetic)
# ============================================================

def test_persian_algo_nowruz():
    d = PersianAlgoDate.from_fields(PERSIAN_ALGO, year=1403, month=1, day=1)
    assert ymd(d.convert(GregorianDate, GREGORIAN)) == (2024, 3, 20)
    assert not PERSIAN_ALGO.is_leap_year(1403)
    assert PERSIAN_ALGO.is_leap_year(1404)
    assert PERSIAN_ALGO.month_length(12, 1404) == 30
    assert PERSIAN_ALGO.month_length(7, 1404) == 30
    assert PERSIAN_ALGO.month_length(6, 1404) == 31


def test_persian_algo_last_day_of_leap_year():
    d = PersianAlgoDate.from_fields(PERSIAN_ALGO, year=1404, month=12, day=30)
    assert ymd(d) == (1404, 12, 30)
    assert d.day_of_year() == 366
    assert ymd(d.plus_days(1)) == (1405, 1, 1)


def test_persian_algo_year_zero():
    assert PERSIAN_ALGO.num_months(0) == 0
    d = PersianAlgoDate.from_fields(PERSIAN_ALGO, year=1, month=1, day=1)
    assert d.rd.value == 1
    assert d.plus_days(-1).year == -1


# ============================================================
# Thai solar
# ============================================================

def test_thai_solar_offsets():
    t = ThaiSolarDate.from_fields(THAI_SOLAR, year=2567, month=1, day=1)
    g = t.convert(GregorianDate, GREGORIAN)
    assert ymd(g) == (2024, 1, 1)
    assert t.rd.value == g.rd.value + DAY_OFFSET
    assert THAI_SOLAR.is_leap_year(2567)
    assert t.day_of_week() == g.day_of_week() == 1
    assert THAI_SOLAR.month_length(2, 2567) == 29


def test_thai_solar_wraps_gregorian_policy():
    assert not isinstance(THAI_SOLAR, GregorianPolicy)
    assert THAI_SOLAR.base is GREGORIAN
    assert THAI_SOLAR.days_in_year(2543) == 366
    assert THAI_SOLAR.fields_from_rd(DAY_OFFSET + 1) == DateFields(544, 1, 1)
    with pytest.raises(InvalidDateComponents):
        ThaiSolarDate.from_fields(THAI_SOLAR, year=2566, month=2, day=29)
