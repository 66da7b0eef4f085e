# tests/test_ratadie.py

import random

import pytest

from calkit.calendars.ethiopic import COPTIC_EPOCH, ETHIOPIC_EPOCH
from calkit.calendars.gregorian import GREGORIAN
from calkit.calendars.hebrew import HEBREW_EPOCH
from calkit.calendars.islamic import ISLAMIC_EPOCH
from calkit.calendars.julian import JULIAN_EPOCH
from calkit.calendars.persian_algo import PERSIAN_EPOCH
from calkit.calendars.thaisolar import THAI_SOLAR_EPOCH
from calkit.core.errors import UnrepresentableUnixTime
from calkit.core.ratadie import (
    GREGORIAN_EPOCH,
    UNIX_EPOCH,
    JulianDay,
    RataDie,
    round_to_ms,
    weekday_shift,
)
from calkit.core.types import DateFields

ALL_EPOCHS = [
    GREGORIAN_EPOCH,
    JULIAN_EPOCH,
    ETHIOPIC_EPOCH,
    COPTIC_EPOCH,
    HEBREW_EPOCH,
    ISLAMIC_EPOCH,
    PERSIAN_EPOCH,
    THAI_SOLAR_EPOCH,
]

# 2000-01-01, a Saturday
RD_2000 = 730120


def test_julian_day_of_rd():
    assert RataDie(1).julian_day() == 1721425.5
    assert RataDie.from_julian_day(2451545.0).value == 730120.5


def test_values_rounded_to_ms():
    rd = RataDie(0.1 + 0.2)
    assert rd.value == round_to_ms(0.3)
    assert RataDie(1 / 3).value * 86400000 == pytest.approx(28800000)


def test_rebased_is_same_instant():
    random.seed(7)
    for _ in range(200):
        jd = random.uniform(1000000, 3000000)
        rd = RataDie.from_julian_day(jd)
        for epoch in ALL_EPOCHS:
            other = rd.rebased(epoch)
            assert other == rd
            assert other.julian_day() == pytest.approx(rd.julian_day(), abs=1e-6)
            assert other.normalized().value == pytest.approx(rd.value, abs=1e-6)


def test_ordering_across_epochs():
    assert RataDie(5, JULIAN_EPOCH) < RataDie(5, GREGORIAN_EPOCH)
    assert RataDie(7, JULIAN_EPOCH) == RataDie(5, GREGORIAN_EPOCH)
    assert hash(RataDie(7, JULIAN_EPOCH)) == hash(RataDie(5, GREGORIAN_EPOCH))


def test_from_fields():
    assert RataDie.from_fields(GREGORIAN, DateFields(2000, 1, 1)) == RataDie(RD_2000)


def test_julian_day_parts():
    jd = JulianDay(2451545.25)
    assert jd.days == 2451545
    assert jd.frac == pytest.approx(0.25)
    assert jd.plus(1).value == 2451546.25
    neg = JulianDay(-0.25)
    assert neg.days == -1
    assert neg.frac == pytest.approx(0.75)
    assert jd.to_rata_die() == RataDie.from_julian_day(2451545.25)
    assert RataDie(RD_2000).julian().days == 2451544


def test_unix_millis():
    assert RataDie.from_unix_millis(0).julian_day() == UNIX_EPOCH
    assert RataDie.from_julian_day(2440588.5).unix_millis() == 86400000
    assert RataDie.from_unix_millis(1700000000000).unix_millis() == 1700000000000


def test_unix_millis_out_of_range():
    before_1970 = RataDie.from_julian_day(2440586.5)
    with pytest.raises(UnrepresentableUnixTime):
        before_1970.unix_millis()
    assert before_1970.extended_unix_millis() == -86400000
    with pytest.raises(UnrepresentableUnixTime):
        RataDie.from_julian_day(2470000.5).unix_millis()
    with pytest.raises(UnrepresentableUnixTime):
        RataDie.from_julian_day(-1e9).extended_unix_millis()


def test_unix_millis_is_also_overflow_error():
    with pytest.raises(OverflowError):
        RataDie.from_julian_day(0).unix_millis()


def test_weekday_shifts():
    assert weekday_shift(GREGORIAN_EPOCH) == 0
    assert weekday_shift(JULIAN_EPOCH) == 5     # -2
    assert weekday_shift(ISLAMIC_EPOCH) == 5    # -2
    assert weekday_shift(PERSIAN_EPOCH) == 4    # -3
    assert weekday_shift(COPTIC_EPOCH) == 4     # -3
    assert weekday_shift(ETHIOPIC_EPOCH) == 2   # -5
    assert weekday_shift(HEBREW_EPOCH) == 1


def test_day_of_week_same_in_every_epoch():
    random.seed(11)
    for _ in range(300):
        # civil noon, away from the 18:00 Hebrew day boundary
        jd = float(random.randint(1800000, 2800000))
        expected = int((jd + 1.5) // 1) % 7
        for epoch in ALL_EPOCHS:
            assert RataDie.from_julian_day(jd, epoch=epoch).day_of_week() == expected


def test_known_weekday():
    assert RataDie(RD_2000).day_of_week() == 6
    assert RataDie(RD_2000 + 0.75).day_of_week() == 6
    # 23:00 UTC is already Sunday at UTC+2
    assert RataDie(RD_2000 + 23 / 24).day_of_week(offset=2 / 24) == 0


def test_navigation():
    rd = RataDie(RD_2000)
    assert rd.on_or_before(0) == RataDie(RD_2000 - 6)
    assert rd.on_or_after(0) == RataDie(RD_2000 + 1)
    assert rd.on_or_before(6) == rd
    assert rd.on_or_after(6) == rd
    assert rd.before(6) == RataDie(RD_2000 - 7)
    assert rd.after(6) == RataDie(RD_2000 + 7)


def test_navigation_keeps_time_of_day():
    rd = RataDie(RD_2000 + 0.5)
    assert rd.on_or_before(0).value == RD_2000 - 6 + 0.5


def test_navigation_in_other_epochs():
    random.seed(3)
    for _ in range(100):
        jd = random.randint(2000000, 2600000) + 0.5
        for epoch in ALL_EPOCHS:
            rd = RataDie.from_julian_day(jd, epoch=epoch)
            for dow in range(7):
                before = rd.on_or_before(dow)
                after = rd.after(dow)
                assert before.day_of_week() == dow
                assert after.day_of_week() == dow
                assert 0 <= rd.julian_day() - before.julian_day() < 7
                assert 0 < after.julian_day() - rd.julian_day() <= 7


@pytest.mark.parametrize("epoch", ALL_EPOCHS)
def test_on_or_after_within_a_week(epoch):
    random.seed(11)
    for _ in range(400):
        jd = random.randint(2000000, 2600000) + random.choice((0.0, 0.25, 0.5, 0.75))
        rd = RataDie.from_julian_day(jd, epoch=epoch)
        for dow in range(7):
            nxt = rd.on_or_after(dow)
            assert nxt.day_of_week() == dow
            assert 0 <= nxt.julian_day() - rd.julian_day() <= 6
            if rd.day_of_week() == dow:
                assert nxt == rd
