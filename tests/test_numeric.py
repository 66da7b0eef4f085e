# tests/test_numeric.py

import pytest

from calkit.core import numeric as nu


def test_mod_is_never_negative():
    assert nu.mod(-1, 7) == 6
    assert nu.mod(-7, 7) == 0
    assert nu.mod(7, 7) == 0
    assert nu.mod(13, 7) == 6
    assert nu.mod(-5.5, 2) == pytest.approx(0.5)
    assert nu.mod(5.5, 2) == pytest.approx(1.5)


def test_mod_keeps_ints():
    assert isinstance(nu.mod(-10, 3), int)
    assert isinstance(nu.amod(-10, 3), int)


def test_zero_modulus():
    assert nu.mod(5, 0) == 0
    assert nu.amod(5, 0) == 0


def test_amod_range():
    assert nu.amod(12, 12) == 12
    assert nu.amod(0, 12) == 12
    assert nu.amod(13, 12) == 1
    assert nu.amod(-1, 12) == 11
    for x in range(-50, 50):
        assert 1 <= nu.amod(x, 12) <= 12


@pytest.mark.parametrize(
    "mode,value,expected",
    [
        ("floor", -2.5, -3),
        ("ceiling", -2.5, -2),
        ("down", -2.7, -2),
        ("down", 2.7, 2),
        ("up", -2.2, -3),
        ("up", 2.2, 3),
        ("halfup", 2.5, 3),
        ("halfup", -2.5, -3),
        ("halfdown", 2.5, 2),
        ("halfdown", -2.5, -2),
        ("halfeven", 2.5, 2),
        ("halfeven", 3.5, 4),
        ("halfeven", 2.6, 3),
        ("halfodd", 2.5, 3),
        ("halfodd", 3.5, 3),
    ],
)
def test_rounding_modes(mode, value, expected):
    assert nu.rounding(mode)(value) == expected


def test_unknown_rounding_mode_lists_available():
    with pytest.raises(KeyError, match="halfeven"):
        nu.rounding("banker")


def test_shift_decimal_is_exact():
    assert nu.shift_decimal(1.005, 2) == 100.5
    assert nu.shift_decimal(100.5, -2) == 1.005
    assert nu.shift_decimal(12, 0) == 12.0


def test_significant():
    assert nu.significant(123456, 3) == 123000
    assert nu.significant(0.0012345, 2) == pytest.approx(0.0012)
    assert nu.significant(1.005, 3) == pytest.approx(1.01)
    assert nu.significant(0, 3) == 0
    assert nu.significant(12.5, 0) == 12.5
    # halves round toward positive infinity
    assert nu.significant(1.25, 2) == pytest.approx(1.3)
    assert nu.significant(-1.25, 2) == pytest.approx(-1.2)


def test_signum():
    assert nu.signum(-3) == -1
    assert nu.signum(0) == 1
    assert nu.signum(2.5) == 1
