"""Tests for rounding helpers."""
from budgetfx.services.money import percentage, round2


def test_round2_basic():
    assert round2(11.111111) == 11.11
    assert round2(80.0) == 80.0
    assert round2(0) == 0.0


def test_round2_half_away_from_zero():
    assert round2(0.125) == 0.13
    assert round2(-0.125) == -0.13


def test_round2_rounds_the_scaled_value():
    # 1.005 * 100 is 100.49999999999999 in binary floating point
    assert round2(1.005) == 1.0


def test_percentage():
    assert percentage(320, 400) == 80.0
    assert percentage(450, 400) == 112.5
    assert percentage(1, 3) == 33.33
    assert percentage(2, 3) == 66.67


def test_percentage_non_positive_whole():
    assert percentage(10, 0) == 0.0
    assert percentage(10, -5) == 0.0
