"""
Unit tests for the amount codec and slippage helpers.
"""

import random
from decimal import Decimal

import pytest

from eth_trading_agent.core.errors import InvalidAmount, InvalidSlippage, NonPositiveAmount
from eth_trading_agent.core.precision import (
    apply_slippage,
    format_decimal,
    parse_slippage,
    to_display,
    to_positive_raw,
    to_raw,
)


def test_to_raw_whole_and_fraction():
    assert to_raw("1", 18) == 10**18
    assert to_raw("1.5", 6) == 1_500_000
    assert to_raw("0.000001", 6) == 1
    assert to_raw(".5", 1) == 5
    assert to_raw("7.", 2) == 700


def test_to_raw_accepts_trailing_fractional_zeros():
    assert to_raw("1.500000000", 6) == 1_500_000
    assert to_raw("12.000", 0) == 12


def test_to_raw_rejects_excess_precision():
    with pytest.raises(InvalidAmount, match="fractional digits"):
        to_raw("1.0000001", 6)


@pytest.mark.parametrize("bad", ["", ".", "abc", "1.2.3", "-1", "+1", "1e18", " 1", "1,5", "١"])
def test_to_raw_rejects_malformed(bad):
    with pytest.raises(InvalidAmount):
        to_raw(bad, 18)


def test_to_raw_rejects_trailing_newline():
    with pytest.raises(InvalidAmount):
        to_raw("1\n", 18)
    with pytest.raises(InvalidAmount):
        to_raw("1.5\n", 6)


def test_to_raw_digit_limit():
    # leading zeros do not count towards the limit
    assert to_raw("0" * 500 + "1", 18) == 10**18
    assert to_raw("9" * 78, 0) == 10**78 - 1
    with pytest.raises(InvalidAmount, match="integer digits"):
        to_raw("9" * 79, 0)
    with pytest.raises(InvalidAmount):
        to_raw("9" * 5000, 18)


def test_to_raw_rejects_non_string():
    with pytest.raises(InvalidAmount):
        to_raw(1.5, 18)


def test_to_display_is_minimal_and_exact():
    assert to_display(0, 18) == "0"
    assert to_display(1_500_000, 6) == "1.5"
    assert to_display(5_123_456_789_012_345_678, 18) == "5.123456789012345678"
    assert to_display(1, 18) == "0.000000000000000001"
    assert to_display(42, 0) == "42"


def test_to_display_rejects_negative():
    with pytest.raises(InvalidAmount):
        to_display(-1, 18)


def test_round_trip_random():
    rng = random.Random(1234)
    for _ in range(500):
        decimals = rng.randint(0, 18)
        raw = rng.choice([0, 1, 10**decimals, rng.randint(0, 10**30)])
        assert to_raw(to_display(raw, decimals), decimals) == raw


def test_huge_values_stay_exact():
    raw = 2**256 - 1
    assert to_raw(to_display(raw, 18), 18) == raw


def test_to_positive_raw():
    assert to_positive_raw("0.1", 18) == 10**17
    with pytest.raises(NonPositiveAmount):
        to_positive_raw("0", 18)
    with pytest.raises(NonPositiveAmount):
        to_positive_raw("0.000", 6)
    with pytest.raises(NonPositiveAmount):
        to_positive_raw("-1", 18)
    # NonPositiveAmount is an InvalidAmount
    with pytest.raises(InvalidAmount):
        to_positive_raw("0", 18)


def test_format_decimal():
    assert format_decimal(Decimal("0.50")) == "0.5"
    assert format_decimal(Decimal("1E+3")) == "1000"
    assert format_decimal(Decimal("0")) == "0"
    assert format_decimal(Decimal("2.000")) == "2"


@pytest.mark.parametrize("value, expected", [(0.5, "0.5"), ("1", "1"), (0, "0"), (0.1, "0.1"), ("99.99", "99.99")])
def test_parse_slippage_valid(value, expected):
    assert parse_slippage(value) == Decimal(expected)


@pytest.mark.parametrize("value", [-0.1, 100, 150, "abc", float("nan"), float("inf"), True, None])
def test_parse_slippage_invalid(value):
    with pytest.raises(InvalidSlippage):
        parse_slippage(value)


def test_apply_slippage_rounds_down():
    assert apply_slippage(2_475_000_000, Decimal("0.5")) == 2_462_625_000
    assert apply_slippage(999, Decimal("0.5")) == 994  # 994.005
    assert apply_slippage(1, Decimal("0.1")) == 0
    assert apply_slippage(12345, Decimal("0")) == 12345


def test_apply_slippage_monotonic():
    estimated = 987_654_321_987
    previous = estimated
    for step in range(0, 1000):
        slippage = Decimal(step) / 10
        minimum = apply_slippage(estimated, slippage)
        assert minimum <= previous
        assert minimum <= estimated
        previous = minimum
