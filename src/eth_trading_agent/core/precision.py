"""
Exact conversion between raw on-chain integers and human decimal amounts.

All amounts are integers in the token's smallest unit (wei for ETH, 10^-6
USDC for USDC, ...). Conversion to and from display strings is done on the
digit strings themselves so no value ever passes through a binary float.

    to_raw("1.5", 6)            -> 1500000
    to_display(1500000, 6)      -> "1.5"
    apply_slippage(2475000000, Decimal("0.5")) -> 2462625000
"""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from fractions import Fraction

from eth_trading_agent.core.errors import InvalidAmount, InvalidSlippage, NonPositiveAmount

# digits, optionally a single "." and more digits; at least one digit overall
_AMOUNT_RE = re.compile(r"(?P<whole>[0-9]*)(?:\.(?P<frac>[0-9]*))?")

MAX_DECIMALS = 255

# a uint256 has 78 decimal digits
MAX_WHOLE_DIGITS = 78


def _check_decimals(decimals: int) -> None:
    if not isinstance(decimals, int) or isinstance(decimals, bool) or not 0 <= decimals <= MAX_DECIMALS:
        raise InvalidAmount(f"Decimals must be an integer in [0, {MAX_DECIMALS}], got {decimals!r}")


def to_raw(display: str, decimals: int) -> int:
    """
    Convert a human decimal string to a raw integer amount.

    Args:
        display: non-negative plain decimal, e.g. "1", "0.25", "12.000"
        decimals: the token's decimal count

    Returns:
        int: amount in smallest units

    Raises:
        InvalidAmount: malformed input, or more significant fractional
                       digits than the token supports
    """
    _check_decimals(decimals)
    if not isinstance(display, str):
        raise InvalidAmount(f"Amount must be a decimal string, got {type(display).__name__}")

    match = _AMOUNT_RE.fullmatch(display)
    if match is None:
        raise InvalidAmount(f"Invalid amount format: {display!r}")
    whole = match.group("whole")
    frac = (match.group("frac") or "").rstrip("0")
    if not whole and not match.group("frac"):
        raise InvalidAmount(f"Invalid amount format: {display!r}")

    whole = whole.lstrip("0")
    if len(whole) > MAX_WHOLE_DIGITS:
        raise InvalidAmount(f"Amount has {len(whole)} integer digits; at most {MAX_WHOLE_DIGITS} are supported")

    if len(frac) > decimals:
        raise InvalidAmount(
            f"Amount {display!r} has {len(frac)} fractional digits; "
            f"token supports at most {decimals}"
        )

    return int(whole or "0") * 10**decimals + int(frac.ljust(decimals, "0") or "0")


def to_display(raw: int, decimals: int) -> str:
    """
    Convert a raw integer amount to its minimal exact decimal string.

    No trailing zeros, no exponent, no rounding.
    """
    _check_decimals(decimals)
    if not isinstance(raw, int) or isinstance(raw, bool) or raw < 0:
        raise InvalidAmount(f"Raw amount must be a non-negative integer, got {raw!r}")

    whole, remainder = divmod(raw, 10**decimals)
    if not remainder:
        return str(whole)
    frac = str(remainder).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{frac}"


def to_decimal(raw: int, decimals: int) -> Decimal:
    """Exact Decimal value of a raw amount."""
    return Decimal(to_display(raw, decimals))


def format_decimal(value: Decimal) -> str:
    """Render a Decimal in plain notation without trailing zeros."""
    if value.is_zero():
        return "0"
    text = format(value.normalize(), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def parse_slippage(value: str | int | float | Decimal) -> Decimal:
    """
    Parse a slippage percentage (0.5 means 0.5%).

    Floats are converted through their shortest repr so 0.1 stays 0.1.

    Raises:
        InvalidSlippage: not a finite number in [0, 100)
    """
    if isinstance(value, bool):
        raise InvalidSlippage(f"Slippage must be a number, got {value!r}")
    try:
        slippage = Decimal(str(value)) if isinstance(value, (int, float)) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidSlippage(f"Slippage must be a number, got {value!r}") from None

    if not slippage.is_finite() or slippage < 0 or slippage >= 100:
        raise InvalidSlippage(f"Slippage must be within [0, 100), got {value}")
    return slippage


def apply_slippage(raw: int, slippage_pct: Decimal) -> int:
    """
    Minimum acceptable output for a slippage tolerance, rounded down.

    min = floor(raw * (100 - slippage) / 100)
    """
    factor = (100 - Fraction(slippage_pct)) / 100
    return math.floor(raw * factor)


def to_positive_raw(display: str, decimals: int) -> int:
    """
    to_raw() for amounts that must be strictly positive (swap inputs).

    Raises:
        NonPositiveAmount: zero or negative
        InvalidAmount: anything to_raw() rejects
    """
    if isinstance(display, str) and display.strip().startswith("-"):
        raise NonPositiveAmount(f"Amount must be positive, got {display}")
    raw = to_raw(display, decimals)
    if raw == 0:
        raise NonPositiveAmount(f"Amount must be positive, got {display}")
    return raw
