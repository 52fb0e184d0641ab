"""
Ethereum address utilities.

Addresses are 20-byte values written as "0x" + 40 hex characters. Mixed case
is accepted without verifying the EIP-55 checksum; checksummed output is
produced with eth_utils for display.
"""

from __future__ import annotations

import re

from eth_utils import to_checksum_address

from eth_trading_agent.core.errors import InvalidAddress

_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")

ZERO_ADDRESS = "0x" + "00" * 20

# Reserved pseudo-address used by aggregators for the native asset
NATIVE_PSEUDO_ADDRESS = "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee"


def is_valid_address(address: str) -> bool:
    """Check address syntax without raising. Checksum is not enforced."""
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None


def normalize_address(address: str) -> str:
    """
    Validate an address and return its lowercase form.

    Raises:
        InvalidAddress: if the value is not "0x" followed by 40 hex characters
    """
    if not is_valid_address(address):
        raise InvalidAddress(f"Invalid Ethereum address: {address!r}")
    return address.lower()


def checksum_address(address: str) -> str:
    """Return the EIP-55 checksummed form of a valid address."""
    return to_checksum_address(normalize_address(address))


def is_zero_address(address: str) -> bool:
    return address.lower() == ZERO_ADDRESS


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Order two token addresses the way Uniswap V2 orders token0/token1."""
    a = normalize_address(token_a)
    b = normalize_address(token_b)
    return (a, b) if int(a, 16) < int(b, 16) else (b, a)
