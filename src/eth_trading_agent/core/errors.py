"""
Error taxonomy for the trading tools.

Every failure an agent can observe is a TradingError subclass carrying a
stable `kind` string. Tool entry points turn these into
{"kind": ..., "message": ...} objects instead of raising them.
"""

from __future__ import annotations

from typing import Any


class TradingError(Exception):
    """Base class for all tool-level failures."""

    kind = "InternalError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


class InvalidAmount(TradingError):
    """Raised when an amount string is malformed or too precise."""
    kind = "InvalidAmount"


class NonPositiveAmount(InvalidAmount):
    kind = "NonPositiveAmount"


class InvalidSlippage(TradingError):
    kind = "InvalidSlippage"


class InvalidAddress(TradingError):
    kind = "InvalidAddress"


class InvalidArgument(TradingError):
    kind = "InvalidArgument"


class UnknownToken(TradingError):
    """Raised when an identifier is neither a known symbol nor an address."""
    kind = "UnknownToken"


class TokenNotRegistered(UnknownToken):
    """Raised for a valid address that is not registered and cannot be introspected."""
    kind = "TokenNotRegistered"


class PoolNotFound(TradingError):
    kind = "PoolNotFound"


class ChainUnavailable(TradingError):
    """Raised when the chain data provider fails or times out."""
    kind = "ChainUnavailable"


class UnknownTool(TradingError):
    kind = "UnknownTool"


class InternalError(TradingError):
    kind = "InternalError"
