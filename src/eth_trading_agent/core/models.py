"""
Core data models for the trading tools.
All on-chain amounts are raw integers internally; display strings are derived.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from eth_trading_agent.core.errors import TradingError
from eth_trading_agent.core.precision import to_decimal, to_display

NATIVE_DECIMALS = 18
WEI_PER_ETH = 10**NATIVE_DECIMALS


class TokenDescriptor(BaseModel):
    """A fungible token. `address` is None for the native asset."""
    model_config = ConfigDict(frozen=True)

    symbol: str
    address: str | None = None
    decimals: int = Field(ge=0, le=255)
    wrapped_symbol: str | None = None  # native asset only, e.g. "WETH"

    @property
    def is_native(self) -> bool:
        return self.address is None

    def amount(self, raw: int) -> Amount:
        return Amount(raw=raw, decimals=self.decimals)


class Amount(BaseModel):
    """A raw smallest-unit integer paired with its decimal count."""
    model_config = ConfigDict(frozen=True)

    raw: int = Field(ge=0)
    decimals: int = Field(ge=0, le=255)

    @property
    def display(self) -> str:
        """Human-readable amount, exact."""
        return to_display(self.raw, self.decimals)

    @property
    def value(self) -> Decimal:
        """Exact Decimal value of the amount."""
        return to_decimal(self.raw, self.decimals)


class PoolReserves(BaseModel):
    """Snapshot of a liquidity pool's reserves, base/quote as requested by the caller."""
    model_config = ConfigDict(frozen=True)

    pool_address: str
    base_token: TokenDescriptor
    quote_token: TokenDescriptor
    reserve_base: Amount
    reserve_quote: Amount

    @property
    def is_empty(self) -> bool:
        return self.reserve_base.raw == 0 or self.reserve_quote.raw == 0


class BalanceResult(BaseModel):
    """Result of the get_balance tool."""
    model_config = ConfigDict(frozen=True)

    address: str
    balance: str
    decimals: int
    raw: str
    token_type: str


class PriceResult(BaseModel):
    """Result of the get_token_price tool."""
    model_config = ConfigDict(frozen=True)

    quote_currency: str
    price: str
    timestamp: int
    token: str | None = None


class SwapSimulationResult(BaseModel):
    """Result of the swap_tokens tool. Never describes a submitted transaction."""
    model_config = ConfigDict(frozen=True)

    from_token: str
    to_token: str
    input_amount: str
    estimated_output: str
    min_output: str
    gas_cost_native: str
    slippage_percentage: str
    simulation_success: bool
    error: str | None = None
    estimate_method: Literal["constant_product", "spot_rate_fallback"] | None = None
    gas_estimate_method: Literal["estimated", "fallback"] | None = None
    notes: list[str] = Field(default_factory=list)


class ToolResponse(BaseModel):
    """Envelope returned by every tool entry point."""
    success: bool
    data: dict[str, Any] | None = None
    error: dict[str, str] | None = None

    @classmethod
    def ok(cls, result: BaseModel) -> ToolResponse:
        return cls(success=True, data=result.model_dump())

    @classmethod
    def fail(cls, exc: TradingError) -> ToolResponse:
        return cls(success=False, error=exc.to_dict())


T = TypeVar("T")


@dataclass(frozen=True)
class Estimate(Generic[T]):
    """
    Outcome of a best-effort chain read.

    status:
      - "ok":        `value` is precise
      - "degraded":  `value` is a fallback; `reason` says why
      - "error":     no value; `error` holds the failure
    """
    status: Literal["ok", "degraded", "error"]
    value: T | None = None
    reason: str | None = None
    error: TradingError | None = None

    @classmethod
    def ok(cls, value: T) -> Estimate[T]:
        return cls(status="ok", value=value)

    @classmethod
    def degraded(cls, value: T, reason: str) -> Estimate[T]:
        return cls(status="degraded", value=value, reason=reason)

    @classmethod
    def failed(cls, error: TradingError) -> Estimate[T]:
        return cls(status="error", error=error)

    @property
    def is_ok(self) -> bool:
        return self.status == "ok"

    @property
    def is_degraded(self) -> bool:
        return self.status == "degraded"

    def unwrap(self) -> T:
        """Return the value, or raise the stored error."""
        if self.status == "error":
            raise self.error  # type: ignore[misc]
        return self.value  # type: ignore[return-value]
