"""
Spot prices from Uniswap V2 reserves.

A token is priced against WETH through its canonical pool, then converted to
USD through the WETH/USDC pool:

    price_in_eth  = reserve_weth / reserve_token
    price_in_usd  = price_in_eth * (reserve_usdc / reserve_weth)

Both reserves are decimal-normalised before dividing, so a 6-decimal stable
against 18-decimal WETH prices correctly. Arithmetic is done on exact
rationals and the result is truncated to PRICE_DECIMALS fractional digits.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from enum import Enum
from fractions import Fraction

from eth_trading_agent.core.chain import read_concurrently
from eth_trading_agent.core.errors import InvalidArgument, TokenNotRegistered
from eth_trading_agent.core.models import PoolReserves, PriceResult, TokenDescriptor
from eth_trading_agent.core.precision import to_display
from eth_trading_agent.core.tokens import TokenRegistry
from eth_trading_agent.defi.uniswap import UniswapV2

logger = logging.getLogger("eth_trading_agent.pricing")

PRICE_DECIMALS = 18

# stablecoin whose WETH pool defines the USD price
USD_REFERENCE_SYMBOL = "USDC"


class QuoteCurrency(str, Enum):
    USD = "USD"
    ETH = "ETH"

    @classmethod
    def parse(cls, value: str | None) -> QuoteCurrency:
        if value is None:
            return cls.USD
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidArgument(f"quote_currency must be a string, got {value!r}")
        try:
            return cls(value.strip().upper())
        except ValueError:
            supported = ", ".join(c.value for c in cls)
            raise InvalidArgument(f"Unsupported quote currency {value!r} (supported: {supported})") from None


def spot_price(reserves: PoolReserves) -> Fraction:
    """Price of one base token in quote tokens, from decimal-normalised reserves."""
    return Fraction(reserves.reserve_quote.value) / Fraction(reserves.reserve_base.value)


def format_price(price: Fraction) -> str:
    """Truncate to PRICE_DECIMALS fractional digits, plain notation."""
    return to_display(math.floor(price * 10**PRICE_DECIMALS), PRICE_DECIMALS)


class PriceEngine:
    """
    Usage:
        engine = PriceEngine(pools, registry)
        result = await engine.price(link, "USD")
        print(result.price)              # e.g. "14.237110429880155893"
    """

    def __init__(
        self,
        pools: UniswapV2,
        registry: TokenRegistry,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._pools = pools
        self._registry = registry
        self._clock = clock

    async def price(self, token: TokenDescriptor, quote: str | QuoteCurrency = QuoteCurrency.USD) -> PriceResult:
        """
        Raises:
            InvalidArgument: unsupported quote currency
            PoolNotFound: no usable pool on the pricing route
            ChainUnavailable: the provider failed
        """
        currency = QuoteCurrency.parse(quote)

        if currency is QuoteCurrency.ETH:
            value = await self.price_in_eth(token)
        else:
            eth_price, eth_usd = await read_concurrently(self.price_in_eth(token), self.eth_usd())
            value = eth_price * eth_usd

        result = PriceResult(
            quote_currency=currency.value,
            price=format_price(value),
            timestamp=int(self._clock()),
            token=token.symbol,
        )
        logger.debug(f"Price {token.symbol}/{currency.value} = {result.price}")
        return result

    async def price_in_eth(self, token: TokenDescriptor) -> Fraction:
        """Exact ETH value of one whole `token`."""
        weth = self._weth()
        if token.is_native or token.address == weth.address:
            return Fraction(1)
        reserves = await self._pools.get_pool(token, weth)
        return spot_price(reserves)

    async def eth_usd(self) -> Fraction:
        """USD value of one ETH, read from the WETH/USDC pool."""
        usd = self._registry.by_symbol(USD_REFERENCE_SYMBOL)
        if usd is None:
            raise TokenNotRegistered(f"{USD_REFERENCE_SYMBOL} is not registered; cannot quote in USD")
        reserves = await self._pools.get_pool(self._weth(), usd)
        return spot_price(reserves)

    def _weth(self) -> TokenDescriptor:
        weth = self._registry.by_symbol("WETH")
        if weth is None:
            raise TokenNotRegistered("WETH is not registered")
        return weth
