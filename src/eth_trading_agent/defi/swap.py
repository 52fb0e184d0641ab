"""
Read-only swap simulation.

Nothing is signed or submitted. A simulation validates its inputs, then reads
the wallet balance, the pool reserves and a gas estimate concurrently and
combines them into a SwapSimulationResult.

Output is estimated with Uniswap V2's constant-product formula. When the
direct pool is missing or unreadable, the simulator falls back to the spot
rate between both tokens (each priced in ETH) minus a fixed discount, and
says so in `estimate_method` and `notes`.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from decimal import Decimal
from fractions import Fraction
from typing import Any

from eth_trading_agent.core.address import normalize_address
from eth_trading_agent.core.chain import (
    SWAP_EXACT_ETH_FOR_TOKENS,
    SWAP_EXACT_TOKENS_FOR_ETH,
    SWAP_EXACT_TOKENS_FOR_TOKENS,
    ChainReader,
    encode_call,
    read_concurrently,
)
from eth_trading_agent.core.errors import (
    ChainUnavailable,
    InvalidArgument,
    PoolNotFound,
    TradingError,
)
from eth_trading_agent.core.models import NATIVE_DECIMALS, Estimate, SwapSimulationResult, TokenDescriptor
from eth_trading_agent.core.precision import apply_slippage, format_decimal, parse_slippage, to_display, to_positive_raw
from eth_trading_agent.core.tokens import TokenRegistry
from eth_trading_agent.defi.pricing import PriceEngine
from eth_trading_agent.defi.uniswap import UniswapV2, get_amount_out

logger = logging.getLogger("eth_trading_agent.swap")

DEFAULT_FALLBACK_GAS_LIMIT = 150_000
DEFAULT_FALLBACK_GAS_PRICE_WEI = 20 * 10**9
DEFAULT_FALLBACK_DISCOUNT_PCT = Decimal("1")
DEADLINE_SECONDS = 20 * 60

CONSTANT_PRODUCT = "constant_product"
SPOT_RATE_FALLBACK = "spot_rate_fallback"


class SwapSimulator:
    """
    Usage:
        simulator = SwapSimulator(chain, registry, pools, prices)
        result = await simulator.simulate(eth, usdc, "1", "0.5", wallet)
        if result.simulation_success:
            print(result.estimated_output, result.min_output)
    """

    def __init__(
        self,
        chain: ChainReader,
        registry: TokenRegistry,
        pools: UniswapV2,
        prices: PriceEngine,
        fallback_gas_limit: int = DEFAULT_FALLBACK_GAS_LIMIT,
        fallback_gas_price_wei: int = DEFAULT_FALLBACK_GAS_PRICE_WEI,
        fallback_discount_pct: Decimal = DEFAULT_FALLBACK_DISCOUNT_PCT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._chain = chain
        self._registry = registry
        self._pools = pools
        self._prices = prices
        self.fallback_gas_limit = fallback_gas_limit
        self.fallback_gas_price_wei = fallback_gas_price_wei
        self.fallback_discount_pct = fallback_discount_pct
        self._clock = clock

    async def simulate(
        self,
        from_token: TokenDescriptor,
        to_token: TokenDescriptor,
        amount: str,
        slippage_pct: str | int | float | Decimal,
        wallet: str,
    ) -> SwapSimulationResult:
        """
        Simulate an exact-input swap of `amount` (display units of from_token).

        An insufficient balance is returned as a result with
        simulation_success=False, not raised.

        Raises:
            InvalidAmount / NonPositiveAmount: bad amount
            InvalidSlippage: slippage outside [0, 100)
            InvalidAddress: malformed wallet
            InvalidArgument: from and to are the same asset
            PoolNotFound: no pool and no usable spot-rate fallback
            ChainUnavailable: the provider failed
        """
        # validation: no chain call before this block completes
        raw_in = to_positive_raw(amount, from_token.decimals)
        slippage = parse_slippage(slippage_pct)
        wallet = normalize_address(wallet)
        if self._registry.wrapped(from_token).address == self._registry.wrapped(to_token).address:
            raise InvalidArgument(f"Cannot swap {from_token.symbol} for {to_token.symbol}")

        balance, quote, gas = await read_concurrently(
            self._chain.balance_of(from_token, wallet),
            self._quote(from_token, to_token, raw_in),
            self._gas(from_token, to_token, raw_in, wallet),
        )

        input_display = to_display(raw_in, from_token.decimals)
        if balance < raw_in:
            logger.info(
                f"Swap {input_display} {from_token.symbol} -> {to_token.symbol}: insufficient balance "
                f"({to_display(balance, from_token.decimals)})"
            )
            return SwapSimulationResult(
                from_token=from_token.symbol,
                to_token=to_token.symbol,
                input_amount=input_display,
                estimated_output="0",
                min_output="0",
                gas_cost_native="0",
                slippage_percentage=format_decimal(slippage),
                simulation_success=False,
                error=(
                    f"Insufficient balance: wallet holds {to_display(balance, from_token.decimals)} "
                    f"{from_token.symbol}, swap requires {input_display}"
                ),
            )

        estimated_raw = quote.unwrap()
        gas_limit, gas_price = gas.value  # type: ignore[misc]
        notes = [reason for reason in (quote.reason, gas.reason) if reason]

        result = SwapSimulationResult(
            from_token=from_token.symbol,
            to_token=to_token.symbol,
            input_amount=input_display,
            estimated_output=to_display(estimated_raw, to_token.decimals),
            min_output=to_display(apply_slippage(estimated_raw, slippage), to_token.decimals),
            gas_cost_native=to_display(gas_limit * gas_price, NATIVE_DECIMALS),
            slippage_percentage=format_decimal(slippage),
            simulation_success=True,
            estimate_method=SPOT_RATE_FALLBACK if quote.is_degraded else CONSTANT_PRODUCT,
            gas_estimate_method="fallback" if gas.is_degraded else "estimated",
            notes=notes,
        )
        logger.info(
            f"Swap {input_display} {from_token.symbol} -> {result.estimated_output} {to_token.symbol} "
            f"({result.estimate_method}, gas {result.gas_cost_native} ETH)"
        )
        return result

    # ------------------------------------------------------------------
    # Output estimate
    # ------------------------------------------------------------------

    async def _quote(self, from_token: TokenDescriptor, to_token: TokenDescriptor, raw_in: int) -> Estimate[int]:
        try:
            reserves = await self._pools.get_pool(from_token, to_token)
            amount_out = get_amount_out(raw_in, reserves.reserve_base.raw, reserves.reserve_quote.raw)
            return Estimate.ok(amount_out)
        except (PoolNotFound, ChainUnavailable) as e:
            logger.warning(
                f"No reserve-backed quote for {from_token.symbol}/{to_token.symbol} ({e.message}); "
                f"trying spot-rate fallback"
            )
            original = e

        try:
            amount_out = await self._spot_rate_quote(from_token, to_token, raw_in)
        except TradingError as e:
            logger.warning(f"Spot-rate fallback failed: {e.message}")
            return Estimate.failed(original)
        return Estimate.degraded(
            amount_out,
            f"Direct pool unavailable ({original.message}); output estimated from the spot rate "
            f"via ETH minus a fixed {format_decimal(self.fallback_discount_pct)}% discount. "
            f"This is an approximation, not a reserve-backed quote.",
        )

    async def _spot_rate_quote(self, from_token: TokenDescriptor, to_token: TokenDescriptor, raw_in: int) -> int:
        from_eth, to_eth = await read_concurrently(
            self._prices.price_in_eth(from_token),
            self._prices.price_in_eth(to_token),
        )
        amount_in = Fraction(from_token.amount(raw_in).value)
        discount = (100 - Fraction(self.fallback_discount_pct)) / 100
        amount_out = amount_in * from_eth / to_eth * discount
        return math.floor(amount_out * 10**to_token.decimals)

    # ------------------------------------------------------------------
    # Gas estimate
    # ------------------------------------------------------------------

    async def _gas(
        self,
        from_token: TokenDescriptor,
        to_token: TokenDescriptor,
        raw_in: int,
        wallet: str,
    ) -> Estimate[tuple[int, int]]:
        limit, price = await read_concurrently(
            self._gas_limit(self.router_call(from_token, to_token, raw_in, wallet)),
            self._gas_price(),
        )
        reasons = [reason for reason in (limit.reason, price.reason) if reason]
        value = (limit.value, price.value)
        if reasons:
            return Estimate.degraded(value, "; ".join(reasons))  # type: ignore[arg-type]
        return Estimate.ok(value)  # type: ignore[arg-type]

    async def _gas_limit(self, call: dict[str, Any]) -> Estimate[int]:
        try:
            return Estimate.ok(await self._chain.estimate_gas(call))
        except ChainUnavailable as e:
            logger.warning(f"Gas estimation failed, using {self.fallback_gas_limit} gas: {e.message}")
            return Estimate.degraded(
                self.fallback_gas_limit,
                f"Gas limit could not be estimated; assumed {self.fallback_gas_limit} gas",
            )

    async def _gas_price(self) -> Estimate[int]:
        try:
            return Estimate.ok(await self._chain.gas_price())
        except ChainUnavailable as e:
            logger.warning(f"Gas price unavailable, using {self.fallback_gas_price_wei} wei: {e.message}")
            gwei = to_display(self.fallback_gas_price_wei, 9)
            return Estimate.degraded(
                self.fallback_gas_price_wei,
                f"Gas price could not be read; assumed {gwei} gwei",
            )

    def router_call(
        self,
        from_token: TokenDescriptor,
        to_token: TokenDescriptor,
        raw_in: int,
        wallet: str,
    ) -> dict[str, Any]:
        """
        The Uniswap V2 router call equivalent to the swap, for eth_estimateGas.

        amountOutMin is 0 so the estimate does not depend on slippage.
        """
        path = [
            self._registry.wrapped(from_token).address,
            self._registry.wrapped(to_token).address,
        ]
        deadline = int(self._clock()) + DEADLINE_SECONDS
        call: dict[str, Any] = {"from": wallet, "to": self._pools.router}

        if from_token.is_native:
            call["data"] = encode_call(
                SWAP_EXACT_ETH_FOR_TOKENS,
                ["uint256", "address[]", "address", "uint256"],
                [0, path, wallet, deadline],
            )
            call["value"] = raw_in
        else:
            selector = SWAP_EXACT_TOKENS_FOR_ETH if to_token.is_native else SWAP_EXACT_TOKENS_FOR_TOKENS
            call["data"] = encode_call(
                selector,
                ["uint256", "uint256", "address[]", "address", "uint256"],
                [raw_in, 0, path, wallet, deadline],
            )
        return call
