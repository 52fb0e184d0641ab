"""
Uniswap V2: canonical pool lookup and constant-product math.

A Uniswap V2 pair holds two ERC20 reserves and enforces x * y = k net of a
0.3% fee on the input. One pair exists per token pair, which makes it the
canonical pool for pricing and swap simulation. Native ETH trades through
its WETH pair.

Reference: https://docs.uniswap.org/contracts/v2/concepts/protocol-overview/how-uniswap-works
"""

from __future__ import annotations

import logging

from eth_trading_agent.core.address import is_zero_address, sort_tokens
from eth_trading_agent.core.chain import ChainReader
from eth_trading_agent.core.errors import InvalidArgument, PoolNotFound
from eth_trading_agent.core.models import PoolReserves, TokenDescriptor
from eth_trading_agent.core.tokens import TokenRegistry

logger = logging.getLogger("eth_trading_agent.uniswap")

UNISWAP_V2_FACTORY = "0x5C69bEe701ef814a2B6a3EDD4B1652CB9cc5aA6f"
UNISWAP_V2_ROUTER = "0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D"

# 0.3% pool fee, as in UniswapV2Library.getAmountOut
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """
    Output of an exact-input swap, rounded down exactly like the pair contract.

    amount_in_with_fee = amount_in * 997
    amount_out = amount_in_with_fee * reserve_out // (reserve_in * 1000 + amount_in_with_fee)
    """
    if amount_in <= 0:
        raise InvalidArgument("amount_in must be positive")
    if reserve_in <= 0 or reserve_out <= 0:
        raise PoolNotFound("Pool has no liquidity")
    amount_in_with_fee = amount_in * FEE_NUMERATOR
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * FEE_DENOMINATOR + amount_in_with_fee
    return numerator // denominator


class UniswapV2:
    """
    Reads canonical Uniswap V2 pools.

    Usage:
        pools = UniswapV2(chain, registry)
        reserves = await pools.get_pool(usdc, eth)   # ETH is looked up as WETH
        print(reserves.reserve_base.display, reserves.reserve_quote.display)
    """

    def __init__(
        self,
        chain: ChainReader,
        registry: TokenRegistry,
        factory: str = UNISWAP_V2_FACTORY,
        router: str = UNISWAP_V2_ROUTER,
    ) -> None:
        self._chain = chain
        self._registry = registry
        self.factory = factory.lower()
        self.router = router.lower()

    async def get_pool(self, base: TokenDescriptor, quote: TokenDescriptor) -> PoolReserves:
        """
        Fetch reserves of the canonical (base, quote) pool.

        Raises:
            InvalidArgument: base and quote are the same token
            PoolNotFound: no pair exists, or it has no liquidity
            ChainUnavailable: the provider failed
        """
        base = self._registry.wrapped(base)
        quote = self._registry.wrapped(quote)
        if base.address == quote.address:
            raise InvalidArgument(f"No pool between {base.symbol} and itself")

        pair = await self._chain.get_pair(self.factory, base.address, quote.address)  # type: ignore[arg-type]
        if is_zero_address(pair):
            raise PoolNotFound(f"No Uniswap V2 pool for {base.symbol}/{quote.symbol}")

        reserve0, reserve1 = await self._chain.get_reserves(pair)
        token0, _ = sort_tokens(base.address, quote.address)  # type: ignore[arg-type]
        reserve_base, reserve_quote = (reserve0, reserve1) if token0 == base.address else (reserve1, reserve0)

        reserves = PoolReserves(
            pool_address=pair,
            base_token=base,
            quote_token=quote,
            reserve_base=base.amount(reserve_base),
            reserve_quote=quote.amount(reserve_quote),
        )
        if reserves.is_empty:
            raise PoolNotFound(f"Uniswap V2 pool {base.symbol}/{quote.symbol} has no liquidity")
        logger.debug(
            f"Pool {base.symbol}/{quote.symbol} at {pair}: "
            f"{reserves.reserve_base.display} / {reserves.reserve_quote.display}"
        )
        return reserves
