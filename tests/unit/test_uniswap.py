"""
Unit tests for Uniswap V2 pool lookup and constant-product math.
"""

import pytest

from eth_trading_agent.core.chain import ChainReader
from eth_trading_agent.core.errors import ChainUnavailable, InvalidArgument, PoolNotFound
from eth_trading_agent.core.tokens import ETH
from eth_trading_agent.defi.uniswap import UniswapV2, get_amount_out

from conftest import LINK, USDC, WETH


def test_get_amount_out_matches_router():
    # 1 WETH into 98.703 WETH / 247,500 USDC
    assert get_amount_out(10**18, 98_703 * 10**15, 247_500 * 10**6) == 2_475_000_000


def test_get_amount_out_rounds_down():
    # 100 * 997 * 1000 / (1000 * 1000 + 99700) = 90.66...
    assert get_amount_out(100, 1000, 1000) == 90


def test_get_amount_out_never_drains_pool():
    assert get_amount_out(10**30, 10**18, 10**18) < 10**18


def test_get_amount_out_rejects_bad_input():
    with pytest.raises(InvalidArgument):
        get_amount_out(0, 10, 10)
    with pytest.raises(PoolNotFound):
        get_amount_out(1, 0, 10)


@pytest.mark.asyncio
async def test_get_pool_orders_reserves_by_request(chain, registry):
    chain.add_pool(WETH, 1_000 * 10**18, USDC, 2_500_000 * 10**6)
    pools = UniswapV2(ChainReader(chain), registry)
    usdc, weth = registry.by_symbol("USDC"), registry.by_symbol("WETH")

    forward = await pools.get_pool(weth, usdc)
    backward = await pools.get_pool(usdc, weth)

    assert forward.reserve_base.raw == 1_000 * 10**18
    assert forward.reserve_quote.raw == 2_500_000 * 10**6
    assert backward.reserve_base.raw == 2_500_000 * 10**6
    assert backward.reserve_quote.raw == 1_000 * 10**18
    assert forward.pool_address == backward.pool_address


@pytest.mark.asyncio
async def test_get_pool_wraps_native(chain, registry):
    chain.add_pool(WETH, 10**18, USDC, 2_000 * 10**6)
    pools = UniswapV2(ChainReader(chain), registry)

    reserves = await pools.get_pool(ETH, registry.by_symbol("USDC"))

    assert reserves.base_token.symbol == "WETH"
    assert reserves.reserve_base.display == "1"
    assert reserves.reserve_quote.display == "2000"


@pytest.mark.asyncio
async def test_get_pool_missing(chain, registry):
    pools = UniswapV2(ChainReader(chain), registry)
    with pytest.raises(PoolNotFound, match="No Uniswap V2 pool"):
        await pools.get_pool(registry.by_symbol("LINK"), registry.by_symbol("USDC"))
    assert "getReserves" not in chain.calls


@pytest.mark.asyncio
async def test_get_pool_empty_reserves(chain, registry):
    chain.add_pool(LINK, 0, WETH, 0)
    pools = UniswapV2(ChainReader(chain), registry)
    with pytest.raises(PoolNotFound, match="no liquidity"):
        await pools.get_pool(registry.by_symbol("LINK"), registry.by_symbol("WETH"))


@pytest.mark.asyncio
async def test_get_pool_same_token(chain, registry):
    pools = UniswapV2(ChainReader(chain), registry)
    with pytest.raises(InvalidArgument):
        await pools.get_pool(ETH, registry.by_symbol("WETH"))
    assert chain.calls == []


@pytest.mark.asyncio
async def test_get_pool_provider_failure(chain, registry):
    chain.fail.add("getPair")
    pools = UniswapV2(ChainReader(chain), registry)
    with pytest.raises(ChainUnavailable):
        await pools.get_pool(registry.by_symbol("LINK"), registry.by_symbol("WETH"))
