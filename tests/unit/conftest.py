"""
Shared fixtures: an in-memory chain that answers real ABI-encoded calls.
"""

import asyncio
import dataclasses
import itertools
from decimal import Decimal

import pytest
from eth_abi import decode, encode

from eth_trading_agent.config import Settings
from eth_trading_agent.core.address import ZERO_ADDRESS, sort_tokens
from eth_trading_agent.core.chain import BALANCE_OF, DECIMALS, GET_PAIR, GET_RESERVES, SYMBOL
from eth_trading_agent.core.tokens import MAINNET_TOKENS, TokenRegistry
from eth_trading_agent.defi.uniswap import UNISWAP_V2_FACTORY, UNISWAP_V2_ROUTER
from eth_trading_agent.tools.toolkit import TradingToolkit

WALLET = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"
WETH = MAINNET_TOKENS["WETH"][0].lower()
USDC = MAINNET_TOKENS["USDC"][0].lower()
USDT = MAINNET_TOKENS["USDT"][0].lower()
LINK = MAINNET_TOKENS["LINK"][0].lower()

_SELECTORS = {
    BALANCE_OF: "balanceOf",
    DECIMALS: "decimals",
    SYMBOL: "symbol",
    GET_PAIR: "getPair",
    GET_RESERVES: "getReserves",
}


class FakeChain:
    """
    ChainDataProvider backed by dicts.

    Every call is recorded in `calls`. Method names listed in `fail` raise,
    names listed in `hang` block until cancelled.
    """

    def __init__(self):
        self.native_balances = {}
        self.erc20_balances = {}
        self.tokens = {}
        self.pairs = {}
        self.reserves = {}
        self.gas_estimate = 120_000
        self.gas_price = 30 * 10**9
        self.fail = set()
        self.hang = set()
        self.calls = []
        self.cancelled = 0
        self._pair_ids = itertools.count(1)

    # -- setup helpers ------------------------------------------------

    def set_native_balance(self, owner, wei):
        self.native_balances[owner.lower()] = wei

    def set_erc20_balance(self, token, owner, raw):
        self.erc20_balances[(token.lower(), owner.lower())] = raw

    def add_token(self, address, decimals, symbol):
        self.tokens[address.lower()] = (decimals, symbol)

    def add_pool(self, token_a, reserve_a, token_b, reserve_b):
        """Create a pair; reserves are given per token and stored token0-first."""
        pair = "0x" + f"{next(self._pair_ids):040x}"
        token0, token1 = sort_tokens(token_a, token_b)
        self.pairs[(token0, token1)] = pair
        by_token = {token_a.lower(): reserve_a, token_b.lower(): reserve_b}
        self.reserves[pair] = (by_token[token0], by_token[token1])
        return pair

    # -- ChainDataProvider ----------------------------------------------

    async def get_native_balance(self, address):
        await self._enter("eth_getBalance")
        return self.native_balances.get(address.lower(), 0)

    async def call_contract(self, address, data):
        selector, args = data[:4], data[4:]
        method = _SELECTORS.get(selector, selector.hex())
        await self._enter(method)
        address = address.lower()

        if method == "balanceOf":
            (owner,) = decode(["address"], args)
            return encode(["uint256"], [self.erc20_balances.get((address, owner.lower()), 0)])
        if method in ("decimals", "symbol"):
            if address not in self.tokens:
                raise RuntimeError("execution reverted")
            decimals, symbol = self.tokens[address]
            return encode(["uint8"], [decimals]) if method == "decimals" else encode(["string"], [symbol])
        if method == "getPair":
            token_a, token_b = decode(["address", "address"], args)
            pair = self.pairs.get(sort_tokens(token_a, token_b), ZERO_ADDRESS)
            return encode(["address"], [pair])
        if method == "getReserves":
            reserve0, reserve1 = self.reserves[address]
            return encode(["uint112", "uint112", "uint32"], [reserve0, reserve1, 1_700_000_000])
        raise RuntimeError(f"unexpected call {method} to {address}")

    async def estimate_gas(self, call):
        await self._enter("eth_estimateGas")
        return self.gas_estimate

    async def get_gas_price(self):
        await self._enter("eth_gasPrice")
        return self.gas_price

    async def _enter(self, method):
        self.calls.append(method)
        await asyncio.sleep(0)
        if method in self.fail:
            raise RuntimeError(f"{method} failed")
        if method in self.hang:
            try:
                await asyncio.sleep(3600)
            except asyncio.CancelledError:
                self.cancelled += 1
                raise


def make_settings(**overrides):
    settings = Settings(
        rpc_url="http://fake",
        chain_id=1,
        rpc_timeout_seconds=5.0,
        tool_timeout_seconds=5.0,
        uniswap_v2_factory=UNISWAP_V2_FACTORY.lower(),
        uniswap_v2_router=UNISWAP_V2_ROUTER.lower(),
        fallback_gas_limit=150_000,
        fallback_gas_price_wei=20 * 10**9,
        fallback_discount_pct=Decimal("1"),
        log_level="INFO",
        host="127.0.0.1",
        port=8080,
    )
    return dataclasses.replace(settings, **overrides)


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def registry():
    return TokenRegistry.mainnet()


@pytest.fixture
def toolkit(chain, registry):
    return TradingToolkit(chain, registry=registry, settings=make_settings())


@pytest.fixture
def eth_usdc_chain(chain):
    """1 ETH buys exactly 2475 USDC through the WETH/USDC pool."""
    chain.add_pool(WETH, 98_703_000_000_000_000_000, USDC, 247_500_000_000)
    chain.set_native_balance(WALLET, 10 * 10**18)
    return chain
