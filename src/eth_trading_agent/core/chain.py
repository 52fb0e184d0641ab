"""
ChainReader: typed contract reads on top of a ChainDataProvider.

This is the boundary between the trading engine and the transport. Calls
are ABI-encoded with eth_abi, results decoded back into Python ints and
strings, and every provider failure (HTTP, JSON-RPC, revert, undecodable
bytes) is re-raised as ChainUnavailable.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector

from eth_trading_agent.core.address import normalize_address
from eth_trading_agent.core.errors import ChainUnavailable, TradingError
from eth_trading_agent.core.models import TokenDescriptor
from eth_trading_agent.core.node import ChainDataProvider

logger = logging.getLogger("eth_trading_agent.chain")

T = TypeVar("T")

BALANCE_OF = function_signature_to_4byte_selector("balanceOf(address)")
DECIMALS = function_signature_to_4byte_selector("decimals()")
SYMBOL = function_signature_to_4byte_selector("symbol()")
GET_PAIR = function_signature_to_4byte_selector("getPair(address,address)")
GET_RESERVES = function_signature_to_4byte_selector("getReserves()")
SWAP_EXACT_ETH_FOR_TOKENS = function_signature_to_4byte_selector(
    "swapExactETHForTokens(uint256,address[],address,uint256)"
)
SWAP_EXACT_TOKENS_FOR_ETH = function_signature_to_4byte_selector(
    "swapExactTokensForETH(uint256,uint256,address[],address,uint256)"
)
SWAP_EXACT_TOKENS_FOR_TOKENS = function_signature_to_4byte_selector(
    "swapExactTokensForTokens(uint256,uint256,address[],address,uint256)"
)


async def read_concurrently(*reads: Awaitable[Any]) -> list[Any]:
    """
    Await independent reads together. If one fails (or the caller is
    cancelled) the others are cancelled before the exception propagates.
    """
    tasks = [asyncio.ensure_future(read) for read in reads]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def encode_call(selector: bytes, types: list[str] | None = None, args: list[Any] | None = None) -> bytes:
    """Calldata = 4-byte selector + ABI-encoded arguments."""
    if not types:
        return selector
    return selector + encode(types, args or [])


class ChainReader:
    """
    Read-only contract helpers used by the resolver, price engine and simulator.

    Usage:
        chain = ChainReader(EthNode())
        wei = await chain.balance_of(ETH, wallet)
        r0, r1 = await chain.get_reserves(pair_address)
    """

    def __init__(self, provider: ChainDataProvider) -> None:
        self.provider = provider

    # ------------------------------------------------------------------
    # Balances
    # ------------------------------------------------------------------

    async def native_balance(self, owner: str) -> int:
        return await self._guard("eth_getBalance", self.provider.get_native_balance(owner))

    async def erc20_balance(self, token_address: str, owner: str) -> int:
        data = encode_call(BALANCE_OF, ["address"], [normalize_address(owner)])
        (balance,) = await self._call(token_address, data, ["uint256"], "balanceOf")
        return balance

    async def balance_of(self, token: TokenDescriptor, owner: str) -> int:
        """Raw balance of `owner` in `token`, native or ERC20."""
        if token.is_native:
            return await self.native_balance(owner)
        return await self.erc20_balance(token.address, owner)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # ERC20 metadata
    # ------------------------------------------------------------------

    async def token_decimals(self, token_address: str) -> int:
        (decimals,) = await self._call(token_address, encode_call(DECIMALS), ["uint8"], "decimals")
        return decimals

    async def token_symbol(self, token_address: str) -> str:
        raw = await self._guard("symbol", self.provider.call_contract(token_address, encode_call(SYMBOL)))
        try:
            (symbol,) = decode(["string"], raw)
        except Exception:
            # some older tokens (MKR, SAI) return bytes32
            try:
                (symbol_bytes,) = decode(["bytes32"], raw)
                symbol = symbol_bytes.rstrip(b"\x00").decode("utf-8")
            except Exception as e:
                raise ChainUnavailable(f"Undecodable symbol() result from {token_address}") from e
        if not symbol:
            raise ChainUnavailable(f"Empty symbol() result from {token_address}")
        return symbol

    # ------------------------------------------------------------------
    # Uniswap V2
    # ------------------------------------------------------------------

    async def get_pair(self, factory: str, token_a: str, token_b: str) -> str:
        """Pair address from the factory (zero address when none exists)."""
        data = encode_call(GET_PAIR, ["address", "address"], [normalize_address(token_a), normalize_address(token_b)])
        (pair,) = await self._call(factory, data, ["address"], "getPair")
        return pair.lower()

    async def get_reserves(self, pair: str) -> tuple[int, int]:
        """(reserve0, reserve1) of a pair; the block timestamp is discarded."""
        reserve0, reserve1, _ = await self._call(
            pair, encode_call(GET_RESERVES), ["uint112", "uint112", "uint32"], "getReserves"
        )
        return reserve0, reserve1

    # ------------------------------------------------------------------
    # Gas
    # ------------------------------------------------------------------

    async def gas_price(self) -> int:
        return await self._guard("eth_gasPrice", self.provider.get_gas_price())

    async def estimate_gas(self, call: dict[str, Any]) -> int:
        return await self._guard("eth_estimateGas", self.provider.estimate_gas(call))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _call(self, address: str, data: bytes, output_types: list[str], what: str) -> tuple[Any, ...]:
        raw = await self._guard(what, self.provider.call_contract(address, data))
        try:
            return decode(output_types, raw)
        except Exception as e:
            raise ChainUnavailable(f"Undecodable {what} result from {address}: {e}") from e

    @staticmethod
    async def _guard(what: str, call: Awaitable[T]) -> T:
        try:
            return await call
        except TradingError:
            raise
        except Exception as e:
            logger.warning(f"Chain call {what} failed: {e}")
            raise ChainUnavailable(f"Chain call {what} failed: {e}") from e
