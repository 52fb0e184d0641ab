"""
TradingToolkit: the main entry point for AI agents.

This class wraps the trading engine into three agent-callable tools:
1. get_balance      - ETH or ERC20 balance of a wallet
2. get_token_price  - spot price in USD or ETH from Uniswap V2 reserves
3. swap_tokens      - read-only swap simulation

Every tool returns a ToolResponse dict ({"success", "data", "error"}) and
never raises for tool-level failures.

Usage:
    from eth_trading_agent import EthNode
    from eth_trading_agent.tools import TradingToolkit

    async with EthNode() as node:
        toolkit = TradingToolkit(node)
        balance = await toolkit.get_balance("0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045")
        price = await toolkit.get_token_price("LINK", "USD")

        # For LLM integration:
        tools = toolkit.to_openai_tools()    # list of OpenAI tool dicts
        tools = toolkit.to_anthropic_tools() # list of Anthropic tool dicts
        result = await toolkit.execute_tool("swap_tokens", {...})  # JSON string
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections.abc import Awaitable, Callable
from decimal import Decimal
from typing import Any

from pydantic import ValidationError

from eth_trading_agent.config import Settings, get_settings
from eth_trading_agent.core.address import checksum_address, normalize_address
from eth_trading_agent.core.chain import ChainReader
from eth_trading_agent.core.errors import (
    ChainUnavailable,
    InternalError,
    InvalidArgument,
    TradingError,
    UnknownTool,
)
from eth_trading_agent.core.models import (
    BalanceResult,
    PriceResult,
    SwapSimulationResult,
    TokenDescriptor,
    ToolResponse,
)
from eth_trading_agent.core.node import ChainDataProvider
from eth_trading_agent.core.precision import MAX_DECIMALS, parse_slippage, to_display, to_positive_raw
from eth_trading_agent.core.tokens import ETH, SymbolIdentifier, TokenRegistry, TokenResolver, parse_identifier
from eth_trading_agent.defi.pricing import PriceEngine, QuoteCurrency
from eth_trading_agent.defi.swap import SwapSimulator
from eth_trading_agent.defi.uniswap import UniswapV2

logger = logging.getLogger("eth_trading_agent.toolkit")


class TradingToolkit:
    """
    Unified AI agent toolkit for Ethereum trading data.

    All tool methods are safe to call directly from an LLM's tool-calling loop
    and may run concurrently; they keep no per-call state.
    """

    def __init__(
        self,
        provider: ChainDataProvider,
        registry: TokenRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.registry = registry or TokenRegistry.mainnet()
        self.chain = ChainReader(provider)
        self.resolver = TokenResolver(self.registry, self.chain)
        self.pools = UniswapV2(
            self.chain,
            self.registry,
            factory=self.settings.uniswap_v2_factory,
            router=self.settings.uniswap_v2_router,
        )
        self.prices = PriceEngine(self.pools, self.registry)
        self.simulator = SwapSimulator(
            self.chain,
            self.registry,
            self.pools,
            self.prices,
            fallback_gas_limit=self.settings.fallback_gas_limit,
            fallback_gas_price_wei=self.settings.fallback_gas_price_wei,
            fallback_discount_pct=self.settings.fallback_discount_pct,
        )
        self.timeout = self.settings.tool_timeout_seconds
        self._tools: dict[str, Callable[..., Awaitable[dict[str, Any]]]] = {
            "get_balance": self.get_balance,
            "get_token_price": self.get_token_price,
            "swap_tokens": self.swap_tokens,
        }

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    async def get_balance(self, address: str, token_address: str | None = None) -> dict[str, Any]:
        """
        Get the ETH balance of `address`, or its ERC20 balance when
        `token_address` is given.

        Returns:
            ToolResponse dict; data = {address, balance, decimals, raw, token_type}
        """
        return await self._run("get_balance", self._get_balance(address, token_address))

    async def get_token_price(self, token_identifier: str, quote_currency: str | None = "USD") -> dict[str, Any]:
        """
        Get the spot price of a token (symbol or address) in USD or ETH.

        Returns:
            ToolResponse dict; data = {quote_currency, price, timestamp, token}
        """
        return await self._run("get_token_price", self._get_token_price(token_identifier, quote_currency))

    async def swap_tokens(
        self,
        from_token: str,
        to_token: str,
        amount: str,
        slippage: str | int | float,
        wallet_address: str,
    ) -> dict[str, Any]:
        """
        Simulate swapping `amount` of from_token into to_token on Uniswap V2.

        Nothing is signed or submitted. An insufficient wallet balance is a
        successful response with data.simulation_success = False.

        Returns:
            ToolResponse dict; data = SwapSimulationResult fields
        """
        return await self._run(
            "swap_tokens",
            self._swap_tokens(from_token, to_token, amount, slippage, wallet_address),
        )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def list_tools(self) -> list[dict[str, Any]]:
        """Tool discovery in MCP shape: name, description, inputSchema."""
        return [
            {"name": t["name"], "description": t["description"], "inputSchema": t["input_schema"]}
            for t in self.to_anthropic_tools()
        ]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Invoke a tool by name.

        Returns:
            ToolResponse dict. Unknown names give an UnknownTool error and
            missing or unexpected arguments an InvalidArgument error.
        """
        try:
            fn = self.bind_tool(name, arguments)
        except TradingError as e:
            logger.warning(f"Rejected call to {name}: {e.message}")
            return ToolResponse.fail(e).model_dump()
        return await fn(**(arguments or {}))

    def bind_tool(self, name: str, arguments: dict[str, Any] | None) -> Callable[..., Awaitable[dict[str, Any]]]:
        """
        Look up a tool and check that the argument names fit its signature.

        Raises:
            UnknownTool: no tool with that name
            InvalidArgument: arguments are not an object, or have missing or unexpected keys
        """
        fn = self._tools.get(name)
        if fn is None:
            raise UnknownTool(f"Unknown tool: {name}")

        arguments = {} if arguments is None else arguments
        if not isinstance(arguments, dict):
            raise InvalidArgument("Tool arguments must be an object")
        try:
            inspect.signature(fn).bind(**arguments)
        except TypeError as e:
            raise InvalidArgument(f"Invalid arguments for {name}: {e}") from None
        return fn

    async def execute_tool(self, tool_name: str, tool_input: dict[str, Any] | None = None) -> str:
        """
        Execute a tool by name with given inputs.
        Used by LLM frameworks to dispatch tool calls.

        Returns:
            str: JSON-encoded ToolResponse
        """
        return json.dumps(await self.call_tool(tool_name, tool_input), indent=2)

    def register_token(self, symbol: str, address: str, decimals: int) -> TokenDescriptor:
        """
        Register an ERC20 token at runtime so it can be referenced by symbol.

        Raises:
            InvalidAddress: malformed contract address
            InvalidArgument: bad symbol or decimals
        """
        normalized = normalize_address(address)
        try:
            identifier = parse_identifier(symbol)
        except TradingError as e:
            raise InvalidArgument(f"Invalid token symbol: {symbol!r}") from e
        if not isinstance(identifier, SymbolIdentifier) or identifier.symbol == ETH.symbol:
            raise InvalidArgument(f"Invalid token symbol: {symbol!r}")
        try:
            token = TokenDescriptor(symbol=identifier.symbol, address=normalized, decimals=decimals)
        except ValidationError as e:
            raise InvalidArgument(f"Invalid decimals for {symbol}: {decimals!r}") from e
        self.registry.register(token)
        logger.info(f"Registered {token.symbol} at {normalized} ({decimals} decimals)")
        return token

    # ------------------------------------------------------------------
    # Tool schema generators
    # ------------------------------------------------------------------

    def to_openai_tools(self) -> list[dict[str, Any]]:
        """Generate OpenAI function-calling tool definitions."""
        from eth_trading_agent.tools.openai_tools import build_openai_tools
        return build_openai_tools(self)

    def to_anthropic_tools(self) -> list[dict[str, Any]]:
        """Generate Anthropic tool-use definitions."""
        from eth_trading_agent.tools.anthropic_tools import build_anthropic_tools
        return build_anthropic_tools(self)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _get_balance(self, address: str, token_address: str | None) -> BalanceResult:
        owner = normalize_address(address)
        if token_address:
            normalize_address(token_address)
            token = await self.resolver.resolve(token_address)
        else:
            token = self.registry.by_symbol(ETH.symbol) or ETH

        raw = await self.chain.balance_of(token, owner)
        return BalanceResult(
            address=checksum_address(owner),
            balance=to_display(raw, token.decimals),
            decimals=token.decimals,
            raw=str(raw),
            token_type="ETH" if token.is_native else token.symbol,
        )

    async def _get_token_price(self, token_identifier: str, quote_currency: str | None) -> PriceResult:
        currency = QuoteCurrency.parse(quote_currency)
        token = await self.resolver.resolve(token_identifier)
        return await self.prices.price(token, currency)

    async def _swap_tokens(
        self,
        from_token: str,
        to_token: str,
        amount: str,
        slippage: str | int | float | Decimal,
        wallet_address: str,
    ) -> SwapSimulationResult:
        # reject malformed input before resolution can touch the chain
        to_positive_raw(amount, MAX_DECIMALS)
        parse_slippage(slippage)
        normalize_address(wallet_address)

        source = await self.resolver.resolve(from_token)
        target = await self.resolver.resolve(to_token)
        return await self.simulator.simulate(source, target, amount, slippage, wallet_address)

    async def _run(self, name: str, call: Awaitable[Any]) -> dict[str, Any]:
        try:
            result = await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Tool {name} timed out after {self.timeout}s")
            return ToolResponse.fail(ChainUnavailable(f"{name} timed out after {self.timeout}s")).model_dump()
        except TradingError as e:
            logger.info(f"Tool {name} failed: {e.kind}: {e.message}")
            return ToolResponse.fail(e).model_dump()
        except Exception as e:
            logger.exception(f"Tool {name} raised an unexpected error")
            return ToolResponse.fail(InternalError(f"Unexpected error in {name}: {e}")).model_dump()

        logger.info(f"Tool {name} succeeded")
        return ToolResponse.ok(result).model_dump()
