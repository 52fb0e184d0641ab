"""Anthropic tool-use definitions for TradingToolkit."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from eth_trading_agent.tools.toolkit import TradingToolkit


def build_anthropic_tools(toolkit: TradingToolkit) -> list[dict[str, Any]]:
    """Return a list of Anthropic tool-use definitions."""
    symbols = ", ".join(toolkit.registry.symbols())
    return [
        {
            "name": "get_balance",
            "description": "Get the ETH or ERC20 token balance of an Ethereum wallet address.",
            "input_schema": {
                "type": "object",
                "properties": {
                    "address": {"type": "string", "description": "Ethereum wallet address (0x...)"},
                    "token_address": {
                        "type": "string",
                        "description": "ERC20 contract address (optional, omit for the ETH balance)",
                    },
                },
                "required": ["address"],
            },
        },
        {
            "name": "get_token_price",
            "description": (
                "Get the current spot price of a token in USD or ETH, read from Uniswap V2 pool reserves. "
                f"Known symbols: {symbols}."
            ),
            "input_schema": {
                "type": "object",
                "properties": {
                    "token_identifier": {
                        "type": "string",
                        "description": "Token symbol (e.g. 'ETH', 'USDC') or ERC20 contract address",
                    },
                    "quote_currency": {
                        "type": "string",
                        "description": "Currency to quote in (default 'USD')",
                        "enum": ["USD", "ETH"],
                    },
                },
                "required": ["token_identifier"],
            },
        },
        {
            "name": "swap_tokens",
            "description": (
                "Simulate a token swap on Uniswap V2. Returns the estimated output, minimum output after "
                "slippage and gas cost. No transaction is signed or submitted."
            ),
            "input_schema": {
                "type": "object",
                "properties": {
                    "from_token": {"type": "string", "description": "Source token symbol or address"},
                    "to_token": {"type": "string", "description": "Destination token symbol or address"},
                    "amount": {"type": "string", "description": "Amount to swap in human units, e.g. '1.5'"},
                    "slippage": {
                        "type": "number",
                        "description": "Slippage tolerance in percent (e.g. 0.5 for 0.5%)",
                    },
                    "wallet_address": {"type": "string", "description": "Wallet address initiating the swap"},
                },
                "required": ["from_token", "to_token", "amount", "slippage", "wallet_address"],
            },
        },
    ]
