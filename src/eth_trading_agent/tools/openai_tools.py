"""OpenAI function-calling tool definitions for TradingToolkit."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from eth_trading_agent.tools.toolkit import TradingToolkit


def build_openai_tools(toolkit: TradingToolkit) -> list[dict[str, Any]]:
    """Return a list of OpenAI function-calling tool definitions."""
    symbols = ", ".join(toolkit.registry.symbols())
    return [
        {
            "type": "function",
            "function": {
                "name": "get_balance",
                "description": (
                    "Get the balance of an Ethereum wallet. "
                    "Omit token_address for native ETH, or pass an ERC20 contract address."
                ),
                "parameters": {
                    "type": "object",
                    "properties": {
                        "address": {
                            "type": "string",
                            "description": "Ethereum wallet address (0x followed by 40 hex characters)",
                        },
                        "token_address": {
                            "type": "string",
                            "description": "ERC20 contract address (optional)",
                        },
                    },
                    "required": ["address"],
                },
            },
        },
        {
            "type": "function",
            "function": {
                "name": "get_token_price",
                "description": (
                    "Get the current price of a token from Uniswap V2 reserves. "
                    f"Accepts a symbol ({symbols}) or an ERC20 contract address."
                ),
                "parameters": {
                    "type": "object",
                    "properties": {
                        "token_identifier": {
                            "type": "string",
                            "description": "Token symbol or contract address",
                        },
                        "quote_currency": {
                            "type": "string",
                            "description": "'USD' (default) or 'ETH'",
                            "enum": ["USD", "ETH"],
                        },
                    },
                    "required": ["token_identifier"],
                },
            },
        },
        {
            "type": "function",
            "function": {
                "name": "swap_tokens",
                "description": (
                    "Simulate a swap on Uniswap V2 without executing it. "
                    "Use this to check the expected output, minimum output and gas cost before trading. "
                    "If the wallet balance is too low the result has simulation_success=false."
                ),
                "parameters": {
                    "type": "object",
                    "properties": {
                        "from_token": {
                            "type": "string",
                            "description": "Token to sell (symbol or address)",
                        },
                        "to_token": {
                            "type": "string",
                            "description": "Token to buy (symbol or address)",
                        },
                        "amount": {
                            "type": "string",
                            "description": "Amount of from_token as a decimal string, e.g. '0.25'",
                        },
                        "slippage": {
                            "type": "number",
                            "description": "Slippage tolerance in percent, in [0, 100)",
                        },
                        "wallet_address": {
                            "type": "string",
                            "description": "Wallet that would send the swap",
                        },
                    },
                    "required": ["from_token", "to_token", "amount", "slippage", "wallet_address"],
                },
            },
        },
    ]
