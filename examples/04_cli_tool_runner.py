#!/usr/bin/env python3
"""
Example 04: Tool runner (no LLM required).

Demonstrates using the TradingToolkit as a standalone command-line tool
that can execute any of the available tools by name.

Usage:
    python examples/04_cli_tool_runner.py
    python examples/04_cli_tool_runner.py get_balance '{"address":"0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"}'
    python examples/04_cli_tool_runner.py get_token_price '{"token_identifier":"LINK","quote_currency":"ETH"}'
    python examples/04_cli_tool_runner.py swap_tokens '{"from_token":"ETH","to_token":"DAI","amount":"1","slippage":0.5,"wallet_address":"0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"}'
"""

import asyncio
import json
import sys

from eth_trading_agent import EthNode
from eth_trading_agent.config import get_settings
from eth_trading_agent.tools import TradingToolkit


async def main() -> None:
    settings = get_settings()
    async with EthNode(settings.rpc_url, timeout=settings.rpc_timeout_seconds) as node:
        toolkit = TradingToolkit(node, settings=settings)

        if len(sys.argv) < 2:
            print("Usage: python 04_cli_tool_runner.py <tool_name> [args_json]")
            print()
            print("Available tools:")
            for tool in toolkit.to_openai_tools():
                name = tool["function"]["name"]
                desc = tool["function"]["description"][:60]
                print(f"  {name:<20} {desc}")
            return

        tool_name = sys.argv[1]
        tool_args = json.loads(sys.argv[2]) if len(sys.argv) > 2 else {}

        print(f"Tool:   {tool_name}")
        print(f"Args:   {json.dumps(tool_args)}")
        print("-" * 50)
        print(await toolkit.execute_tool(tool_name, tool_args))


if __name__ == "__main__":
    asyncio.run(main())
