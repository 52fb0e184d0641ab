#!/usr/bin/env python3
"""
Example 03: Simulate a swap.

Quotes an exact-input swap on Uniswap V2 for a wallet: expected output,
minimum output after slippage and gas cost. Nothing is signed or sent.

Usage:
    python examples/03_simulate_swap.py
    python examples/03_simulate_swap.py ETH USDC 0.5 1.0 0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045
"""

import asyncio
import sys

from eth_trading_agent import EthNode
from eth_trading_agent.config import get_settings
from eth_trading_agent.tools import TradingToolkit

DEFAULTS = ["ETH", "USDC", "0.1", "0.5", "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"]


async def main(from_token: str, to_token: str, amount: str, slippage: str, wallet: str) -> None:
    settings = get_settings()
    async with EthNode(settings.rpc_url, timeout=settings.rpc_timeout_seconds) as node:
        toolkit = TradingToolkit(node, settings=settings)
        response = await toolkit.swap_tokens(from_token, to_token, amount, slippage, wallet)

    if not response["success"]:
        print(f"Error: {response['error']['kind']}: {response['error']['message']}")
        return

    quote = response["data"]
    if not quote["simulation_success"]:
        print(f"Simulation failed: {quote['error']}")
        return

    print(f"Swap:        {quote['input_amount']} {quote['from_token']} -> {quote['to_token']}")
    print(f"Expected:    {quote['estimated_output']} {quote['to_token']}  ({quote['estimate_method']})")
    print(f"Minimum:     {quote['min_output']} {quote['to_token']}  at {quote['slippage_percentage']}% slippage")
    print(f"Gas:         {quote['gas_cost_native']} ETH  ({quote['gas_estimate_method']})")
    for note in quote["notes"]:
        print(f"Note:        {note}")


if __name__ == "__main__":
    args = sys.argv[1:] + DEFAULTS[len(sys.argv) - 1:]
    asyncio.run(main(*args[:5]))
