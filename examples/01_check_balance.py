#!/usr/bin/env python3
"""
Example 01: Check a wallet balance.

Connects to a public Ethereum RPC endpoint and reads the ETH balance of any
address, plus its USDC balance. No keys required.

Usage:
    python examples/01_check_balance.py
    python examples/01_check_balance.py 0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045
"""

import asyncio
import json
import sys

from eth_trading_agent import EthNode
from eth_trading_agent.config import get_settings
from eth_trading_agent.tools import TradingToolkit

DEFAULT_ADDRESS = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


async def main(address: str) -> None:
    settings = get_settings()
    async with EthNode(settings.rpc_url, timeout=settings.rpc_timeout_seconds) as node:
        toolkit = TradingToolkit(node, settings=settings)

        print("=== ETH ===")
        print(json.dumps(await toolkit.get_balance(address), indent=2))

        print("\n=== USDC ===")
        response = await toolkit.get_balance(address, USDC)
        if response["success"]:
            data = response["data"]
            print(f"Address: {data['address']}")
            print(f"Balance: {data['balance']} {data['token_type']} (raw {data['raw']})")
        else:
            print(f"Error: {response['error']['kind']}: {response['error']['message']}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_ADDRESS))
