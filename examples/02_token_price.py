#!/usr/bin/env python3
"""
Example 02: Read token prices from Uniswap V2 reserves.

Usage:
    python examples/02_token_price.py
    python examples/02_token_price.py LINK UNI 0x6B175474E89094C44Da98b954EedeAC495271d0F
"""

import asyncio
import sys

from eth_trading_agent import EthNode
from eth_trading_agent.config import get_settings
from eth_trading_agent.tools import TradingToolkit

DEFAULT_TOKENS = ["ETH", "USDT", "LINK", "UNI", "AAVE"]


async def main(tokens: list[str]) -> None:
    settings = get_settings()
    async with EthNode(settings.rpc_url, timeout=settings.rpc_timeout_seconds) as node:
        toolkit = TradingToolkit(node, settings=settings)

        # all lookups run concurrently
        usd, eth = await asyncio.gather(
            asyncio.gather(*(toolkit.get_token_price(t, "USD") for t in tokens)),
            asyncio.gather(*(toolkit.get_token_price(t, "ETH") for t in tokens)),
        )

        print(f"{'Token':<12} {'USD':>28} {'ETH':>28}")
        print("-" * 70)
        for token, in_usd, in_eth in zip(tokens, usd, eth):
            cells = [
                r["data"]["price"] if r["success"] else r["error"]["kind"]
                for r in (in_usd, in_eth)
            ]
            label = token if len(token) <= 12 else token[:10] + ".."
            print(f"{label:<12} {cells[0]:>28} {cells[1]:>28}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:] or DEFAULT_TOKENS))
