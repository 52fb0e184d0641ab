"""
eth-trading-agent: Ethereum trading tools for AI agents.

Usage:
    from eth_trading_agent import EthNode
    from eth_trading_agent.tools import TradingToolkit
"""

from eth_trading_agent.core.models import Amount, TokenDescriptor
from eth_trading_agent.core.node import EthNode
from eth_trading_agent.core.tokens import TokenRegistry

__version__ = "0.1.0"
__all__ = [
    "Amount",
    "EthNode",
    "TokenDescriptor",
    "TokenRegistry",
]
