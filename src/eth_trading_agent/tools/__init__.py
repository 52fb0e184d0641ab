"""tools module init"""
from eth_trading_agent.tools.toolkit import TradingToolkit

__all__ = ["TradingToolkit"]
