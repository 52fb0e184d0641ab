"""core module init"""
from eth_trading_agent.core.address import (
    checksum_address,
    is_valid_address,
    normalize_address,
)
from eth_trading_agent.core.chain import ChainReader
from eth_trading_agent.core.errors import (
    ChainUnavailable,
    InternalError,
    InvalidAddress,
    InvalidAmount,
    InvalidArgument,
    InvalidSlippage,
    NonPositiveAmount,
    PoolNotFound,
    TokenNotRegistered,
    TradingError,
    UnknownTool,
    UnknownToken,
)
from eth_trading_agent.core.models import (
    Amount,
    BalanceResult,
    Estimate,
    PoolReserves,
    PriceResult,
    SwapSimulationResult,
    TokenDescriptor,
    ToolResponse,
)
from eth_trading_agent.core.node import ChainDataProvider, EthNode, EthNodeError
from eth_trading_agent.core.precision import to_display, to_raw
from eth_trading_agent.core.tokens import ETH, TokenRegistry, TokenResolver

__all__ = [
    "Amount",
    "BalanceResult",
    "ChainDataProvider",
    "ChainReader",
    "ChainUnavailable",
    "ETH",
    "Estimate",
    "EthNode",
    "EthNodeError",
    "InternalError",
    "InvalidAddress",
    "InvalidAmount",
    "InvalidArgument",
    "InvalidSlippage",
    "NonPositiveAmount",
    "PoolNotFound",
    "PoolReserves",
    "PriceResult",
    "SwapSimulationResult",
    "TokenDescriptor",
    "TokenNotRegistered",
    "TokenRegistry",
    "TokenResolver",
    "ToolResponse",
    "TradingError",
    "UnknownTool",
    "UnknownToken",
    "checksum_address",
    "is_valid_address",
    "normalize_address",
    "to_display",
    "to_raw",
]
