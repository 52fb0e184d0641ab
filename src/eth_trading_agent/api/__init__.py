"""
API module for eth-trading-agent.

Exposes the trading tools over HTTP: a JSON-RPC 2.0 endpoint in MCP style
plus plain discovery and health routes.
"""

from eth_trading_agent.api.models import (
    HealthResponse,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ToolCallParams,
)

__all__ = [
    "HealthResponse",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "ToolCallParams",
]
