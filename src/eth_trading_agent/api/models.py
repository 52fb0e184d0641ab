from typing import Any

from pydantic import BaseModel, Field

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
# implementation-defined range; `data.kind` carries the TradingError kind
TOOL_ERROR = -32000


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request sent to /mcp."""

    jsonrpc: str = Field("2.0", description="Protocol version, always '2.0'")
    method: str = Field(..., description="'tools/list', 'tools/call' or 'ping'")
    params: dict[str, Any] | None = Field(None, description="Method parameters")
    id: int | str | None = Field(None, description="Request id, echoed in the response")


class JsonRpcError(BaseModel):
    code: int = Field(..., description="JSON-RPC error code")
    message: str = Field(..., description="Human-readable error message")
    data: dict[str, Any] | None = Field(None, description="Structured error details")


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response. Exactly one of result and error is set."""

    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: Any | None = None
    error: JsonRpcError | None = None


class ToolCallParams(BaseModel):
    """Params of a tools/call request."""

    name: str = Field(..., description="Tool name, e.g. 'get_balance'")
    arguments: dict[str, Any] = Field(..., description="Tool arguments as an object")


class HealthResponse(BaseModel):
    status: str = Field(..., description="'ok' when the server is up")
    chain_id: int = Field(..., description="Configured chain id")
    tools: list[str] = Field(..., description="Names of the available tools")
