import json
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from eth_trading_agent.api.models import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    TOOL_ERROR,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ToolCallParams,
)
from eth_trading_agent.core.errors import InvalidArgument, UnknownTool
from eth_trading_agent.tools.toolkit import TradingToolkit

logger = logging.getLogger("eth_trading_agent.api")

router = APIRouter(tags=["Trading Tools"])


def get_toolkit(request: Request) -> TradingToolkit:
    """Dependency to retrieve the initialized TradingToolkit from app state."""
    toolkit = getattr(request.app.state, "toolkit", None)
    if not toolkit:
        raise HTTPException(status_code=500, detail="trading toolkit not initialized")
    return toolkit


def _reply(request_id: Any, result: Any = None, error: JsonRpcError | None = None) -> JSONResponse:
    response = JsonRpcResponse(id=request_id, result=result, error=error)
    # id is always sent; only one of result and error is
    if error is None:
        return JSONResponse(content=response.model_dump(exclude={"error"}))
    content = response.model_dump(exclude={"result"})
    content["error"] = error.model_dump(exclude_none=True)
    return JSONResponse(content=content)


def _fail(request_id: Any, code: int, message: str, data: dict[str, Any] | None = None) -> JSONResponse:
    return _reply(request_id, error=JsonRpcError(code=code, message=message, data=data))


@router.post("/mcp")
async def mcp(request: Request):
    """
    JSON-RPC 2.0 endpoint.

    Methods: tools/list, tools/call (params: name, arguments), ping.
    Tool-level failures come back as error code -32000 with the error kind
    in error.data.kind.
    """
    toolkit = get_toolkit(request)

    try:
        body = json.loads(await request.body())
    except ValueError:
        return _fail(None, PARSE_ERROR, "Parse error: body is not valid JSON")

    try:
        rpc = JsonRpcRequest.model_validate(body)
    except ValidationError as e:
        request_id = body.get("id") if isinstance(body, dict) else None
        return _fail(request_id, INVALID_REQUEST, f"Invalid request: {e.errors()[0]['msg']}")

    logger.debug(f"MCP request {rpc.method} (id: {rpc.id})")

    if rpc.method == "tools/list":
        return _reply(rpc.id, {"tools": toolkit.list_tools()})
    if rpc.method == "ping":
        return _reply(rpc.id, {"status": "ok"})
    if rpc.method != "tools/call":
        return _fail(rpc.id, METHOD_NOT_FOUND, f"Method not found: {rpc.method}")

    try:
        params = ToolCallParams.model_validate(rpc.params or {})
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        return _fail(rpc.id, INVALID_PARAMS, f"Missing or invalid parameter(s): {missing}")

    try:
        fn = toolkit.bind_tool(params.name, params.arguments)
    except UnknownTool as e:
        return _fail(rpc.id, METHOD_NOT_FOUND, e.message, {"kind": e.kind})
    except InvalidArgument as e:
        return _fail(rpc.id, INVALID_PARAMS, e.message, {"kind": e.kind})

    response = await fn(**params.arguments)
    if response["success"]:
        return _reply(rpc.id, response["data"])

    error = response["error"]
    return _fail(rpc.id, TOOL_ERROR, error["message"], {"kind": error["kind"]})


@router.get("/tools")
async def list_tools(request: Request):
    """List the available tools with their input schemas."""
    return {"tools": get_toolkit(request).list_tools()}
