"""
EthNode: asynchronous JSON-RPC client for an Ethereum node.

Only read methods are exposed: eth_getBalance, eth_call, eth_estimateGas
and eth_gasPrice. Any HTTP-compatible endpoint works (Infura, Alchemy,
llamarpc, a local node).

Reference: https://ethereum.org/en/developers/docs/apis/json-rpc/
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger("eth_trading_agent.node")

PUBLIC_RPC_URL = "https://eth.llamarpc.com"


@runtime_checkable
class ChainDataProvider(Protocol):
    """Read-only chain access consumed by the trading engine. Any method may raise."""

    async def get_native_balance(self, address: str) -> int: ...

    async def call_contract(self, address: str, data: bytes) -> bytes: ...

    async def estimate_gas(self, call: dict[str, Any]) -> int: ...

    async def get_gas_price(self) -> int: ...


class EthNodeError(Exception):
    """Raised when the RPC endpoint returns an error or an unusable response."""
    pass


class EthNode:
    """
    JSON-RPC client for Ethereum.

    Usage:
        async with EthNode() as node:                      # public endpoint
            wei = await node.get_native_balance("0xd8dA...6045")

        node = EthNode(rpc_url="http://localhost:8545", timeout=5.0)
    """

    def __init__(
        self,
        rpc_url: str = PUBLIC_RPC_URL,
        timeout: float = 15.0,
        block: str = "latest",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.block = block
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Chain data
    # ------------------------------------------------------------------

    async def get_native_balance(self, address: str) -> int:
        """Return the wei balance of an address."""
        return _hex_to_int(await self._rpc("eth_getBalance", [address, self.block]))

    async def call_contract(self, address: str, data: bytes) -> bytes:
        """Execute a read-only contract call and return the raw result bytes."""
        result = await self._rpc(
            "eth_call",
            [{"to": address, "data": "0x" + data.hex()}, self.block],
        )
        if not isinstance(result, str) or not result.startswith("0x"):
            raise EthNodeError(f"Malformed eth_call result: {result!r}")
        try:
            return bytes.fromhex(result[2:])
        except ValueError as e:
            raise EthNodeError(f"Malformed eth_call result: {result!r}") from e

    async def estimate_gas(self, call: dict[str, Any]) -> int:
        """
        Estimate gas for a call object.

        Args:
            call: {"from", "to", "data" (bytes or 0x-hex), "value" (int wei)}
        """
        return _hex_to_int(await self._rpc("eth_estimateGas", [_encode_call(call)]))

    async def get_gas_price(self) -> int:
        """Return the current gas price in wei."""
        return _hex_to_int(await self._rpc("eth_gasPrice", []))

    async def get_chain_id(self) -> int:
        return _hex_to_int(await self._rpc("eth_chainId", []))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _rpc(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        logger.debug(f"RPC {method} {params}")
        try:
            response = await self._client.post(self.rpc_url, json=payload)
        except httpx.HTTPError as e:
            raise EthNodeError(f"RPC transport error for {method}: {e}") from e

        if response.status_code != 200:
            raise EthNodeError(f"RPC HTTP {response.status_code} for {method}: {response.text}")
        try:
            body = response.json()
        except ValueError as e:
            raise EthNodeError(f"RPC returned non-JSON body for {method}") from e

        if not isinstance(body, dict):
            raise EthNodeError(f"Unexpected RPC response for {method}: {body!r}")
        if body.get("error"):
            error = body["error"]
            message = error.get("message") if isinstance(error, dict) else error
            raise EthNodeError(f"RPC error for {method}: {message}")
        if "result" not in body:
            raise EthNodeError(f"RPC response for {method} has no result")
        return body["result"]

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> EthNode:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()


def _hex_to_int(value: Any) -> int:
    if not isinstance(value, str) or not value.startswith("0x"):
        raise EthNodeError(f"Expected hex quantity, got {value!r}")
    try:
        return int(value, 16)
    except ValueError as e:
        raise EthNodeError(f"Expected hex quantity, got {value!r}") from e


def _encode_call(call: dict[str, Any]) -> dict[str, str]:
    encoded: dict[str, str] = {}
    for key, value in call.items():
        if value is None:
            continue
        if isinstance(value, bytes):
            encoded[key] = "0x" + value.hex()
        elif isinstance(value, int):
            encoded[key] = hex(value)
        else:
            encoded[key] = str(value)
    return encoded
