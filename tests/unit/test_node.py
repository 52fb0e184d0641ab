"""
Unit tests for the EthNode JSON-RPC client, using httpx.MockTransport.
"""

import json

import httpx
import pytest

from eth_trading_agent.core.chain import ChainReader
from eth_trading_agent.core.errors import ChainUnavailable
from eth_trading_agent.core.node import ChainDataProvider, EthNode, EthNodeError

URL = "http://node.test"


def make_node(handler):
    return EthNode(URL, transport=httpx.MockTransport(handler))


def rpc_result(result):
    def handler(request):
        body = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})
    return handler


def test_node_is_a_chain_data_provider():
    assert isinstance(EthNode(URL), ChainDataProvider)


@pytest.mark.asyncio
async def test_get_native_balance_sends_latest_block():
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x471a2b2a8e7bd34e"})

    async with make_node(handler) as node:
        balance = await node.get_native_balance("0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045")

    assert balance == 0x471A2B2A8E7BD34E
    assert seen[0]["method"] == "eth_getBalance"
    assert seen[0]["params"] == ["0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045", "latest"]


@pytest.mark.asyncio
async def test_request_ids_increase():
    ids = []

    def handler(request):
        body = json.loads(request.content)
        ids.append(body["id"])
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": "0x1"})

    async with make_node(handler) as node:
        await node.get_gas_price()
        await node.get_chain_id()

    assert ids == [1, 2]


@pytest.mark.asyncio
async def test_call_contract_hex_round_trip():
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x" + "00" * 31 + "12"})

    async with make_node(handler) as node:
        result = await node.call_contract("0x" + "11" * 20, bytes.fromhex("313ce567"))

    assert result == bytes(31) + b"\x12"
    assert seen[0]["params"][0] == {"to": "0x" + "11" * 20, "data": "0x313ce567"}


@pytest.mark.asyncio
async def test_estimate_gas_encodes_call_object():
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x1d4c0"})

    async with make_node(handler) as node:
        gas = await node.estimate_gas({"from": "0xabc", "to": "0xdef", "data": b"\x01\x02", "value": 10**18})

    assert gas == 120_000
    assert seen[0]["params"] == [
        {"from": "0xabc", "to": "0xdef", "data": "0x0102", "value": "0xde0b6b3a7640000"}
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="upstream down"),
        httpx.Response(200, text="<html>"),
        httpx.Response(200, json=["not", "an", "object"]),
        httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "reverted"}}),
        httpx.Response(200, json={"jsonrpc": "2.0", "id": 1}),
        httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "12"}),
    ],
)
async def test_bad_responses_raise_node_error(response):
    async with make_node(lambda request: response) as node:
        with pytest.raises(EthNodeError):
            await node.get_gas_price()


@pytest.mark.asyncio
async def test_transport_error_raises_node_error():
    def handler(request):
        raise httpx.ConnectError("connection refused")

    async with make_node(handler) as node:
        with pytest.raises(EthNodeError, match="transport error"):
            await node.get_gas_price()


@pytest.mark.asyncio
async def test_malformed_call_result():
    async with make_node(rpc_result("0xzz")) as node:
        with pytest.raises(EthNodeError):
            await node.call_contract("0x" + "11" * 20, b"\x00")


@pytest.mark.asyncio
async def test_chain_reader_maps_node_errors_to_chain_unavailable():
    def handler(request):
        return httpx.Response(503, text="rate limited")

    async with make_node(handler) as node:
        reader = ChainReader(node)
        with pytest.raises(ChainUnavailable, match="eth_gasPrice"):
            await reader.gas_price()


@pytest.mark.asyncio
async def test_chain_reader_decodes_erc20_metadata():
    from eth_abi import encode

    def handler(request):
        body = json.loads(request.content)
        data = body["params"][0]["data"]
        if data == "0x313ce567":  # decimals()
            result = encode(["uint8"], [6])
        else:  # symbol()
            result = encode(["string"], ["USDC"])
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": "0x" + result.hex()})

    async with make_node(handler) as node:
        reader = ChainReader(node)
        assert await reader.token_decimals("0x" + "11" * 20) == 6
        assert await reader.token_symbol("0x" + "11" * 20) == "USDC"


@pytest.mark.asyncio
async def test_chain_reader_bytes32_symbol():
    symbol = b"MKR".ljust(32, b"\x00")

    async with make_node(rpc_result("0x" + symbol.hex())) as node:
        assert await ChainReader(node).token_symbol("0x" + "11" * 20) == "MKR"
