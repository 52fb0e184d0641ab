#!/usr/bin/env python3
"""
Example 05: Talk to a running server over JSON-RPC.

Start the server first:
    eth-trading-agent

Then:
    python examples/05_mcp_client.py
    python examples/05_mcp_client.py http://127.0.0.1:8080/mcp
"""

import sys

import httpx

URL = sys.argv[1] if len(sys.argv) > 1 else "http://127.0.0.1:8080/mcp"
WALLET = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"

REQUESTS = [
    ("ping", None),
    ("tools/list", None),
    ("tools/call", {"name": "get_balance", "arguments": {"address": WALLET}}),
    ("tools/call", {"name": "get_token_price", "arguments": {"token_identifier": "ETH"}}),
    ("tools/call", {"name": "get_token_price", "arguments": {"token_identifier": "USDC", "quote_currency": "ETH"}}),
    (
        "tools/call",
        {
            "name": "swap_tokens",
            "arguments": {
                "from_token": "ETH",
                "to_token": "USDC",
                "amount": "1.0",
                "slippage": 0.5,
                "wallet_address": WALLET,
            },
        },
    ),
]

with httpx.Client(timeout=60.0) as client:
    for request_id, (method, params) in enumerate(REQUESTS, start=1):
        body = {"jsonrpc": "2.0", "id": request_id, "method": method}
        if params is not None:
            body["params"] = params

        response = client.post(URL, json=body)
        reply = response.json()

        label = params["name"] if params else method
        print(f"=== {label} ===")
        if "error" in reply:
            kind = reply["error"].get("data", {}).get("kind", "")
            print(f"Error {reply['error']['code']} {kind}: {reply['error']['message']}")
        elif method == "tools/list":
            for tool in reply["result"]["tools"]:
                print(f"  {tool['name']:<18} {tool['description']}")
        else:
            for key, value in reply["result"].items():
                print(f"  {key:<22} {value}")
        print()
