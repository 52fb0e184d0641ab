"""
Token registry and resolver.

The registry maps case-insensitive symbols and addresses to TokenDescriptor.
It is shared by every concurrent tool call. Writes are serialized by a lock
and publish a fresh snapshot of both tables; reads never wait.

Identifiers coming from agents are parsed once into SymbolIdentifier or
AddressIdentifier and resolved through TokenResolver.resolve().
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from eth_trading_agent.core.address import NATIVE_PSEUDO_ADDRESS, is_valid_address
from eth_trading_agent.core.errors import ChainUnavailable, TokenNotRegistered, UnknownToken
from eth_trading_agent.core.models import NATIVE_DECIMALS, TokenDescriptor

if TYPE_CHECKING:
    from eth_trading_agent.core.chain import ChainReader

logger = logging.getLogger("eth_trading_agent.tokens")

_SYMBOL_RE = re.compile(r"[A-Za-z0-9._-]{1,16}")

ETH = TokenDescriptor(symbol="ETH", address=None, decimals=NATIVE_DECIMALS, wrapped_symbol="WETH")

# Ethereum mainnet seed set: symbol -> (address, decimals)
MAINNET_TOKENS: dict[str, tuple[str, int]] = {
    "WETH": ("0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2", 18),
    "USDC": ("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", 6),
    "USDT": ("0xdAC17F958D2ee523a2206206994597C13D831ec7", 6),
    "DAI": ("0x6B175474E89094C44Da98b954EedeAC495271d0F", 18),
    "LINK": ("0x514910771AF9Ca656af840dff83E8264EcF986CA", 18),
    "UNI": ("0x1f9840a85d5aF5bf1D1762F925BDADdC4201F984", 18),
    "AAVE": ("0x7Fc66500c84A76Ad7e9c93437E434122A1f9AcDd", 18),
    "FRAX": ("0x853d955aCEf822Db058eb8505911ED77F175b999", 18),
    "WBTC": ("0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599", 8),
}


# ------------------------------------------------------------------
# Identifiers
# ------------------------------------------------------------------

@dataclass(frozen=True)
class SymbolIdentifier:
    symbol: str  # upper-cased


@dataclass(frozen=True)
class AddressIdentifier:
    address: str  # lower-cased


TokenIdentifier = SymbolIdentifier | AddressIdentifier


def parse_identifier(identifier: str) -> TokenIdentifier:
    """
    Classify a user-supplied token identifier.

    Raises:
        UnknownToken: if it is neither an address nor a plausible symbol
    """
    if not isinstance(identifier, str):
        raise UnknownToken(f"Token identifier must be a string, got {identifier!r}")
    value = identifier.strip()
    if is_valid_address(value):
        return AddressIdentifier(value.lower())
    if _SYMBOL_RE.fullmatch(value):
        return SymbolIdentifier(value.upper())
    raise UnknownToken(f"Not a token symbol or address: {identifier!r}")


# ------------------------------------------------------------------
# Registry
# ------------------------------------------------------------------

class _Tables(NamedTuple):
    by_symbol: dict[str, TokenDescriptor]
    by_address: dict[str, TokenDescriptor]


class TokenRegistry:
    """
    Symbol/address -> TokenDescriptor lookup.

    Usage:
        registry = TokenRegistry.mainnet()
        usdc = registry.by_symbol("usdc")
        registry.register(TokenDescriptor(symbol="PEPE", address="0x69...", decimals=18))
    """

    def __init__(self, tokens: list[TokenDescriptor] | None = None) -> None:
        self._write_lock = threading.Lock()
        # replaced wholesale on every write; never mutated once published
        self._tables = _Tables({}, {})
        for token in tokens or []:
            self.register(token)

    @classmethod
    def mainnet(cls) -> TokenRegistry:
        """Registry seeded with ETH and common Ethereum mainnet ERC20 tokens."""
        tokens = [ETH] + [
            TokenDescriptor(symbol=symbol, address=address.lower(), decimals=decimals)
            for symbol, (address, decimals) in MAINNET_TOKENS.items()
        ]
        return cls(tokens)

    def register(self, token: TokenDescriptor) -> None:
        """Insert or overwrite a descriptor. Registering the same descriptor twice is a no-op."""
        if token.address is not None and not is_valid_address(token.address):
            raise UnknownToken(f"Invalid token address: {token.address!r}")
        token = token.model_copy(
            update={"symbol": token.symbol.upper(), "address": token.address.lower() if token.address else None}
        )
        address_key = token.address or NATIVE_PSEUDO_ADDRESS

        with self._write_lock:
            by_symbol = dict(self._tables.by_symbol)
            by_address = dict(self._tables.by_address)
            # drop stale entries so each address and symbol maps to one descriptor
            previous = by_symbol.get(token.symbol)
            if previous is not None:
                by_address.pop(previous.address or NATIVE_PSEUDO_ADDRESS, None)
            displaced = by_address.get(address_key)
            if displaced is not None and displaced.symbol != token.symbol:
                by_symbol.pop(displaced.symbol, None)

            by_symbol[token.symbol] = token
            by_address[address_key] = token
            self._tables = _Tables(by_symbol, by_address)
        logger.debug(f"Registered token {token.symbol} at {address_key}")

    def by_symbol(self, symbol: str) -> TokenDescriptor | None:
        return self._tables.by_symbol.get(symbol.upper())

    def by_address(self, address: str) -> TokenDescriptor | None:
        return self._tables.by_address.get(address.lower())

    def symbols(self) -> list[str]:
        return sorted(self._tables.by_symbol)

    def wrapped(self, token: TokenDescriptor) -> TokenDescriptor:
        """The ERC20 form of a token: WETH for ETH, the token itself otherwise."""
        if not token.is_native:
            return token
        wrapped = self.by_symbol(token.wrapped_symbol or "")
        if wrapped is None:
            raise TokenNotRegistered(f"No wrapped token registered for {token.symbol}")
        return wrapped

    def __contains__(self, identifier: str) -> bool:
        tables = self._tables
        return identifier.upper() in tables.by_symbol or identifier.lower() in tables.by_address

    def __len__(self) -> int:
        return len(self._tables.by_symbol)


# ------------------------------------------------------------------
# Resolver
# ------------------------------------------------------------------

class TokenResolver:
    """
    Resolve identifiers to descriptors, falling back to ERC20 introspection
    for unregistered addresses when a chain reader is available.
    """

    def __init__(self, registry: TokenRegistry, chain: ChainReader | None = None) -> None:
        self.registry = registry
        self._chain = chain

    async def resolve(self, identifier: str) -> TokenDescriptor:
        """
        Raises:
            UnknownToken: malformed identifier or unknown symbol
            TokenNotRegistered: valid address, unregistered, and not introspectable
        """
        parsed = parse_identifier(identifier)

        if isinstance(parsed, SymbolIdentifier):
            token = self.registry.by_symbol(parsed.symbol)
            if token is None:
                raise UnknownToken(f"Unknown token symbol: {parsed.symbol}")
            return token

        token = self.registry.by_address(parsed.address)
        if token is not None:
            return token
        return await self._introspect(parsed.address)

    async def _introspect(self, address: str) -> TokenDescriptor:
        if self._chain is None:
            raise TokenNotRegistered(f"Token {address} is not registered")

        try:
            decimals = await self._chain.token_decimals(address)
        except ChainUnavailable as e:
            raise TokenNotRegistered(
                f"Token {address} is not registered and decimals() could not be read: {e.message}"
            ) from e

        try:
            symbol = await self._chain.token_symbol(address)
        except ChainUnavailable:
            symbol = "UNKNOWN"

        token = TokenDescriptor(symbol=symbol, address=address, decimals=decimals)
        if symbol != "UNKNOWN" and self.registry.by_symbol(symbol) is None:
            self.registry.register(token)
            logger.info(f"Registered {symbol} ({address}) from on-chain metadata")
        return token
