"""
Runtime configuration, read from the environment (and a .env file if present).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from dotenv import find_dotenv, load_dotenv

from eth_trading_agent.core.address import is_valid_address
from eth_trading_agent.core.node import PUBLIC_RPC_URL
from eth_trading_agent.defi.uniswap import UNISWAP_V2_FACTORY, UNISWAP_V2_ROUTER


class ConfigError(Exception):
    """Raised when an environment variable holds an unusable value."""
    pass


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _int(name: str, default: str) -> int:
    value = _env(name, default)
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid {name}: {value!r}") from None


def _float(name: str, default: str) -> float:
    value = _env(name, default)
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid {name}: {value!r}") from None


def _decimal(name: str, default: str) -> Decimal:
    value = _env(name, default)
    try:
        return Decimal(value)  # type: ignore[arg-type]
    except (TypeError, InvalidOperation):
        raise ConfigError(f"Invalid {name}: {value!r}") from None


def _address(name: str, default: str) -> str:
    value = _env(name, default) or ""
    if not is_valid_address(value):
        raise ConfigError(f"Invalid {name}: {value!r}")
    return value.lower()


@dataclass(frozen=True)
class Settings:
    rpc_url: str
    chain_id: int
    rpc_timeout_seconds: float
    tool_timeout_seconds: float
    uniswap_v2_factory: str
    uniswap_v2_router: str
    fallback_gas_limit: int
    fallback_gas_price_wei: int
    fallback_discount_pct: Decimal
    log_level: str
    host: str
    port: int


def get_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True))
    settings = Settings(
        rpc_url=_env("RPC_URL", PUBLIC_RPC_URL) or PUBLIC_RPC_URL,
        chain_id=_int("CHAIN_ID", "1"),
        rpc_timeout_seconds=_float("RPC_TIMEOUT_SECONDS", "15"),
        tool_timeout_seconds=_float("TOOL_TIMEOUT_SECONDS", "30"),
        uniswap_v2_factory=_address("UNISWAP_V2_FACTORY", UNISWAP_V2_FACTORY),
        uniswap_v2_router=_address("UNISWAP_V2_ROUTER", UNISWAP_V2_ROUTER),
        fallback_gas_limit=_int("FALLBACK_GAS_LIMIT", "150000"),
        fallback_gas_price_wei=_int("FALLBACK_GAS_PRICE_WEI", "20000000000"),
        fallback_discount_pct=_decimal("FALLBACK_DISCOUNT_PCT", "1"),
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        host=_env("HOST", "127.0.0.1") or "127.0.0.1",
        port=_int("PORT", "8080"),
    )
    discount = settings.fallback_discount_pct
    if not discount.is_finite() or not 0 <= discount < 100:
        raise ConfigError(f"Invalid FALLBACK_DISCOUNT_PCT: {discount}")
    return settings
