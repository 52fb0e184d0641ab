"""
DeFi adapters: Uniswap V2 pools, spot pricing and swap simulation.
"""
from .pricing import PriceEngine, QuoteCurrency
from .swap import SwapSimulator
from .uniswap import UniswapV2, get_amount_out

__all__ = [
    "PriceEngine",
    "QuoteCurrency",
    "SwapSimulator",
    "UniswapV2",
    "get_amount_out",
]
