"""
Venue adapters.

All adapters implement the TradingAdapter interface.

Supported venues:
    - Bitget (spot and perpetual swaps)
"""

__all__: list[str] = []
