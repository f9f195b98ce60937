"""
Bitget REST adapter.

Normalizes the Bitget spot and swap REST surfaces into one canonical trading
data model and authenticates requests under the venue's signing schemes.

This package provides:
- Canonical data models for markets, tickers, order books, orders and balances
- An abstract TradingAdapter interface and the Bitget implementation
- Configuration management
- Typed venue errors
"""

__version__ = "0.1.0"
