"""
Abstract interfaces for venue adapters.

Example:
    >>> from bitget_adapter.interfaces import TradingAdapter
    >>> class MyAdapter(TradingAdapter):
    ...     @property
    ...     def exchange_name(self) -> str:
    ...         return "myvenue"
    ...     # ... implement other abstract methods

Modules:
    trading_adapter: TradingAdapter ABC for REST venue integrations
"""

from bitget_adapter.interfaces.trading_adapter import TradingAdapter

__all__: list[str] = [
    "TradingAdapter",
]
