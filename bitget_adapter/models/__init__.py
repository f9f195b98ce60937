"""
Canonical data models for the Bitget adapter.

Every model is a frozen Pydantic model. Numeric fields are Decimal, never
float, and each venue-derived model keeps the raw payload in ``info``.
"""

from bitget_adapter.models.account import Account, Currency
from bitget_adapter.models.balance import BalanceEntry, Balances
from bitget_adapter.models.market import (
    Market,
    MarketLimits,
    MarketPrecision,
    MarketType,
    MinMax,
)
from bitget_adapter.models.order import (
    Fee,
    Order,
    OrderSide,
    OrderStatus,
    OrderType,
    TakerOrMaker,
    Trade,
)
from bitget_adapter.models.orderbook import OrderBook, PriceLevel
from bitget_adapter.models.position import Position, PositionSide
from bitget_adapter.models.ticker import Candle, Ticker
from bitget_adapter.models.transaction import (
    Transaction,
    TransactionStatus,
    TransactionType,
)

__all__: list[str] = [
    # Market
    "MarketType",
    "MinMax",
    "MarketPrecision",
    "MarketLimits",
    "Market",
    # Market data
    "Ticker",
    "Candle",
    "PriceLevel",
    "OrderBook",
    # Trading
    "OrderStatus",
    "OrderSide",
    "OrderType",
    "TakerOrMaker",
    "Fee",
    "Trade",
    "Order",
    "PositionSide",
    "Position",
    # Account
    "BalanceEntry",
    "Balances",
    "TransactionStatus",
    "TransactionType",
    "Transaction",
    "Account",
    "Currency",
]
