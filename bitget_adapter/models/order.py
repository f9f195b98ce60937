"""
Order and trade data models.

Status, side and type fields hold an enum member when the venue code is known
and the raw venue code (a plain str) when it is not. Because the enums are
``str`` subclasses, both compare naturally against strings.

Models:
    OrderStatus: open, closed, canceled, failed
    OrderSide: buy, sell, long, short
    OrderType: limit, market, open, close
    TakerOrMaker: taker, maker
    Fee: Fee charged (cost, currency)
    Trade: Public trade or private fill
    Order: Order as reported by the venue
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    """Canonical order status."""

    OPEN = "open"
    CLOSED = "closed"
    CANCELED = "canceled"
    FAILED = "failed"


class OrderSide(str, Enum):
    """Canonical order side. Swap orders carry a position direction."""

    BUY = "buy"
    SELL = "sell"
    LONG = "long"
    SHORT = "short"


class OrderType(str, Enum):
    """Canonical order type. Swap orders encode open/close instead."""

    LIMIT = "limit"
    MARKET = "market"
    OPEN = "open"
    CLOSE = "close"


class TakerOrMaker(str, Enum):
    """Liquidity role of a fill."""

    TAKER = "taker"
    MAKER = "maker"


class Fee(BaseModel):
    """Fee charged, as a debit. Currency is None when the venue omits it."""

    model_config = {"frozen": True, "extra": "forbid"}

    cost: Optional[Decimal] = None
    currency: Optional[str] = None


class Trade(BaseModel):
    """
    Public trade or private fill.

    ``cost`` is price times amount computed exactly.

    Example:
        >>> trade = Trade(symbol="ETH/USDT", price=Decimal("359.24"), amount=Decimal("0.0417"))
        >>> trade.side is None
        True
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: Optional[str] = None
    order_id: Optional[str] = None
    symbol: Optional[str] = None
    timestamp: Optional[datetime] = None
    side: Optional[Union[OrderSide, str]] = None
    type: Optional[Union[OrderType, str]] = None
    taker_or_maker: Optional[Union[TakerOrMaker, str]] = None
    price: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    fee: Optional[Fee] = None
    info: Dict[str, Any] = Field(default_factory=dict)


class Order(BaseModel):
    """
    Order as reported by the venue.

    Orders are never mutated locally; a status change means fetching a new
    Order. ``filled`` and ``remaining`` stay None when the venue omits them.

    Attributes:
        id: Venue order id.
        client_order_id: Client-supplied order id, if any.
        symbol: Canonical symbol.
        timestamp: Creation time (UTC).
        status: Order status (enum member or raw code).
        side: Order side (enum member or raw code).
        type: Order type (enum member or raw code).
        price: Limit price.
        average: Average fill price.
        amount: Ordered amount.
        filled: Filled amount.
        remaining: amount - filled, only when both are known.
        cost: Filled notional.
        fee: Fee charged (currency not reported by the venue).
        info: Raw venue payload.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: Optional[str] = None
    client_order_id: Optional[str] = None
    symbol: Optional[str] = None
    timestamp: Optional[datetime] = None
    status: Optional[Union[OrderStatus, str]] = None
    side: Optional[Union[OrderSide, str]] = None
    type: Optional[Union[OrderType, str]] = None
    price: Optional[Decimal] = None
    average: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    filled: Optional[Decimal] = None
    remaining: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    fee: Optional[Fee] = None
    info: Dict[str, Any] = Field(default_factory=dict)
