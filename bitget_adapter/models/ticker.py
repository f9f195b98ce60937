"""
Ticker and candle data models.

All prices and volumes are Decimal. Absent venue fields stay None.

Models:
    Ticker: 24h market summary for one symbol
    Candle: One OHLCV bar
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, computed_field


class Ticker(BaseModel):
    """
    Normalized ticker.

    Derived fields (``change``, ``percentage``, ``average``) are only set when
    the venue reported both ``last`` and ``open``. ``vwap`` is quote volume
    over base volume.

    Example:
        >>> ticker = Ticker(symbol="BTCUSD", last=Decimal("9574.5"))
        >>> ticker.close
        Decimal('9574.5')
    """

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: Optional[str] = Field(default=None, description="Canonical symbol")
    timestamp: Optional[datetime] = Field(default=None, description="Venue time (UTC)")
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    bid: Optional[Decimal] = None
    bid_volume: Optional[Decimal] = None
    ask: Optional[Decimal] = None
    ask_volume: Optional[Decimal] = None
    vwap: Optional[Decimal] = None
    open: Optional[Decimal] = None
    last: Optional[Decimal] = None
    previous_close: Optional[Decimal] = None
    change: Optional[Decimal] = None
    percentage: Optional[Decimal] = None
    average: Optional[Decimal] = None
    base_volume: Optional[Decimal] = None
    quote_volume: Optional[Decimal] = None
    info: Dict[str, Any] = Field(default_factory=dict)

    @computed_field  # type: ignore[misc]
    @property
    def close(self) -> Optional[Decimal]:
        """Close price; identical to the last price."""
        return self.last


class Candle(BaseModel):
    """
    One OHLCV bar.

    ``info`` holds the raw candle, which is a list for array-form payloads.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    timestamp: Optional[datetime] = None
    open: Optional[Decimal] = None
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    close: Optional[Decimal] = None
    volume: Optional[Decimal] = None
    info: Any = None
