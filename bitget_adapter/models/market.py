"""
Market data models for the adapter.

A Market is the canonical description of one tradable instrument. Markets are
built by the catalog from the venue listing endpoints and looked up by venue
id during normalization.

Models:
    MarketType: Venue market type (spot or swap)
    MinMax: Optional lower/upper bound
    MarketPrecision: Amount and price step sizes as exact decimal strings
    MarketLimits: Amount, price and cost bounds
    Market: Canonical market record
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


class MarketType(str, Enum):
    """Market type. The venue lists spot pairs and perpetual swaps."""

    SPOT = "spot"
    SWAP = "swap"


class MinMax(BaseModel):
    """Optional lower and upper bound of a quantity."""

    model_config = {"frozen": True, "extra": "forbid"}

    min: Optional[Decimal] = None
    max: Optional[Decimal] = None


class MarketPrecision(BaseModel):
    """
    Step sizes of a market.

    Steps are kept as plain decimal strings (e.g. "0.0001") so that they can
    be used directly as quantization exponents without float artifacts.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    amount: Optional[str] = Field(
        default=None,
        description="Amount step size",
        examples=["0.0001"],
    )
    price: Optional[str] = Field(
        default=None,
        description="Price step size",
        examples=["0.01"],
    )


class MarketLimits(BaseModel):
    """Amount, price and cost bounds of a market."""

    model_config = {"frozen": True, "extra": "forbid"}

    amount: MinMax = Field(default_factory=MinMax)
    price: MinMax = Field(default_factory=MinMax)
    cost: MinMax = Field(default_factory=MinMax)


class Market(BaseModel):
    """
    Canonical market record.

    Attributes:
        id: Venue-native market id (e.g. "btcusdt_spbl" or "cmt_btcusdt").
        symbol: Canonical symbol; "BASE/QUOTE" for spot, the id uppercased
            for swaps.
        base: Common base currency code.
        quote: Common quote currency code.
        base_id: Venue base currency id.
        quote_id: Venue quote currency id.
        type: Market type.
        spot: True for spot markets.
        swap: True for swap markets.
        active: Trading status, None when the venue does not report one.
        precision: Amount and price step sizes.
        limits: Amount, price and cost bounds.
        maker: Maker fee rate from configuration.
        taker: Taker fee rate from configuration.
        info: Raw venue payload.

    Example:
        >>> market = Market(
        ...     id="btcusdt",
        ...     symbol="BTC/USDT",
        ...     base="BTC",
        ...     quote="USDT",
        ...     base_id="btc",
        ...     quote_id="usdt",
        ...     type=MarketType.SPOT,
        ... )
        >>> market.spot
        True
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1)
    base: Optional[str] = None
    quote: Optional[str] = None
    base_id: Optional[str] = None
    quote_id: Optional[str] = None
    type: MarketType
    spot: bool = False
    swap: bool = False
    active: Optional[bool] = None
    precision: MarketPrecision = Field(default_factory=MarketPrecision)
    limits: MarketLimits = Field(default_factory=MarketLimits)
    maker: Optional[Decimal] = None
    taker: Optional[Decimal] = None
    info: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def set_type_flags(cls, data: Any) -> Any:
        """Derive the spot/swap flags from the type."""
        if isinstance(data, dict) and "type" in data:
            market_type = MarketType(data["type"])
            data = {
                **data,
                "spot": market_type == MarketType.SPOT,
                "swap": market_type == MarketType.SWAP,
            }
        return data
