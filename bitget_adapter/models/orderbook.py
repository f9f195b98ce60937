"""
Order book data models.

Models:
    PriceLevel: Single price level (price, amount)
    OrderBook: Normalized REST order book snapshot
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field, model_validator


class PriceLevel(BaseModel):
    """
    Single price level in an order book.

    Example:
        >>> level = PriceLevel(price=Decimal("50000.00"), amount=Decimal("1.5"))
        >>> level.notional
        Decimal('75000.000')
    """

    model_config = {"frozen": True, "extra": "forbid"}

    price: Decimal = Field(..., description="Price in quote currency", ge=Decimal("0"))
    amount: Decimal = Field(..., description="Amount in base units", ge=Decimal("0"))

    @computed_field  # type: ignore[misc]
    @property
    def notional(self) -> Decimal:
        """Price times amount."""
        return self.price * self.amount


class OrderBook(BaseModel):
    """
    Normalized order book snapshot.

    Attributes:
        symbol: Canonical symbol.
        timestamp: Venue snapshot time (UTC), if reported.
        nonce: Venue snapshot id, if reported.
        bids: Bid levels, best (highest) first.
        asks: Ask levels, best (lowest) first.
        info: Raw venue payload.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: Optional[str] = None
    timestamp: Optional[datetime] = None
    nonce: Optional[int] = None
    bids: List[PriceLevel] = Field(default_factory=list)
    asks: List[PriceLevel] = Field(default_factory=list)
    info: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_sorting(self) -> "OrderBook":
        """
        Validate level ordering.

        Ensures:
            - Bids are sorted in descending order
            - Asks are sorted in ascending order
        """
        for i in range(len(self.bids) - 1):
            if self.bids[i].price < self.bids[i + 1].price:
                raise ValueError(
                    f"Bids must be sorted descending: {self.bids[i].price} < {self.bids[i + 1].price}"
                )
        for i in range(len(self.asks) - 1):
            if self.asks[i].price > self.asks[i + 1].price:
                raise ValueError(
                    f"Asks must be sorted ascending: {self.asks[i].price} > {self.asks[i + 1].price}"
                )
        return self

    @computed_field  # type: ignore[misc]
    @property
    def best_bid(self) -> Optional[Decimal]:
        """Best (highest) bid price, or None if no bids."""
        return self.bids[0].price if self.bids else None

    @computed_field  # type: ignore[misc]
    @property
    def best_ask(self) -> Optional[Decimal]:
        """Best (lowest) ask price, or None if no asks."""
        return self.asks[0].price if self.asks else None
