"""
Swap position data model.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field


class PositionSide(str, Enum):
    """Direction of a swap position."""

    LONG = "long"
    SHORT = "short"


class Position(BaseModel):
    """
    Open swap position.

    Attributes:
        symbol: Canonical symbol.
        side: long/short, or the raw venue value when unknown.
        contracts: Position size in contracts.
        contracts_available: Contracts that can be closed now.
        entry_price: Average entry price.
        liquidation_price: Estimated liquidation price.
        leverage: Position leverage.
        margin: Margin allocated to the position.
        realized_pnl: Realized profit and loss.
        unrealized_pnl: Unrealized profit and loss.
        maintenance_margin_rate: Maintenance margin rate.
        margin_mode: Venue margin mode ("fixed" or "crossed").
        timestamp: Venue time (UTC), if reported.
        info: Raw venue payload.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: Optional[str] = None
    side: Optional[Union[PositionSide, str]] = None
    contracts: Optional[Decimal] = None
    contracts_available: Optional[Decimal] = None
    entry_price: Optional[Decimal] = None
    liquidation_price: Optional[Decimal] = None
    leverage: Optional[Decimal] = None
    margin: Optional[Decimal] = None
    realized_pnl: Optional[Decimal] = None
    unrealized_pnl: Optional[Decimal] = None
    maintenance_margin_rate: Optional[Decimal] = None
    margin_mode: Optional[str] = None
    timestamp: Optional[datetime] = None
    info: Dict[str, Any] = Field(default_factory=dict)
