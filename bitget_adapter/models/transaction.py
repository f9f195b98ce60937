"""
Deposit and withdrawal data model.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field

from bitget_adapter.models.order import Fee


class TransactionStatus(str, Enum):
    """Canonical transaction status."""

    PENDING = "pending"
    OK = "ok"
    CANCELED = "canceled"
    FAILED = "failed"


class TransactionType(str, Enum):
    """Canonical transaction direction."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class Transaction(BaseModel):
    """
    Deposit or withdrawal.

    The fee currency is the transaction currency.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: Optional[str] = None
    txid: Optional[str] = None
    type: Optional[Union[TransactionType, str]] = None
    currency: Optional[str] = None
    amount: Optional[Decimal] = None
    address: Optional[str] = None
    tag: Optional[str] = None
    status: Optional[Union[TransactionStatus, str]] = None
    fee: Optional[Fee] = None
    timestamp: Optional[datetime] = None
    updated: Optional[datetime] = None
    info: Dict[str, Any] = Field(default_factory=dict)
