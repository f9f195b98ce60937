"""
Account and currency reference models.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Account(BaseModel):
    """Spot sub-account (e.g. the "spot" trading account)."""

    model_config = {"frozen": True, "extra": "forbid"}

    id: str
    type: Optional[str] = None
    currency: Optional[str] = None
    info: Dict[str, Any] = Field(default_factory=dict)


class Currency(BaseModel):
    """Currency listed by the venue, with its common code."""

    model_config = {"frozen": True, "extra": "forbid"}

    id: str
    code: str
    info: Any = None
