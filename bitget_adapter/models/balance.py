"""
Balance data models.

Spot balances are keyed by currency code; swap balances are keyed by market
symbol because every swap market has its own margin account.

Models:
    BalanceEntry: free / used / total of one key
    Balances: All entries of one account
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from bitget_adapter.precise import add, sub


class BalanceEntry(BaseModel):
    """
    Balance of one currency or margin account.

    Use :meth:`complete` to fill a missing component from the other two.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    free: Optional[Decimal] = None
    used: Optional[Decimal] = None
    total: Optional[Decimal] = None

    def complete(self) -> "BalanceEntry":
        """
        Fill in the one missing component, exactly.

        Rules:
            - total missing: free + used (if both known)
            - used missing: total - free
            - free missing: total - used

        Returns:
            BalanceEntry: A new entry; self if nothing can be derived.
        """
        free, used, total = self.free, self.used, self.total
        if total is None and free is not None and used is not None:
            total = add(free, used)
        if used is None:
            used = sub(total, free)
        if free is None:
            free = sub(total, used)
        if (free, used, total) == (self.free, self.used, self.total):
            return self
        return BalanceEntry(free=free, used=used, total=total)


class Balances(BaseModel):
    """
    All balances of one account.

    Example:
        >>> balances = Balances(entries={"BTC": BalanceEntry(free=Decimal("1.5"))})
        >>> balances["BTC"].free
        Decimal('1.5')
    """

    model_config = {"frozen": True, "extra": "forbid"}

    entries: Dict[str, BalanceEntry] = Field(default_factory=dict)
    timestamp: Optional[datetime] = None
    info: Any = None

    def __getitem__(self, code: str) -> BalanceEntry:
        return self.entries[code]

    def __contains__(self, code: object) -> bool:
        return code in self.entries

    def get(self, code: str) -> Optional[BalanceEntry]:
        return self.entries.get(code)

    @property
    def free(self) -> Dict[str, Optional[Decimal]]:
        return {code: entry.free for code, entry in self.entries.items()}

    @property
    def used(self) -> Dict[str, Optional[Decimal]]:
        return {code: entry.used for code, entry in self.entries.items()}

    @property
    def total(self) -> Dict[str, Optional[Decimal]]:
        return {code: entry.total for code, entry in self.entries.items()}
