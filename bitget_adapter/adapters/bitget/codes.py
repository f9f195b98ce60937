"""
Fixed venue code tables.

The venue encodes order status, side and type, and transaction status as
short codes that differ between the spot surface ("submitted", "buy-limit")
and the swap surface ("1", "-2"). Each table maps known codes to a canonical
enum member and passes unknown codes through unchanged as the raw string, so
a code the venue introduces later stays visible instead of being coerced.

Example:
    >>> parse_order_status("partial-filled")
    <OrderStatus.OPEN: 'open'>
    >>> parse_order_side("99")
    '99'
"""

from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar, Union

from bitget_adapter.models.order import OrderSide, OrderStatus, OrderType
from bitget_adapter.models.transaction import TransactionStatus

E = TypeVar("E", bound=Enum)


class CodeTable(Generic[E]):
    """
    Lookup table with identity passthrough for unknown codes.

    Args:
        name: Table name, used in reprs.
        mapping: Venue code -> canonical member.
    """

    def __init__(self, name: str, mapping: Dict[str, E]):
        self.name = name
        self._mapping = dict(mapping)

    def parse(self, code: Any) -> Optional[Union[E, str]]:
        """
        Map a venue code.

        Returns:
            The canonical member, the raw code as str when unknown, or None
            when the code is None.
        """
        if code is None:
            return None
        key = str(code)
        return self._mapping.get(key, key)

    def __contains__(self, code: object) -> bool:
        return str(code) in self._mapping

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:
        return f"CodeTable(name={self.name!r}, codes={len(self._mapping)})"


ORDER_STATUS: CodeTable[OrderStatus] = CodeTable(
    "order_status",
    {
        # spot
        "submitted": OrderStatus.OPEN,
        "partial-filled": OrderStatus.OPEN,
        "partial-canceled": OrderStatus.CANCELED,
        "filled": OrderStatus.CLOSED,
        "canceled": OrderStatus.CANCELED,
        # swap
        "-2": OrderStatus.FAILED,
        "-1": OrderStatus.CANCELED,
        "0": OrderStatus.OPEN,
        "1": OrderStatus.OPEN,
        "2": OrderStatus.CLOSED,
        "3": OrderStatus.OPEN,
        "4": OrderStatus.CANCELED,
    },
)

ORDER_SIDE: CodeTable[OrderSide] = CodeTable(
    "order_side",
    {
        "buy-market": OrderSide.BUY,
        "sell-market": OrderSide.SELL,
        "buy-limit": OrderSide.BUY,
        "sell-limit": OrderSide.SELL,
        "1": OrderSide.LONG,  # open long
        "2": OrderSide.SHORT,  # open short
        "3": OrderSide.LONG,  # close long
        "4": OrderSide.SHORT,  # close short
    },
)

ORDER_TYPE: CodeTable[OrderType] = CodeTable(
    "order_type",
    {
        "buy-market": OrderType.MARKET,
        "sell-market": OrderType.MARKET,
        "buy-limit": OrderType.LIMIT,
        "sell-limit": OrderType.LIMIT,
        "1": OrderType.OPEN,
        "2": OrderType.OPEN,
        "3": OrderType.CLOSE,
        "4": OrderType.CLOSE,
    },
)

TRANSACTION_STATUS: CodeTable[TransactionStatus] = CodeTable(
    "transaction_status",
    {
        # withdrawals
        "WaitForOperation": TransactionStatus.PENDING,
        "OperationLock": TransactionStatus.PENDING,
        "OperationSuccess": TransactionStatus.OK,
        "Cancel": TransactionStatus.CANCELED,
        "Sure": TransactionStatus.OK,
        "Fail": TransactionStatus.FAILED,
        "WaitForChainSure": TransactionStatus.OK,
        # deposits
        "WAIT_0": TransactionStatus.PENDING,
        "WAIT_1": TransactionStatus.PENDING,
        "DATA_CHANGE": TransactionStatus.PENDING,
        "SUCCESS": TransactionStatus.OK,
    },
)


def parse_order_status(code: Any) -> Optional[Union[OrderStatus, str]]:
    return ORDER_STATUS.parse(code)


def parse_order_side(code: Any) -> Optional[Union[OrderSide, str]]:
    return ORDER_SIDE.parse(code)


def parse_order_type(code: Any) -> Optional[Union[OrderType, str]]:
    return ORDER_TYPE.parse(code)


def parse_transaction_status(code: Any) -> Optional[Union[TransactionStatus, str]]:
    return TRANSACTION_STATUS.parse(code)
