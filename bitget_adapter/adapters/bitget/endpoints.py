"""
Enumerated REST operations.

Each member names one venue endpoint as (api surface, HTTP method, path).
Operations pick members from per-market-type tables, so every request the
adapter can make is listed here and resolved when the call is built.

Example:
    >>> Endpoint.SWAP_TICKER.path
    'market/ticker'
    >>> TICKER[MarketType.SPOT]
    <Endpoint.SPOT_TICKER: ...>
"""

from enum import Enum
from typing import Dict

from bitget_adapter.config.models import ApiSurface
from bitget_adapter.exceptions import NotSupported
from bitget_adapter.models.market import MarketType


class Endpoint(Enum):
    """Venue endpoint: (api, method, path)."""

    # spot public
    SPOT_TIME = (ApiSurface.DATA, "GET", "common/timestamp")
    SPOT_CURRENCIES = (ApiSurface.DATA, "GET", "common/currencys")
    SPOT_MARKETS = (ApiSurface.DATA, "GET", "common/symbols")
    SPOT_ORDER_BOOK = (ApiSurface.DATA, "GET", "market/depth")
    SPOT_TICKER = (ApiSurface.DATA, "GET", "market/detail/merged")
    SPOT_TICKERS = (ApiSurface.DATA, "GET", "market/tickers")
    SPOT_TRADES = (ApiSurface.DATA, "GET", "market/history/trade")
    SPOT_OHLCV = (ApiSurface.DATA, "GET", "market/history/kline")

    # spot private
    SPOT_ACCOUNTS = (ApiSurface.API, "GET", "account/accounts")
    SPOT_BALANCE = (ApiSurface.API, "GET", "accounts/{account_id}/balance")
    SPOT_OPEN_ORDERS = (ApiSurface.API, "GET", "order/orders/openOrders")
    SPOT_ORDER_HISTORY = (ApiSurface.API, "GET", "order/orders/history")
    SPOT_DEPOSIT_WITHDRAW = (ApiSurface.API, "GET", "order/deposit_withdraw")
    SPOT_PLACE_ORDER = (ApiSurface.API, "POST", "order/orders/place")
    SPOT_CANCEL_ORDER = (ApiSurface.API, "POST", "order/orders/{order_id}/submitcancel")
    SPOT_CANCEL_ORDERS = (ApiSurface.API, "POST", "order/orders/batchcancel")
    SPOT_ORDER = (ApiSurface.API, "POST", "order/orders/{order_id}")
    SPOT_ORDER_TRADES = (ApiSurface.API, "POST", "order/orders/{order_id}/matchresults")
    SPOT_MY_TRADES = (ApiSurface.API, "POST", "order/matchresults")

    # swap public
    SWAP_TIME = (ApiSurface.CAPI, "GET", "market/time")
    SWAP_MARKETS = (ApiSurface.CAPI, "GET", "market/contracts")
    SWAP_ORDER_BOOK = (ApiSurface.CAPI, "GET", "market/depth")
    SWAP_TICKER = (ApiSurface.CAPI, "GET", "market/ticker")
    SWAP_TICKERS = (ApiSurface.CAPI, "GET", "market/tickers")
    SWAP_TRADES = (ApiSurface.CAPI, "GET", "market/trades")
    SWAP_OHLCV = (ApiSurface.CAPI, "GET", "market/candles")

    # swap private
    SWAP_ACCOUNTS = (ApiSurface.SWAP, "GET", "account/accounts")
    SWAP_POSITION = (ApiSurface.SWAP, "GET", "position/singlePosition")
    SWAP_POSITIONS = (ApiSurface.SWAP, "GET", "position/allPosition")
    SWAP_ORDER = (ApiSurface.SWAP, "GET", "order/detail")
    SWAP_ORDERS = (ApiSurface.SWAP, "GET", "order/orders")
    SWAP_ORDER_TRADES = (ApiSurface.SWAP, "GET", "order/fills")
    SWAP_PLACE_ORDER = (ApiSurface.SWAP, "POST", "order/placeOrder")
    SWAP_CANCEL_ORDER = (ApiSurface.SWAP, "POST", "order/cancel_order")
    SWAP_CANCEL_ORDERS = (ApiSurface.SWAP, "POST", "order/cancel_batch_orders")

    @property
    def api(self) -> ApiSurface:
        return self.value[0]

    @property
    def method(self) -> str:
        return self.value[1]

    @property
    def path(self) -> str:
        return self.value[2]

    @property
    def is_private(self) -> bool:
        return self.api in (ApiSurface.API, ApiSurface.SWAP)


EndpointTable = Dict[MarketType, Endpoint]

MARKETS: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_MARKETS,
    MarketType.SWAP: Endpoint.SWAP_MARKETS,
}
ORDER_BOOK: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_ORDER_BOOK,
    MarketType.SWAP: Endpoint.SWAP_ORDER_BOOK,
}
TICKER: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_TICKER,
    MarketType.SWAP: Endpoint.SWAP_TICKER,
}
TICKERS: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_TICKERS,
    MarketType.SWAP: Endpoint.SWAP_TICKERS,
}
TRADES: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_TRADES,
    MarketType.SWAP: Endpoint.SWAP_TRADES,
}
OHLCV: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_OHLCV,
    MarketType.SWAP: Endpoint.SWAP_OHLCV,
}
BALANCE: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_BALANCE,
    MarketType.SWAP: Endpoint.SWAP_ACCOUNTS,
}
CREATE_ORDER: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_PLACE_ORDER,
    MarketType.SWAP: Endpoint.SWAP_PLACE_ORDER,
}
CANCEL_ORDER: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_CANCEL_ORDER,
    MarketType.SWAP: Endpoint.SWAP_CANCEL_ORDER,
}
CANCEL_ORDERS: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_CANCEL_ORDERS,
    MarketType.SWAP: Endpoint.SWAP_CANCEL_ORDERS,
}
FETCH_ORDER: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_ORDER,
    MarketType.SWAP: Endpoint.SWAP_ORDER,
}
OPEN_ORDERS: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_OPEN_ORDERS,
    MarketType.SWAP: Endpoint.SWAP_ORDERS,
}
CLOSED_ORDERS: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_ORDER_HISTORY,
    MarketType.SWAP: Endpoint.SWAP_ORDERS,
}
ORDER_TRADES: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_ORDER_TRADES,
    MarketType.SWAP: Endpoint.SWAP_ORDER_TRADES,
}
MY_TRADES: EndpointTable = {
    MarketType.SPOT: Endpoint.SPOT_MY_TRADES,
}


def resolve(table: EndpointTable, market_type: "MarketType | str", operation: str) -> Endpoint:
    """
    Pick the endpoint of an operation for a market type.

    Raises:
        NotSupported: If the operation has no endpoint for the type.
    """
    try:
        return table[MarketType(market_type)]
    except (KeyError, ValueError):
        raise NotSupported(
            f"{operation}() does not support market type '{market_type}'"
        ) from None
