"""
Bitget REST adapter.

Composes the transport, the market catalog and the normalizer into the
TradingAdapter operations. Each operation picks its endpoint from the
per-market-type tables in ``endpoints``, builds the venue request, and hands
the decoded payload to the normalizer.

Example:
    >>> from bitget_adapter.config import load_config
    >>> async with BitgetAdapter(load_config()) as adapter:
    ...     book = await adapter.fetch_order_book("BTC/USDT")
    ...     print(book.best_bid, book.best_ask)
"""

import json
import time
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, TypeVar

import structlog

from bitget_adapter.adapters.bitget import endpoints
from bitget_adapter.adapters.bitget.catalog import (
    MarketCatalog,
    MarketCatalogBuilder,
)
from bitget_adapter.adapters.bitget.endpoints import Endpoint
from bitget_adapter.adapters.bitget.normalizer import BitgetNormalizer
from bitget_adapter.adapters.bitget.rest import BitgetRestClient
from bitget_adapter.adapters.bitget.signer import RequestSigner
from bitget_adapter.config.models import AppConfig
from bitget_adapter.exceptions import (
    ArgumentsRequired,
    BadRequest,
    ExchangeError,
    InvalidOrder,
)
from bitget_adapter.interfaces.trading_adapter import TradingAdapter
from bitget_adapter.models import (
    Account,
    Balances,
    Candle,
    Currency,
    Market,
    MarketType,
    Order,
    OrderBook,
    Position,
    Ticker,
    Trade,
    Transaction,
)
from bitget_adapter.precise import (
    mul,
    ms_to_datetime,
    round_to_step,
    to_decimal,
    to_plain_string,
    truncate_to_step,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_SWAP_LIMIT = 100
DEFAULT_OHLCV_LIMIT = 1000
MY_TRADES_WINDOW_MS = 2 * 24 * 60 * 60 * 1000
TRANSACTIONS_PAGE_SIZE = 12

# Swap order status filters
SWAP_STATUS_OPEN = "3"
SWAP_STATUS_FILLED = "2"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_TIMEFRAME_UNITS = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
    "M": 30 * 24 * 60 * 60,
    "y": 365 * 24 * 60 * 60,
}


def parse_timeframe(timeframe: str) -> int:
    """
    Duration of a unified timeframe in seconds.

    Example:
        >>> parse_timeframe("15m")
        900

    Raises:
        BadRequest: If the timeframe is malformed.
    """
    amount, unit = timeframe[:-1], timeframe[-1:]
    if not amount.isdigit() or unit not in _TIMEFRAME_UNITS:
        raise BadRequest(f"Invalid timeframe '{timeframe}'")
    return int(amount) * _TIMEFRAME_UNITS[unit]


def iso8601(ms: int) -> str:
    """Epoch milliseconds as an ISO-8601 UTC string with milliseconds."""
    moment = ms_to_datetime(ms)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def ymd(ms: int) -> str:
    return ms_to_datetime(ms).strftime("%Y-%m-%d")


def _milliseconds() -> int:
    return int(time.time() * 1000)


def _sort_key(entity: Any) -> datetime:
    return entity.timestamp or _EPOCH


def filter_by_since_limit(
    entities: Sequence[T],
    since: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[T]:
    """
    Keep entities at or after ``since`` (epoch ms), oldest first, capped at
    ``limit``.
    """
    result = sorted(entities, key=_sort_key)
    if since is not None:
        start = ms_to_datetime(since)
        result = [e for e in result if e.timestamp is not None and e.timestamp >= start]
    if limit is not None:
        result = result[:limit]
    return result


def _rows(response: Any) -> List[Any]:
    """A bare list, or the ``data`` list of an envelope."""
    if isinstance(response, list):
        return response
    if isinstance(response, dict):
        data = response.get("data")
        if isinstance(data, list):
            return data
    return []


def _unwrap(response: Any) -> Any:
    """The ``data`` object of an envelope, or the response itself."""
    if isinstance(response, dict) and isinstance(response.get("data"), dict):
        return response["data"]
    return response


class BitgetAdapter(TradingAdapter):
    """
    REST adapter for the Bitget spot and swap surfaces.

    Markets are loaded lazily on the first call that needs them. Spot
    accounts and currencies are fetched once and cached.

    Attributes:
        config: Application configuration.
        client: REST transport.
        catalog: Load-once market catalog.

    Args:
        config: Application configuration; defaults for every field when
            omitted.
        client: Transport to use; built from ``config`` when omitted.
        clock: Millisecond clock used for signing and OHLCV windows.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        client: Optional[BitgetRestClient] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.config = config or AppConfig()
        self._clock = clock or _milliseconds
        self.client = client or BitgetRestClient(
            self.config.exchange,
            self.config.credentials,
            signer=RequestSigner(self.config.exchange, clock=self._clock),
        )
        self.catalog = MarketCatalog(
            MarketCatalogBuilder(self.config.exchange, self.client.request)
        )
        self._normalizer: Optional[BitgetNormalizer] = None
        self._accounts: Optional[List[Account]] = None
        self._currencies: Optional[Dict[str, Currency]] = None

        logger.info(
            "bitget_adapter_initialized",
            exchange=self.exchange_name,
            default_type=self.config.exchange.default_type.value,
        )

    @property
    def exchange_name(self) -> str:
        return self.config.exchange.id

    @property
    def normalizer(self) -> BitgetNormalizer:
        """Normalizer bound to the current catalog snapshot."""
        index = self.catalog.index
        if self._normalizer is None or self._normalizer.index is not index:
            self._normalizer = BitgetNormalizer(index, self.config.exchange)
        return self._normalizer

    async def close(self) -> None:
        await self.client.close()

    async def _request(
        self,
        endpoint: Endpoint,
        request: Dict[str, Any],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Send a request; caller ``params`` override the built fields."""
        if params:
            request = {**request, **params}
        return await self.client.request(endpoint, request)

    async def _market(self, symbol: Optional[str], operation: str) -> Market:
        if not symbol:
            raise ArgumentsRequired(f"{self.exchange_name} {operation}() requires a symbol argument")
        await self.load_markets()
        return self.catalog.market(symbol)

    # =========================================================================
    # MARKET DATA
    # =========================================================================

    async def load_markets(self, reload: bool = False) -> Mapping[str, Market]:
        return await self.catalog.load(reload=reload)

    async def fetch_markets(self) -> List[Market]:
        return await self.catalog.builder.fetch_markets()

    async def fetch_time(self) -> Optional[datetime]:
        response = await self.client.request(Endpoint.SPOT_TIME, {})
        return ms_to_datetime(response.get("data") if isinstance(response, dict) else None)

    async def fetch_currencies(self) -> Dict[str, Currency]:
        response = await self.client.request(Endpoint.SPOT_CURRENCIES, {})
        currencies = [self.normalizer.currency(currency_id) for currency_id in _rows(response)]
        result = {currency.code: currency for currency in currencies}
        self._currencies = result
        return result

    async def _currency_id(self, code: Optional[str], operation: str) -> str:
        if not code:
            raise ArgumentsRequired(
                f"{self.exchange_name} {operation}() requires a currency code argument"
            )
        if self._currencies is None:
            await self.fetch_currencies()
        currency = (self._currencies or {}).get(code)
        return currency.id if currency is not None else code.lower()

    async def fetch_order_book(self, symbol: str, limit: Optional[int] = None) -> OrderBook:
        market = await self._market(symbol, "fetch_order_book")
        endpoint = endpoints.resolve(endpoints.ORDER_BOOK, market.type, "fetch_order_book")
        request: Dict[str, Any] = {"symbol": market.id}
        if market.type == MarketType.SPOT:
            # step0 disables depth merging
            request["type"] = "step0"
        else:
            request["limit"] = DEFAULT_SWAP_LIMIT if limit is None else limit

        response = await self.client.request(endpoint, request)
        return self.normalizer.order_book(response, market)

    async def fetch_ticker(self, symbol: str) -> Ticker:
        market = await self._market(symbol, "fetch_ticker")
        endpoint = endpoints.resolve(endpoints.TICKER, market.type, "fetch_ticker")
        response = await self.client.request(endpoint, {"symbol": market.id})
        return self.normalizer.ticker(_unwrap(response), market)

    async def fetch_tickers(
        self,
        symbols: Optional[List[str]] = None,
        market_type: Optional[MarketType] = None,
    ) -> Dict[str, Ticker]:
        market_type = market_type or self.config.exchange.default_type
        endpoint = endpoints.resolve(endpoints.TICKERS, market_type, "fetch_tickers")
        await self.load_markets()
        response = await self.client.request(endpoint, {})

        # spot rows carry no time of their own; the envelope does
        timestamp = response.get("ts") if isinstance(response, dict) else None
        result: Dict[str, Ticker] = {}
        for row in _rows(response):
            ticker = self.normalizer.ticker({"timestamp": timestamp, **row})
            if ticker.symbol is not None:
                result[ticker.symbol] = ticker

        if symbols is not None:
            wanted = set(symbols)
            result = {symbol: t for symbol, t in result.items() if symbol in wanted}
        return result

    async def fetch_trades(self, symbol: str, limit: Optional[int] = None) -> List[Trade]:
        market = await self._market(symbol, "fetch_trades")
        endpoint = endpoints.resolve(endpoints.TRADES, market.type, "fetch_trades")
        request: Dict[str, Any] = {"symbol": market.id}
        if market.type == MarketType.SPOT:
            if limit is not None:
                request["size"] = limit
        else:
            request["limit"] = DEFAULT_SWAP_LIMIT if limit is None else limit

        response = await self.client.request(endpoint, request)
        # spot nests the rows one level deeper: {"data": {"ts": ..., "data": [...]}}
        data = _unwrap(response)
        rows = _rows(data) if isinstance(data, dict) else _rows(response)

        trades = [self.normalizer.trade(row, market) for row in rows]
        return filter_by_since_limit(trades, limit=limit)

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Candle]:
        market = await self._market(symbol, "fetch_ohlcv")
        endpoint = endpoints.resolve(endpoints.OHLCV, market.type, "fetch_ohlcv")
        interval = self.config.exchange.timeframes.get(market.type, {}).get(timeframe)
        if interval is None:
            raise BadRequest(
                f"{self.exchange_name} fetch_ohlcv() does not support timeframe "
                f"'{timeframe}' for {market.type.value} markets"
            )

        request: Dict[str, Any] = {"symbol": market.id}
        if market.type == MarketType.SPOT:
            request["period"] = interval
            if limit is not None:
                request["size"] = limit
        else:
            request["granularity"] = interval
            duration_ms = parse_timeframe(timeframe) * 1000
            now = self._clock()
            if since is None:
                span = DEFAULT_OHLCV_LIMIT if limit is None else limit
                request["start"] = iso8601(now - span * duration_ms)
                request["end"] = iso8601(now)
            else:
                request["start"] = iso8601(since)
                end = now if limit is None else since + limit * duration_ms
                request["end"] = iso8601(end)

        response = await self.client.request(endpoint, request)
        candles = [self.normalizer.candle(row, market) for row in _rows(response)]
        return filter_by_since_limit(candles, since, limit)

    # =========================================================================
    # ACCOUNT
    # =========================================================================

    async def fetch_accounts(self) -> List[Account]:
        response = await self.client.request(Endpoint.SPOT_ACCOUNTS, {"method": "accounts"})
        return [self.normalizer.account(row) for row in _rows(response)]

    async def load_accounts(self, reload: bool = False) -> List[Account]:
        if self._accounts is None or reload:
            self._accounts = await self.fetch_accounts()
        return self._accounts

    async def get_account_id(self, account_type: str = MarketType.SPOT.value) -> str:
        """
        Spot account id used by balance and order calls.

        The configured ``account_id`` wins; otherwise the single account of
        the given type is used.

        Raises:
            ExchangeError: If no account, or more than one, has the type.
        """
        if self.config.exchange.account_id is not None:
            return self.config.exchange.account_id

        accounts = [a for a in await self.load_accounts() if a.type == account_type]
        if not accounts:
            raise ExchangeError(
                f"{self.exchange_name} could not find an account with type "
                f"'{account_type}', configure 'account_id' instead"
            )
        if len(accounts) > 1:
            raise ExchangeError(
                f"{self.exchange_name} found more than one account with type "
                f"'{account_type}', configure 'account_id' instead"
            )
        return accounts[0].id

    async def fetch_balance(self, market_type: Optional[MarketType] = None) -> Balances:
        market_type = market_type or self.config.exchange.default_type
        endpoint = endpoints.resolve(endpoints.BALANCE, market_type, "fetch_balance")
        request: Dict[str, Any] = {}
        if MarketType(market_type) == MarketType.SPOT:
            request["account_id"] = await self.get_account_id()
            request["method"] = "balance"
        else:
            await self.load_markets()

        response = await self.client.request(endpoint, request)
        return self.normalizer.balances(response, market_type)

    async def _fetch_transactions(
        self,
        kind: str,
        code: str,
        since: Optional[int],
        limit: Optional[int],
        operation: str,
    ) -> List[Transaction]:
        request = {
            "currency": await self._currency_id(code, operation),
            "method": "deposit_withdraw",
            "type": kind,
            "size": TRANSACTIONS_PAGE_SIZE,
        }
        response = await self.client.request(Endpoint.SPOT_DEPOSIT_WITHDRAW, request)
        transactions = [self.normalizer.transaction(row) for row in _rows(response)]
        return filter_by_since_limit(transactions, since, limit)

    async def fetch_deposits(
        self, code: str, since: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Transaction]:
        return await self._fetch_transactions("deposit", code, since, limit, "fetch_deposits")

    async def fetch_withdrawals(
        self, code: str, since: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Transaction]:
        return await self._fetch_transactions("withdraw", code, since, limit, "fetch_withdrawals")

    async def fetch_positions(self) -> List[Position]:
        await self.load_markets()
        response = await self.client.request(Endpoint.SWAP_POSITIONS, {})
        return self.normalizer.positions(response)

    async def fetch_position(self, symbol: str) -> List[Position]:
        market = await self._market(symbol, "fetch_position")
        response = await self.client.request(Endpoint.SWAP_POSITION, {"symbol": market.id})
        return self.normalizer.positions(response)

    # =========================================================================
    # TRADING
    # =========================================================================

    async def create_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: Decimal,
        price: Optional[Decimal] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Order:
        """
        Place an order.

        Spot orders are sent as ``type=<side>-<type>`` against the spot
        account. A spot market buy is sized in quote currency: the cost is
        ``params["amount"]`` when given, else ``amount * price``. With
        ``create_market_buy_order_requires_price`` disabled, ``amount`` is
        taken as the cost.

        Swap orders need ``params["type"]``: "1" open long, "2" open short,
        "3" close long, "4" close short.

        Raises:
            ArgumentsRequired: Swap order without ``params["type"]``.
            InvalidOrder: Spot market buy without price or cost, or a limit
                order without price.
        """
        market = await self._market(symbol, "create_order")
        endpoint = endpoints.resolve(endpoints.CREATE_ORDER, market.type, "create_order")
        params = dict(params or {})
        client_order_id = params.pop("client_oid", None)
        alias = params.pop("clientOrderId", None)
        client_order_id = client_order_id or alias
        amount = to_decimal(amount)
        price = to_decimal(price)

        if type == "limit" and price is None:
            raise InvalidOrder(f"{self.exchange_name} create_order() requires a price for limit orders")

        request: Dict[str, Any] = {"symbol": market.id}
        if market.type == MarketType.SPOT:
            request["account_id"] = await self.get_account_id(market.type.value)
            request["method"] = "place"
            request["type"] = f"{side}-{type}"
            if type == "market" and side == "buy":
                request["amount"] = self._cost_to_precision(
                    market, self._market_buy_cost(amount, price, params)
                )
            else:
                request["amount"] = self._amount_to_precision(market, amount)
            if type == "limit":
                request["price"] = self._price_to_precision(market, price)
        else:
            swap_type = params.pop("type", None)
            if swap_type is None:
                raise ArgumentsRequired(
                    f"{self.exchange_name} create_order() requires a type parameter, "
                    "'1' = open long, '2' = open short, '3' = close long, "
                    "'4' = close short for swap orders"
                )
            request["order_type"] = "0"
            request["client_oid"] = client_order_id or str(uuid.uuid4())
            request["size"] = self._amount_to_precision(market, amount)
            request["type"] = str(swap_type)
            if type == "limit":
                request["match_price"] = "0"
                request["price"] = self._price_to_precision(market, price)
            else:
                request["match_price"] = "1"

        response = await self._request(endpoint, request, params)
        order = self.normalizer.order(response, market)
        logger.info(
            "order_created",
            exchange=self.exchange_name,
            symbol=market.symbol,
            side=side,
            type=type,
            order_id=order.id,
        )
        return order

    def _market_buy_cost(
        self,
        amount: Decimal,
        price: Optional[Decimal],
        params: Dict[str, Any],
    ) -> Decimal:
        cost = to_decimal(params.pop("amount", None))
        if cost is not None:
            return cost
        if not self.config.exchange.create_market_buy_order_requires_price:
            return amount
        if price is None:
            raise InvalidOrder(
                f"{self.exchange_name} create_order() requires the price argument with "
                "market buy orders to calculate the total cost (amount * price), or "
                "the cost in params['amount']"
            )
        return mul(amount, price)

    @staticmethod
    def _amount_to_precision(market: Market, amount: Decimal) -> str:
        step = market.precision.amount
        return to_plain_string(truncate_to_step(amount, step) if step else amount)

    @staticmethod
    def _price_to_precision(market: Market, price: Decimal) -> str:
        step = market.precision.price
        return to_plain_string(round_to_step(price, step) if step else price)

    @staticmethod
    def _cost_to_precision(market: Market, cost: Decimal) -> str:
        step = market.precision.price
        return to_plain_string(truncate_to_step(cost, step) if step else cost)

    async def cancel_order(
        self, id: str, symbol: str, params: Optional[Dict[str, Any]] = None
    ) -> Order:
        market = await self._market(symbol, "cancel_order")
        endpoint = endpoints.resolve(endpoints.CANCEL_ORDER, market.type, "cancel_order")
        if market.type == MarketType.SPOT:
            request = {"order_id": id, "method": "submitcancel"}
        else:
            request = {"orderId": id, "symbol": market.id}

        response = await self._request(endpoint, request, params)
        logger.info(
            "order_canceled",
            exchange=self.exchange_name,
            symbol=market.symbol,
            order_id=id,
        )
        return self.normalizer.order(response, market)

    async def cancel_orders(
        self, ids: List[str], symbol: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Cancel several orders; returns the raw venue response."""
        market = await self._market(symbol, "cancel_orders")
        endpoint = endpoints.resolve(endpoints.CANCEL_ORDERS, market.type, "cancel_orders")
        if market.type == MarketType.SPOT:
            # [1,2,3] without quotes
            order_ids = json.dumps([str(i) for i in ids], separators=(",", ":")).replace('"', "")
            request: Dict[str, Any] = {"method": "batchcancel", "order_ids": order_ids}
        else:
            request = {"symbol": market.id, "ids": list(ids)}

        response = await self._request(endpoint, request, params)
        logger.info(
            "orders_canceled",
            exchange=self.exchange_name,
            symbol=market.symbol,
            count=len(ids),
        )
        return response

    async def fetch_order(
        self, id: str, symbol: str, params: Optional[Dict[str, Any]] = None
    ) -> Order:
        market = await self._market(symbol, "fetch_order")
        endpoint = endpoints.resolve(endpoints.FETCH_ORDER, market.type, "fetch_order")
        if market.type == MarketType.SPOT:
            request = {"order_id": id, "method": "getOrder"}
        else:
            request = {"symbol": market.id, "orderId": id}

        response = await self._request(endpoint, request, params)
        return self.normalizer.order(_unwrap(response), market)

    async def _fetch_orders(
        self,
        table: endpoints.EndpointTable,
        operation: str,
        symbol: str,
        since: Optional[int],
        limit: Optional[int],
        spot_request: Dict[str, Any],
        swap_status: str,
    ) -> List[Order]:
        market = await self._market(symbol, operation)
        endpoint = endpoints.resolve(table, market.type, operation)
        request: Dict[str, Any] = {"symbol": market.id}
        if market.type == MarketType.SPOT:
            request.update(spot_request)
            if limit is not None:
                request["size"] = limit
        else:
            request["status"] = swap_status
            request["from"] = "1"
            request["to"] = "1"
            request["limit"] = DEFAULT_SWAP_LIMIT if limit is None else limit

        response = await self.client.request(endpoint, request)
        orders = [self.normalizer.order(row, market) for row in _rows(response)]
        return filter_by_since_limit(orders, since, limit)

    async def fetch_open_orders(
        self, symbol: str, since: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Order]:
        return await self._fetch_orders(
            endpoints.OPEN_ORDERS,
            "fetch_open_orders",
            symbol,
            since,
            limit,
            spot_request={"method": "openOrders"},
            swap_status=SWAP_STATUS_OPEN,
        )

    async def fetch_closed_orders(
        self, symbol: str, since: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Order]:
        spot_request: Dict[str, Any] = {"method": "openOrders"}
        if since is not None:
            spot_request["start_time"] = since
        return await self._fetch_orders(
            endpoints.CLOSED_ORDERS,
            "fetch_closed_orders",
            symbol,
            since,
            limit,
            spot_request=spot_request,
            swap_status=SWAP_STATUS_FILLED,
        )

    async def fetch_my_trades(
        self, symbol: str, since: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Trade]:
        market = await self._market(symbol, "fetch_my_trades")
        endpoint = endpoints.resolve(endpoints.MY_TRADES, market.type, "fetch_my_trades")
        request: Dict[str, Any] = {"symbol": market.id, "method": "matchresults"}
        if since is not None:
            request["start_date"] = ymd(since)
            request["end_date"] = ymd(since + MY_TRADES_WINDOW_MS)
        if limit is not None:
            request["size"] = limit

        response = await self.client.request(endpoint, request)
        trades = [self.normalizer.trade(row, market) for row in _rows(response)]
        return filter_by_since_limit(trades, since, limit)

    async def fetch_order_trades(
        self,
        id: str,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        market = await self._market(symbol, "fetch_order_trades")
        endpoint = endpoints.resolve(endpoints.ORDER_TRADES, market.type, "fetch_order_trades")
        if market.type == MarketType.SPOT:
            request = {"order_id": id, "method": "matchresults"}
        else:
            request = {"orderId": id, "symbol": market.id}

        response = await self.client.request(endpoint, request)
        trades = [self.normalizer.trade(row, market) for row in _rows(response)]
        return filter_by_since_limit(trades, since, limit)
