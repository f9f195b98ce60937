"""
Response Normalizer for Bitget REST payloads.

Converts venue-shaped JSON from both surfaces into the canonical models in
``bitget_adapter.models``. The spot and swap surfaces disagree on field names
(``best_bid`` vs ``bid``), encodings (array vs object candles) and code
vocabularies; every method here accepts either shape.

Rules shared by every method:
    - Numbers are parsed from their decimal strings, never via float.
    - A missing field decodes to None. Normalization never raises for an
      absent optional field.
    - The raw payload is kept in ``info``.

Symbol resolution (tickers, trades, orders, balances, positions):
    1. venue id found in the MarketIndex -> catalog symbol
    2. id of the form "base_quote" -> "BASE/QUOTE"
    3. any other id -> id uppercased
    4. no id -> symbol of the market supplied by the caller

Example:
    >>> normalizer = BitgetNormalizer(MarketIndex([]), ExchangeConfig())
    >>> ticker = normalizer.ticker({"symbol": "btcusd", "best_bid": "9574.0"})
    >>> ticker.symbol, ticker.bid, ticker.bid_volume
    ('BTCUSD', Decimal('9574.0'), None)
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

import structlog

from bitget_adapter.adapters.bitget.catalog import MarketIndex, currency_code
from bitget_adapter.adapters.bitget.codes import (
    parse_order_side,
    parse_order_status,
    parse_order_type,
    parse_transaction_status,
)
from bitget_adapter.config.models import ExchangeConfig
from bitget_adapter.exceptions import NotSupported
from bitget_adapter.models import (
    Account,
    BalanceEntry,
    Balances,
    Candle,
    Currency,
    Fee,
    Market,
    MarketType,
    Order,
    OrderBook,
    Position,
    PositionSide,
    PriceLevel,
    TakerOrMaker,
    Ticker,
    Trade,
    Transaction,
    TransactionType,
)
from bitget_adapter.precise import (
    add,
    div,
    ms_to_datetime,
    mul,
    neg,
    sub,
    to_decimal,
    to_int,
)

logger = structlog.get_logger(__name__)

HUNDRED = Decimal(100)
TWO = Decimal(2)

TAKER_OR_MAKER = {"M": TakerOrMaker.MAKER, "T": TakerOrMaker.TAKER}

POSITION_SIDES = {
    "1": PositionSide.LONG,
    "long": PositionSide.LONG,
    "2": PositionSide.SHORT,
    "short": PositionSide.SHORT,
}

TRANSACTION_TYPES = {
    "withdraw": TransactionType.WITHDRAWAL,
    "deposit": TransactionType.DEPOSIT,
}


class EntityKind(str, Enum):
    """Canonical entity kinds the normalizer can produce."""

    TICKER = "ticker"
    TRADE = "trade"
    CANDLE = "candle"
    ORDER_BOOK = "order_book"
    ORDER = "order"
    BALANCES = "balances"
    TRANSACTION = "transaction"
    POSITION = "position"
    ACCOUNT = "account"
    CURRENCY = "currency"


def _first(payload: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key that is present and not None."""
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def _str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _dec(payload: Mapping[str, Any], *keys: str) -> Optional[Decimal]:
    """Decimal of the first present key; non-numeric values decode to None."""
    try:
        return to_decimal(_first(payload, *keys))
    except ValueError:
        return None


def _at(values: Any, position: int) -> Any:
    if isinstance(values, (list, tuple)) and 0 <= position < len(values):
        return values[position]
    return None


def _dec_at(values: Any, position: int) -> Optional[Decimal]:
    try:
        return to_decimal(_at(values, position))
    except ValueError:
        return None


class BitgetNormalizer:
    """
    Normalizes Bitget payloads to canonical models.

    The normalizer is bound to one MarketIndex snapshot and holds no other
    state, so one instance can serve concurrent calls. Build a new one after
    the catalog reloads.

    Args:
        index: Catalog snapshot used for symbol resolution.
        config: Exchange configuration (aliases, volume selectors).
    """

    def __init__(self, index: MarketIndex, config: ExchangeConfig):
        self.index = index
        self.config = config

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def normalize(
        self,
        kind: "EntityKind | str",
        payload: Any,
        market: Optional[Market] = None,
        market_type: "MarketType | str | None" = None,
    ) -> Any:
        """
        Normalize one payload of the given kind.

        Args:
            kind: Entity kind.
            payload: Decoded venue payload.
            market: Market the payload belongs to, when known.
            market_type: Required for BALANCES; selects the candle volume
                source when no market is given.

        Returns:
            The canonical entity (Balances for BALANCES, a list of Position
            for POSITION).
        """
        kind = EntityKind(kind)
        if kind == EntityKind.TICKER:
            return self.ticker(payload, market)
        if kind == EntityKind.TRADE:
            return self.trade(payload, market)
        if kind == EntityKind.CANDLE:
            return self.candle(payload, market, market_type)
        if kind == EntityKind.ORDER_BOOK:
            return self.order_book(payload, market)
        if kind == EntityKind.ORDER:
            return self.order(payload, market)
        if kind == EntityKind.BALANCES:
            return self.balances(payload, market_type or (market.type if market else None))
        if kind == EntityKind.TRANSACTION:
            return self.transaction(payload)
        if kind == EntityKind.POSITION:
            return self.positions(payload)
        if kind == EntityKind.ACCOUNT:
            return self.account(payload)
        return self.currency(payload)

    # =========================================================================
    # SYMBOLS
    # =========================================================================

    def currency_code(self, currency_id: Any) -> Optional[str]:
        return currency_code(_str(currency_id), self.config.common_currencies)

    def resolve_market(
        self,
        market_id: Any,
        market: Optional[Market] = None,
    ) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        """
        Resolve a venue market id.

        Returns:
            Tuple of (symbol, base, quote); base and quote are None when only
            the uppercased id is known.
        """
        if market_id is not None:
            market_id = str(market_id)
            known = self.index.get(market_id)
            if known is not None:
                return known.symbol, known.base, known.quote
            parts = market_id.split("_")
            if len(parts) == 2:
                base = self.currency_code(parts[0])
                quote = self.currency_code(parts[1])
                return f"{base}/{quote}", base, quote
            return market_id.upper(), None, None
        if market is not None:
            return market.symbol, market.base, market.quote
        return None, None, None

    def normalize_symbol(self, market_id: Any, market: Optional[Market] = None) -> Optional[str]:
        return self.resolve_market(market_id, market)[0]

    # =========================================================================
    # MARKET DATA
    # =========================================================================

    def ticker(self, payload: Dict[str, Any], market: Optional[Market] = None) -> Ticker:
        """
        Normalize a ticker.

        Spot sends ``bid``/``ask`` as ``[price, volume]`` pairs; swap sends
        scalar ``best_bid``/``best_ask`` and the volumes stay None.
        """
        symbol = self.normalize_symbol(_first(payload, "instrument_id", "symbol"), market)
        last = _dec(payload, "last", "close")
        open_ = _dec(payload, "open")
        bid, bid_volume = self._quote(payload, "bid", "best_bid")
        ask, ask_volume = self._quote(payload, "ask", "best_ask")
        base_volume = _dec(payload, "amount", "volume_24h")
        quote_volume = _dec(payload, "vol")

        change = percentage = average = None
        if last is not None and open_ is not None:
            change = sub(last, open_)
            percentage = mul(div(change, open_), HUNDRED)
            average = div(add(open_, last), TWO)

        return Ticker(
            symbol=symbol,
            timestamp=ms_to_datetime(_first(payload, "timestamp", "id")),
            high=_dec(payload, "high", "high_24h"),
            low=_dec(payload, "low", "low_24h"),
            bid=bid,
            bid_volume=bid_volume,
            ask=ask,
            ask_volume=ask_volume,
            vwap=div(quote_volume, base_volume),
            open=open_,
            last=last,
            change=change,
            percentage=percentage,
            average=average,
            base_volume=base_volume,
            quote_volume=quote_volume,
            info=payload,
        )

    @staticmethod
    def _quote(
        payload: Mapping[str, Any], pair_key: str, scalar_key: str
    ) -> Tuple[Optional[Decimal], Optional[Decimal]]:
        pair = payload.get(pair_key)
        if pair is None:
            return _dec(payload, scalar_key), None
        if isinstance(pair, (list, tuple)):
            return _dec_at(pair, 0), _dec_at(pair, 1)
        return _dec(payload, pair_key), None

    def trade(self, payload: Dict[str, Any], market: Optional[Market] = None) -> Trade:
        """
        Normalize a public trade or a private fill.

        Private fills carry ``filled_amount``/``order_qty``; public trades carry
        ``size``/``amount``. The fill fields win when both are present.
        A swap ``fee`` is rebate-negative and gets negated into a debit; a
        spot ``filled_fees`` is already a debit.
        """
        symbol, base, quote = self.resolve_market(payload.get("symbol"), market)

        timestamp = _first(payload, "timestamp", "ts", "created_at")
        price = _dec(payload, "price")
        amount = _dec(payload, "filled_amount", "order_qty")
        if amount is None:
            amount = _dec(payload, "size", "amount")

        liquidity = _first(payload, "exec_type", "liquidity")
        taker_or_maker = TAKER_OR_MAKER.get(liquidity, liquidity) if liquidity is not None else None

        code = payload.get("type")
        if code is None:
            code = _first(payload, "side", "direction")
        side = parse_order_side(code)
        order_type = parse_order_type(code)

        fee = None
        fee_cost = neg(_dec(payload, "fee"))
        if fee_cost is None:
            fee_cost = _dec(payload, "filled_fees")
        if fee_cost is not None:
            fee = Fee(cost=fee_cost, currency=base if side == "buy" else quote)

        return Trade(
            id=_str(_first(payload, "trade_id", "id")),
            order_id=_str(payload.get("order_id")),
            symbol=symbol,
            timestamp=ms_to_datetime(timestamp),
            side=side,
            type=order_type,
            taker_or_maker=taker_or_maker,
            price=price,
            amount=amount,
            cost=mul(price, amount),
            fee=fee,
            info=payload,
        )

    def candle(
        self,
        payload: Any,
        market: Optional[Market] = None,
        market_type: "MarketType | str | None" = None,
    ) -> Candle:
        """
        Normalize one OHLCV bar.

        Array form: ``[time, open, high, low, close, volume, volume]``.
        Object form: ``{"id": time, "open": ..., "amount": ...}``.
        Volume comes from the configured selector of the market type; a
        positional selector on an object candle (or a named one on an array
        candle) yields no volume.
        """
        if market is not None:
            resolved_type = market.type
        elif market_type is not None:
            resolved_type = MarketType(market_type)
        else:
            resolved_type = self.config.default_type
        selector = self.config.ohlcv_volume.get(resolved_type)

        if isinstance(payload, (list, tuple)):
            volume = None
            if selector is not None and selector.index is not None:
                volume = _dec_at(payload, selector.index)
            return Candle(
                timestamp=ms_to_datetime(_at(payload, 0)),
                open=_dec_at(payload, 1),
                high=_dec_at(payload, 2),
                low=_dec_at(payload, 3),
                close=_dec_at(payload, 4),
                volume=volume,
                info=payload,
            )

        volume = None
        if selector is not None and selector.field is not None:
            volume = _dec(payload, selector.field)
        return Candle(
            timestamp=ms_to_datetime(payload.get("id")),
            open=_dec(payload, "open"),
            high=_dec(payload, "high"),
            low=_dec(payload, "low"),
            close=_dec(payload, "close"),
            volume=volume,
            info=payload,
        )

    def order_book(self, payload: Dict[str, Any], market: Optional[Market] = None) -> OrderBook:
        """
        Normalize an order book.

        Spot wraps ``{id, ts, bids, asks}`` in ``data``; swap returns
        ``{timestamp, bids, asks}`` directly. Levels are re-sorted best first.
        """
        data = payload.get("data") if isinstance(payload.get("data"), dict) else payload

        bids = sorted(self._levels(data.get("bids")), key=lambda level: level.price, reverse=True)
        asks = sorted(self._levels(data.get("asks")), key=lambda level: level.price)

        return OrderBook(
            symbol=market.symbol if market is not None else None,
            timestamp=ms_to_datetime(_first(data, "timestamp", "ts")),
            nonce=to_int(data.get("id")),
            bids=bids,
            asks=asks,
            info=payload,
        )

    @staticmethod
    def _levels(raw_levels: Any) -> List[PriceLevel]:
        levels: List[PriceLevel] = []
        for raw in raw_levels or []:
            price = _dec_at(raw, 0)
            amount = _dec_at(raw, 1)
            if price is None or amount is None:
                logger.debug("order_book_level_skipped", level=raw)
                continue
            levels.append(PriceLevel(price=price, amount=amount))
        return levels

    # =========================================================================
    # TRADING
    # =========================================================================

    def order(self, payload: Dict[str, Any], market: Optional[Market] = None) -> Order:
        """
        Normalize an order.

        Handles full order records and the bare acknowledgements returned
        by order placement (spot: ``{"data": "<id>"}``; swap:
        ``{"order_id": ..., "client_oid": ...}``).
        """
        order_id = payload.get("id")
        if order_id is None and isinstance(payload.get("data"), (str, int)):
            order_id = payload["data"]
        if order_id is None:
            order_id = payload.get("order_id")
        status = _first(payload, "state", "status")

        code = payload.get("type")
        amount = _dec(payload, "amount", "size")
        filled = _dec(payload, "filled_amount", "filled_qty")
        remaining = sub(amount, filled)

        fee = None
        fee_cost = _dec(payload, "filled_fees", "fee")
        if fee_cost is not None:
            fee = Fee(cost=fee_cost)

        return Order(
            id=_str(order_id),
            client_order_id=_str(payload.get("client_oid")),
            symbol=self.normalize_symbol(payload.get("symbol"), market),
            timestamp=ms_to_datetime(_first(payload, "created_at", "createTime")),
            status=parse_order_status(status),
            side=parse_order_side(code),
            type=parse_order_type(code),
            price=_dec(payload, "price"),
            average=_dec(payload, "price_avg"),
            amount=amount,
            filled=filled,
            remaining=remaining,
            cost=_dec(payload, "filled_cash_amount"),
            fee=fee,
            info=payload,
        )

    def positions(self, payload: Any) -> List[Position]:
        """
        Normalize swap positions.

        Accepts one ``{margin_mode, holding: [...]}`` group or a list of
        them, as returned by the single and all-positions endpoints.
        """
        groups = payload if isinstance(payload, list) else [payload]
        result: List[Position] = []
        for group in groups:
            if not isinstance(group, dict):
                continue
            margin_mode = group.get("margin_mode")
            for holding in group.get("holding") or []:
                result.append(self.position(holding, margin_mode))
        return result

    def position(self, payload: Dict[str, Any], margin_mode: Optional[str] = None) -> Position:
        raw_side = _first(payload, "holdSide", "side")
        side = None
        if raw_side is not None:
            side = POSITION_SIDES.get(str(raw_side), str(raw_side))

        return Position(
            symbol=self.normalize_symbol(payload.get("symbol")),
            side=side,
            contracts=_dec(payload, "position"),
            contracts_available=_dec(payload, "avail_position"),
            entry_price=_dec(payload, "avg_cost"),
            liquidation_price=_dec(payload, "liquidation_price"),
            leverage=_dec(payload, "leverage"),
            margin=_dec(payload, "margin"),
            realized_pnl=_dec(payload, "realized_pnl"),
            unrealized_pnl=_dec(payload, "unrealized_pnl"),
            maintenance_margin_rate=_dec(payload, "keepMarginRate"),
            margin_mode=margin_mode,
            timestamp=ms_to_datetime(payload.get("timestamp")),
            info=payload,
        )

    # =========================================================================
    # ACCOUNT
    # =========================================================================

    def balances(self, payload: Any, market_type: "MarketType | str | None") -> Balances:
        """
        Normalize balances of one market type.

        Spot: ``data.list`` of ``{currency, type, balance}`` rows; ``trade``
        is free and ``frozen`` plus ``lock`` add up to used.
        Swap: one margin snapshot per market; ``equity`` is total and
        ``total_avail_balance`` is free.

        Missing components are completed from the other two.

        Raises:
            NotSupported: For any market type other than spot or swap.
        """
        try:
            market_type = MarketType(market_type)
        except ValueError:
            raise NotSupported(
                f"Balances of market type '{market_type}' are not supported"
            ) from None

        if market_type == MarketType.SPOT:
            entries = self._spot_balances(payload)
        else:
            entries = self._swap_balances(payload)

        return Balances(
            entries={key: entry.complete() for key, entry in entries.items()},
            info=payload,
        )

    def _spot_balances(self, payload: Any) -> Dict[str, BalanceEntry]:
        data = payload.get("data") if isinstance(payload, dict) else None
        rows = (data or {}).get("list") or []

        accumulated: Dict[str, Dict[str, Optional[Decimal]]] = {}
        for row in rows:
            code = self.currency_code(row.get("currency"))
            if code is None:
                logger.debug("balance_row_skipped", row_type=row.get("type"))
                continue
            account = accumulated.setdefault(code, {"free": None, "used": None})
            kind = row.get("type")
            amount = _dec(row, "balance")
            if kind == "trade":
                account["free"] = amount
            elif kind in ("frozen", "lock"):
                account["used"] = add(account["used"], amount)

        return {code: BalanceEntry(**values) for code, values in accumulated.items()}

    def _swap_balances(self, payload: Any) -> Dict[str, BalanceEntry]:
        rows = payload if isinstance(payload, list) else (payload or {}).get("data") or []
        result: Dict[str, BalanceEntry] = {}
        for row in rows:
            symbol = self.normalize_symbol(row.get("symbol"))
            if symbol is None:
                continue
            result[symbol] = BalanceEntry(
                total=_dec(row, "equity"),
                free=_dec(row, "total_avail_balance"),
            )
        return result

    def transaction(self, payload: Dict[str, Any]) -> Transaction:
        """Normalize a deposit or withdrawal record."""
        code = self.currency_code(payload.get("currency"))
        raw_type = payload.get("type")
        fee_cost = _dec(payload, "fee")

        return Transaction(
            id=_str(payload.get("id")),
            txid=_str(payload.get("tx_hash")),
            type=TRANSACTION_TYPES.get(raw_type, raw_type) if raw_type is not None else None,
            currency=code,
            amount=_dec(payload, "amount"),
            address=_str(payload.get("address")),
            tag=_str(payload.get("address_tag")),
            status=parse_transaction_status(payload.get("state")),
            fee=Fee(cost=fee_cost, currency=code) if fee_cost is not None else None,
            timestamp=ms_to_datetime(payload.get("created_at")),
            updated=ms_to_datetime(payload.get("updated_at")),
            info=payload,
        )

    def account(self, payload: Dict[str, Any]) -> Account:
        account_type = payload.get("type")
        return Account(
            id=str(payload.get("id")),
            type=str(account_type).lower() if account_type is not None else None,
            info=payload,
        )

    def currency(self, currency_id: Any) -> Currency:
        return Currency(id=str(currency_id), code=self.currency_code(currency_id), info=currency_id)
