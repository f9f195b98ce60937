"""
Tests for BitgetNormalizer.

Payloads are taken from venue responses on both surfaces.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from bitget_adapter.adapters.bitget.catalog import MarketIndex
from bitget_adapter.adapters.bitget.normalizer import BitgetNormalizer, EntityKind
from bitget_adapter.config.models import ExchangeConfig, VolumeSelector
from bitget_adapter.exceptions import NotSupported
from bitget_adapter.models import (
    Balances,
    MarketType,
    OrderSide,
    OrderStatus,
    OrderType,
    PositionSide,
    TakerOrMaker,
    Ticker,
    TransactionStatus,
    TransactionType,
)
from bitget_adapter.precise import QUOTIENT

SWAP_TICKER = {
    "symbol": "btcusd",
    "last": "9574.5",
    "best_ask": "9575.0",
    "best_bid": "9574.0",
    "high_24h": "9672",
    "low_24h": "9512",
    "volume_24h": "567697050",
    "timestamp": "1595538450096",
}

SPOT_TICKER = {
    "id": "1595538241113",
    "bid": ["0.028474000000", "1.139400000000"],
    "ask": ["0.028482000000", "0.353100000000"],
    "amount": "2850.6649",
    "count": "818",
    "open": "0.02821",
    "close": "0.028474",
    "low": "0.02821",
    "high": "0.029091",
    "vol": "79.4548693404",
}


@pytest.mark.unit
class TestSymbolResolution:
    """Test the venue id -> symbol chain."""

    def test_known_id_uses_catalog(self, normalizer):
        assert normalizer.resolve_market("btc_usdt") == ("BTC/USDT", "BTC", "USDT")

    def test_unknown_pair_is_split(self, normalizer):
        assert normalizer.resolve_market("xbt_usdt") == ("BTC/USDT", "BTC", "USDT")

    def test_unknown_id_is_uppercased(self, normalizer):
        assert normalizer.resolve_market("ethusd") == ("ETHUSD", None, None)

    def test_missing_id_uses_supplied_market(self, normalizer, spot_market):
        assert normalizer.normalize_symbol(None, spot_market) == "BTC/USDT"

    def test_missing_everything(self, normalizer):
        assert normalizer.normalize_symbol(None) is None

    def test_resolution_is_idempotent(self, markets, exchange_config):
        first = BitgetNormalizer(MarketIndex(markets), exchange_config)
        second = BitgetNormalizer(MarketIndex(list(markets)), exchange_config)
        ids = ["btc_usdt", "btcusd", "ltc_btc", "abc"]

        assert [first.normalize_symbol(i) for i in ids] == [second.normalize_symbol(i) for i in ids]
        assert [first.normalize_symbol(i) for i in ids] == [first.normalize_symbol(i) for i in ids]


@pytest.mark.unit
class TestTicker:

    def test_swap_ticker_scalar_quotes(self, normalizer):
        """Test a swap ticker with best_bid/best_ask and no bid/ask pairs."""
        ticker = normalizer.ticker(SWAP_TICKER)

        assert isinstance(ticker, Ticker)
        assert ticker.symbol == "BTCUSD"
        assert ticker.bid == Decimal("9574.0")
        assert ticker.ask == Decimal("9575.0")
        assert ticker.bid_volume is None
        assert ticker.ask_volume is None
        assert ticker.high == Decimal("9672")
        assert ticker.low == Decimal("9512")
        assert ticker.last == Decimal("9574.5")
        assert ticker.close == Decimal("9574.5")
        assert ticker.base_volume == Decimal("567697050")
        assert ticker.timestamp == datetime(2020, 7, 23, 21, 7, 30, 96000, tzinfo=timezone.utc)
        assert ticker.info == SWAP_TICKER

    def test_swap_ticker_without_open_has_no_derived_fields(self, normalizer):
        ticker = normalizer.ticker(SWAP_TICKER)

        assert ticker.open is None
        assert ticker.change is None
        assert ticker.percentage is None
        assert ticker.average is None
        assert ticker.vwap is None

    def test_spot_ticker_pairs(self, normalizer, market_index):
        ticker = normalizer.ticker(SPOT_TICKER, market_index["eth_usdt"])

        assert ticker.symbol == "ETH/USDT"
        assert ticker.bid == Decimal("0.028474000000")
        assert ticker.bid_volume == Decimal("1.139400000000")
        assert ticker.ask_volume == Decimal("0.353100000000")
        assert ticker.last == Decimal("0.028474")
        assert ticker.change == Decimal("0.000264")
        assert ticker.average == Decimal("0.028342")
        assert ticker.quote_volume == Decimal("79.4548693404")
        assert ticker.vwap == QUOTIENT.divide(Decimal("79.4548693404"), Decimal("2850.6649"))
        assert ticker.timestamp == datetime(2020, 7, 23, 21, 4, 1, 113000, tzinfo=timezone.utc)

    def test_unknown_ticker_id_is_uppercased(self, normalizer):
        assert normalizer.ticker({"symbol": "dogeusd"}).symbol == "DOGEUSD"

    def test_derived_fields_are_bounded(self, normalizer):
        ticker = normalizer.ticker({"symbol": "btcusd", "open": "3", "last": "4"})

        assert ticker.percentage == QUOTIENT.divide(Decimal("100"), Decimal("3"))
        assert len(str(ticker.percentage)) < 45
        assert ticker.average == Decimal("3.5")

    def test_malformed_timestamp_is_absent(self, normalizer):
        ticker = normalizer.ticker({"symbol": "btcusd", "last": "1", "timestamp": "n/a"})

        assert ticker.timestamp is None
        assert ticker.last == Decimal("1")


@pytest.mark.unit
class TestTrade:

    def test_spot_fill_cost_is_exact(self, normalizer):
        payload = {
            "id": "614164775",
            "created_at": "1596298860602",
            "filled_amount": "0.0417000000000000",
            "filled_fees": "0.0000834000000000",
            "match_id": "673491702661292033",
            "order_id": "673491720340279296",
            "price": "359.240000000000",
            "symbol": "eth_usdt",
            "type": "buy-market",
        }

        trade = normalizer.trade(payload)

        assert trade.cost == Decimal("14.980308")
        assert trade.amount == Decimal("0.0417")
        assert trade.symbol == "ETH/USDT"
        assert trade.id == "614164775"
        assert trade.order_id == "673491720340279296"
        assert trade.side == OrderSide.BUY
        assert trade.type == OrderType.MARKET
        assert trade.fee.cost == Decimal("0.0000834000000000")
        assert trade.fee.currency == "ETH"

    def test_swap_fill_fee_is_negated(self, normalizer):
        payload = {
            "trade_id": "6667390",
            "symbol": "cmt_btcusdt",
            "order_id": "525946425993854915",
            "price": "9839.00",
            "order_qty": "3466",
            "fee": "-0.0000528407360000",
            "timestamp": "1561121514442",
            "exec_type": "M",
            "side": "3",
        }

        trade = normalizer.trade(payload)

        assert str(trade.fee.cost) == "0.0000528407360000"
        assert trade.taker_or_maker == TakerOrMaker.MAKER
        assert trade.amount == Decimal("3466")
        assert trade.side == OrderSide.LONG
        assert trade.id == "6667390"

    def test_public_spot_trade(self, normalizer, spot_market):
        payload = {
            "id": "1",
            "price": "9533.81",
            "amount": "0.7326",
            "direction": "sell",
            "ts": "1595604964000",
        }

        trade = normalizer.trade(payload, spot_market)

        assert trade.symbol == "BTC/USDT"
        assert trade.side == "sell"
        assert trade.amount == Decimal("0.7326")
        assert trade.cost == Decimal("9533.81") * Decimal("0.7326")
        assert trade.fee is None

    def test_public_swap_trade(self, normalizer):
        payload = {
            "trade_id": "670581881367954915",
            "price": "9553.00",
            "size": "20",
            "side": "sell",
            "timestamp": "1595605100004",
            "symbol": "btcusd",
        }

        trade = normalizer.trade(payload)

        assert trade.symbol == "BTCUSD"
        assert trade.amount == Decimal("20")
        assert trade.cost == Decimal("191060.00")

    def test_zero_swap_fee_is_unsigned(self, normalizer):
        trade = normalizer.trade({"trade_id": "1", "price": "9839", "order_qty": "1", "fee": "0.00000000"})

        assert trade.fee.cost == 0
        assert not trade.fee.cost.is_signed()

    def test_non_finite_price_is_absent(self, normalizer):
        trade = normalizer.trade({"trade_id": "1", "price": "NaN", "size": "2"})

        assert trade.price is None
        assert trade.cost is None
        assert trade.amount == Decimal("2")

    def test_fill_fields_win_over_size(self, normalizer):
        trade = normalizer.trade({"price": "1", "filled_amount": "2", "size": "5"})

        assert trade.amount == Decimal("2")

    def test_timestamp_prefers_timestamp_over_created_at(self, normalizer):
        trade = normalizer.trade({"created_at": "1000", "timestamp": "2000"})

        assert trade.timestamp == datetime(1970, 1, 1, 0, 0, 2, tzinfo=timezone.utc)

    def test_unknown_liquidity_passes_through(self, normalizer):
        assert normalizer.trade({"exec_type": "X"}).taker_or_maker == "X"


@pytest.mark.unit
class TestCandle:

    def test_swap_array_candle_uses_index(self, normalizer, swap_market):
        raw = ["1595664000000", "9570.5", "9580.0", "9560.0", "9575.0", "120000", "12.53"]

        candle = normalizer.candle(raw, swap_market)

        assert candle.timestamp == datetime(2020, 7, 25, 8, 0, tzinfo=timezone.utc)
        assert candle.open == Decimal("9570.5")
        assert candle.close == Decimal("9575.0")
        assert candle.volume == Decimal("120000")
        assert candle.info == raw

    def test_spot_object_candle_uses_field(self, normalizer, spot_market):
        raw = {
            "id": "1595664000000",
            "open": "9570.5",
            "close": "9575.0",
            "low": "9560.0",
            "high": "9580.0",
            "amount": "42.5",
            "vol": "406812.5",
        }

        candle = normalizer.candle(raw, spot_market)

        assert candle.high == Decimal("9580.0")
        assert candle.volume == Decimal("42.5")

    def test_selector_mismatch_yields_no_volume(self, normalizer, spot_market):
        raw = ["1595664000000", "1", "2", "0.5", "1.5", "10", "20"]

        candle = normalizer.candle(raw, spot_market)

        assert candle.volume is None
        assert candle.close == Decimal("1.5")

    def test_market_type_without_market(self, normalizer):
        raw = ["1595664000000", "1", "2", "0.5", "1.5", "10", "20"]

        assert normalizer.candle(raw, market_type="swap").volume == Decimal("10")

    def test_custom_selector(self, market_index):
        config = ExchangeConfig(ohlcv_volume={"swap": VolumeSelector(index=6)})
        custom = BitgetNormalizer(market_index, config)
        raw = ["1595664000000", "1", "2", "0.5", "1.5", "10", "20"]

        assert custom.candle(raw, market_type=MarketType.SWAP).volume == Decimal("20")

    def test_short_array_is_tolerated(self, normalizer, swap_market):
        candle = normalizer.candle(["1595664000000", "1"], swap_market)

        assert candle.open == Decimal("1")
        assert candle.close is None
        assert candle.volume is None


@pytest.mark.unit
class TestOrderBook:

    def test_spot_book_is_unwrapped_and_sorted(self, normalizer, spot_market):
        payload = {
            "status": "ok",
            "ch": "market.btc_usdt.depth.step0",
            "ts": 1595607628197,
            "data": {
                "id": "1595607628197",
                "ts": "1595607628197",
                "bids": [["9534.85", "0.1458"], ["9534.99", "15.3616"]],
                "asks": [["9535.03", "0.0904"], ["9535.02", "7.3716"]],
            },
        }

        book = normalizer.order_book(payload, spot_market)

        assert book.symbol == "BTC/USDT"
        assert book.nonce == 1595607628197
        assert book.best_bid == Decimal("9534.99")
        assert book.best_ask == Decimal("9535.02")
        assert [level.price for level in book.bids] == [Decimal("9534.99"), Decimal("9534.85")]

    def test_swap_book(self, normalizer, swap_market):
        payload = {
            "asks": [["9579.0", "119865", 1], ["9579.5", "90069", 1]],
            "bids": [["9578.5", "2417", 1], ["9577.5", "3024", 1]],
            "timestamp": "1595664767349",
        }

        book = normalizer.order_book(payload, swap_market)

        assert book.best_bid == Decimal("9578.5")
        assert book.asks[1].amount == Decimal("90069")
        assert book.nonce is None
        assert book.timestamp is not None

    def test_empty_book(self, normalizer):
        book = normalizer.order_book({})

        assert book.bids == []
        assert book.best_ask is None


@pytest.mark.unit
class TestOrder:

    def test_spot_order(self, normalizer):
        payload = {
            "account_id": "7420922606",
            "amount": "0.1000000000000000",
            "canceled_at": "1595872129618",
            "created_at": "1595872089525",
            "filled_amount": "0.000000000000",
            "filled_cash_amount": "0.000000000000",
            "filled_fees": "0.000000000000",
            "finished_at": "1595872129618",
            "id": "671701716584665088",
            "price": "150.000000000000",
            "source": "接口",
            "state": "canceled",
            "symbol": "eth_usdt",
            "type": "buy-limit",
        }

        order = normalizer.order(payload)

        assert order.id == "671701716584665088"
        assert order.symbol == "ETH/USDT"
        assert order.status == OrderStatus.CANCELED
        assert order.side == OrderSide.BUY
        assert order.type == OrderType.LIMIT
        assert order.amount == Decimal("0.1")
        assert order.filled == Decimal("0")
        assert order.remaining == Decimal("0.1")
        assert order.cost == Decimal("0")
        assert order.fee.cost == Decimal("0")
        assert order.fee.currency is None

    def test_swap_order(self, normalizer):
        payload = {
            "symbol": "cmt_btcusdt",
            "size": "1",
            "timestamp": "1595885546770",
            "client_oid": "f3aa81d6-9a4c-4eab-bebe-ebc19da21cf2",
            "createTime": "1595885521200",
            "filled_qty": "0",
            "fee": "0.00000000",
            "order_id": "671758053112020913",
            "price": "11120.00",
            "price_avg": "0.00",
            "status": "0",
            "type": "1",
        }

        order = normalizer.order(payload)

        assert order.id == "671758053112020913"
        assert order.client_order_id == "f3aa81d6-9a4c-4eab-bebe-ebc19da21cf2"
        assert order.status == OrderStatus.OPEN
        assert order.side == OrderSide.LONG
        assert order.type == OrderType.OPEN
        assert order.timestamp == datetime(2020, 7, 27, 21, 32, 1, 200000, tzinfo=timezone.utc)
        assert order.remaining == Decimal("1")

    def test_spot_acknowledgement(self, normalizer, spot_market):
        order = normalizer.order({"status": "ok", "data": "671701716584665088"}, spot_market)

        assert order.id == "671701716584665088"
        assert order.symbol == "BTC/USDT"
        assert order.amount is None
        assert order.status == "ok"

    def test_numeric_acknowledgement_id(self, normalizer):
        order = normalizer.order({"status": "ok", "ts": 1595792596056, "data": 671368296142774272})

        assert order.id == "671368296142774272"
        assert order.status == "ok"

    def test_missing_values_stay_none(self, normalizer):
        order = normalizer.order({"order_id": "1", "amount": "2"})

        assert order.filled is None
        assert order.remaining is None
        assert order.fee is None

    def test_unknown_status_passes_through(self, normalizer):
        assert normalizer.order({"state": "pre-submitted"}).status == "pre-submitted"


@pytest.mark.unit
class TestBalances:

    def test_spot_balance_merge(self, normalizer):
        """Test that frozen and lock rows add up into used."""
        payload = {
            "status": "ok",
            "ts": 1595681450932,
            "data": {
                "list": [
                    {"balance": "1.5", "currency": "btc", "type": "trade"},
                    {"balance": "0.5", "currency": "btc", "type": "frozen"},
                    {"balance": "0.25", "currency": "btc", "type": "lock"},
                ],
                "id": "7420922606",
                "type": "spot",
                "state": "working",
            },
        }

        balances = normalizer.balances(payload, MarketType.SPOT)

        assert isinstance(balances, Balances)
        assert balances["BTC"].free == Decimal("1.5")
        assert balances["BTC"].used == Decimal("0.75")
        assert balances["BTC"].total == Decimal("2.25")
        assert balances.info == payload

    def test_spot_currency_without_locks(self, normalizer):
        payload = {"data": {"list": [{"balance": "3", "currency": "usdt", "type": "trade"}]}}

        entry = normalizer.balances(payload, "spot")["USDT"]

        assert entry.free == Decimal("3")
        assert entry.used is None
        assert entry.total is None

    def test_swap_balance_completes_used(self, normalizer):
        payload = [
            {
                "equity": "0.0150",
                "fixed_balance": "0",
                "total_avail_balance": "0.0100",
                "margin": "0",
                "symbol": "btcusd",
                "margin_mode": "fixed",
            },
            {
                "equity": "0",
                "total_avail_balance": "0",
                "symbol": "cmt_btcsusdt",
            },
        ]

        balances = normalizer.balances(payload, MarketType.SWAP)

        assert balances["BTCUSD"].total == Decimal("0.0150")
        assert balances["BTCUSD"].free == Decimal("0.0100")
        assert balances["BTCUSD"].used == Decimal("0.0050")
        assert "CMT/BTCSUSDT" in balances

    def test_other_type_not_supported(self, normalizer):
        with pytest.raises(NotSupported):
            normalizer.balances({}, "margin")


@pytest.mark.unit
class TestTransactionsAndAccounts:

    def test_withdrawal(self, normalizer):
        payload = {
            "id": 1171,
            "type": "withdraw",
            "currency": "usdt",
            "tx_hash": "ed03094b84eafbe4bc16e7ef766ee959885ee5bcb265872baaa9c64e1cf86c2b",
            "amount": 7.457467,
            "address": "rae93V8d2mdoUQHwBDBdM4NHCMehRJAsbm",
            "address_tag": "100040",
            "fee": 0,
            "state": "Fail",
            "created_at": 1510912472199,
            "updated_at": 1511145876575,
        }

        tx = normalizer.transaction(payload)

        assert tx.id == "1171"
        assert tx.type == TransactionType.WITHDRAWAL
        assert tx.currency == "USDT"
        assert tx.amount == Decimal("7.457467")
        assert tx.tag == "100040"
        assert tx.status == TransactionStatus.FAILED
        assert tx.fee.cost == Decimal("0")
        assert tx.fee.currency == "USDT"

    def test_positions(self, normalizer):
        payload = {
            "margin_mode": "fixed",
            "holding": [
                {
                    "symbol": "btcusd",
                    "holdSide": "1",
                    "position": "20",
                    "avail_position": "15",
                    "avg_cost": "9500.5",
                    "leverage": "10",
                    "liquidation_price": "8700",
                    "realized_pnl": "0.001",
                    "unrealized_pnl": "-0.0002",
                    "margin": "0.0021",
                    "keepMarginRate": "0.005",
                    "timestamp": "1595664767349",
                },
                {"symbol": "btcusd", "holdSide": "2", "position": "0"},
            ],
        }

        positions = normalizer.positions(payload)

        assert len(positions) == 2
        assert positions[0].symbol == "BTCUSD"
        assert positions[0].side == PositionSide.LONG
        assert positions[0].contracts == Decimal("20")
        assert positions[0].entry_price == Decimal("9500.5")
        assert positions[0].margin_mode == "fixed"
        assert positions[1].side == PositionSide.SHORT

    def test_account_type_lowercased(self, normalizer):
        account = normalizer.account({"id": "7420922606", "type": "SPOT", "state": "working"})

        assert account.id == "7420922606"
        assert account.type == "spot"

    def test_currency_alias(self, normalizer):
        currency = normalizer.currency("xbt")

        assert currency.code == "BTC"
        assert currency.id == "xbt"


@pytest.mark.unit
class TestDispatch:

    def test_normalize_by_kind(self, normalizer, swap_market):
        ticker = normalizer.normalize(EntityKind.TICKER, SWAP_TICKER)
        book = normalizer.normalize("order_book", {"bids": [], "asks": []}, swap_market)
        balances = normalizer.normalize(EntityKind.BALANCES, [], market_type="swap")

        assert ticker.bid == Decimal("9574.0")
        assert book.symbol == "BTCUSD"
        assert balances.entries == {}

    def test_unknown_kind_rejected(self, normalizer):
        with pytest.raises(ValueError):
            normalizer.normalize("funding_rate", {})
