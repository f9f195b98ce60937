"""
Market Catalog Builder and load-once market registry.

The catalog is the only shared mutable state of the adapter. It is built
lazily on first use: concurrent first callers await one shared build task, so
the listing endpoints are hit once and nobody sees a half-built index. After
that, reads go straight to an immutable MarketIndex snapshot. A reload builds
a new snapshot and swaps it in with a single assignment.

Components:
    MarketCatalogBuilder: raw listing -> Market records
    MarketIndex: immutable id -> Market / symbol -> Market snapshot
    MarketCatalog: lazily built, reloadable holder of the current index
"""

import asyncio
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional

import structlog

from bitget_adapter.adapters.bitget import endpoints
from bitget_adapter.adapters.bitget.endpoints import Endpoint
from bitget_adapter.config.models import ExchangeConfig
from bitget_adapter.exceptions import BadSymbol, NotSupported
from bitget_adapter.models.market import (
    Market,
    MarketLimits,
    MarketPrecision,
    MarketType,
    MinMax,
)
from bitget_adapter.precise import step_size, to_decimal

logger = structlog.get_logger(__name__)

FetchFn = Callable[[Endpoint, Dict[str, Any]], Awaitable[Any]]

SYMBOL_DELIMITER = "_"


def currency_code(currency_id: Optional[str], aliases: Mapping) -> Optional[str]:
    """Venue currency id -> common code (uppercased, then aliased)."""
    if currency_id is None:
        return None
    code = str(currency_id).upper()
    return aliases.get(code, code)


def split_symbol(market_id: str, aliases: Mapping) -> str:
    """
    Fallback symbol for an id the catalog does not know.

    "btc_usdt" becomes "BTC/USDT"; anything without exactly one delimiter is
    uppercased.
    """
    parts = market_id.split(SYMBOL_DELIMITER)
    if len(parts) == 2:
        base_id, quote_id = parts
        return f"{currency_code(base_id, aliases)}/{currency_code(quote_id, aliases)}"
    return market_id.upper()


def _numeric(value: Any) -> Optional[Decimal]:
    try:
        return to_decimal(value)
    except ValueError:
        return None


class MarketCatalogBuilder:
    """
    Fetches venue market listings and parses them into Market records.

    Args:
        config: Exchange configuration (fees, aliases, type list).
        fetch: Coroutine issuing a request for an endpoint with params and
            returning the decoded payload.

    Example:
        >>> builder = MarketCatalogBuilder(ExchangeConfig(), fetch=client.request)
        >>> markets = await builder.fetch_markets_by_type("spot")
    """

    def __init__(self, config: ExchangeConfig, fetch: FetchFn):
        self.config = config
        self._fetch = fetch

    def parse_market(self, raw: Dict[str, Any]) -> Market:
        """
        Parse one listing entry.

        A numeric ``contract_val`` marks a swap; everything else is spot.

        Raises:
            ValueError: If the entry has no id.
        """
        market_id = raw.get("symbol") or raw.get("instrument_id")
        if not market_id:
            raise ValueError(f"Market entry has no symbol: {raw!r}")

        market_type = (
            MarketType.SWAP
            if _numeric(raw.get("contract_val")) is not None
            else MarketType.SPOT
        )
        base_id = raw.get("base_currency") or raw.get("coin")
        quote_id = raw.get("quote_currency")
        aliases = self.config.common_currencies
        base = currency_code(base_id, aliases)
        quote = currency_code(quote_id, aliases)

        if market_type == MarketType.SPOT:
            symbol = f"{base}/{quote}"
        else:
            symbol = str(market_id).upper()

        amount_step = step_size(raw.get("size_increment"))
        price_step = step_size(raw.get("tick_size"))
        min_amount = _numeric(raw.get("min_size"))
        if min_amount is None:
            min_amount = _numeric(raw.get("base_min_size"))
        price_min = Decimal(price_step) if price_step is not None else None

        status = raw.get("status")
        active = None if status is None else str(status) == "1"

        fees = self.config.fees.get(market_type)

        return Market(
            id=str(market_id),
            symbol=symbol,
            base=base,
            quote=quote,
            base_id=base_id,
            quote_id=quote_id,
            type=market_type,
            active=active,
            precision=MarketPrecision(amount=amount_step, price=price_step),
            limits=MarketLimits(
                amount=MinMax(min=min_amount),
                price=MinMax(min=price_min),
                cost=MinMax(min=price_min),
            ),
            maker=fees.maker if fees else None,
            taker=fees.taker if fees else None,
            info=raw,
        )

    def parse_markets(self, raws: List[Dict[str, Any]]) -> List[Market]:
        return [self.parse_market(raw) for raw in raws]

    async def fetch_markets_by_type(self, market_type: "MarketType | str") -> List[Market]:
        """
        Fetch and parse the listing of one market type.

        Raises:
            NotSupported: For any type other than spot or swap.
        """
        try:
            market_type = MarketType(market_type)
        except ValueError:
            raise NotSupported(
                f"fetch_markets_by_type() does not support market type '{market_type}'"
            ) from None

        endpoint = endpoints.resolve(endpoints.MARKETS, market_type, "fetch_markets_by_type")
        response = await self._fetch(endpoint, {})

        if market_type == MarketType.SPOT:
            entries = response.get("data") if isinstance(response, dict) else response
        else:
            entries = response
            if isinstance(response, dict):
                data = response.get("data", response)
                entries = data.get("contractApis") if isinstance(data, dict) else data

        markets = self.parse_markets(entries or [])
        logger.debug(
            "markets_fetched",
            exchange=self.config.id,
            market_type=market_type.value,
            count=len(markets),
        )
        return markets

    async def fetch_markets(self) -> List[Market]:
        """Fetch every configured market type, in order, and concatenate."""
        result: List[Market] = []
        for market_type in self.config.market_types():
            result.extend(await self.fetch_markets_by_type(market_type))
        return result


class MarketIndex(Mapping):
    """
    Immutable snapshot of the catalog, keyed by venue id.

    Ids are unique per venue; if a listing repeats an id the last entry wins
    and a warning is logged.
    """

    def __init__(self, markets: List[Market]):
        by_id: Dict[str, Market] = {}
        for market in markets:
            if market.id in by_id:
                logger.warning("duplicate_market_id", market_id=market.id)
            by_id[market.id] = market
        self._by_id = by_id
        self._by_symbol = {market.symbol: market for market in by_id.values()}

    def __getitem__(self, market_id: str) -> Market:
        return self._by_id[market_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_id)

    def __len__(self) -> int:
        return len(self._by_id)

    def by_symbol(self, symbol: str) -> Optional[Market]:
        return self._by_symbol.get(symbol)

    @property
    def symbols(self) -> List[str]:
        return sorted(self._by_symbol)

    def __repr__(self) -> str:
        return f"MarketIndex(markets={len(self._by_id)})"


class MarketCatalog:
    """
    Lazily built, reloadable market registry.

    Example:
        >>> catalog = MarketCatalog(builder)
        >>> await catalog.load()
        >>> catalog.market("BTC/USDT").id
        'btc_usdt'
    """

    def __init__(self, builder: MarketCatalogBuilder):
        self.builder = builder
        self._index: Optional[MarketIndex] = None
        self._building: Optional["asyncio.Task[MarketIndex]"] = None

    @property
    def loaded(self) -> bool:
        return self._index is not None

    @property
    def index(self) -> MarketIndex:
        """Current snapshot; empty before the first load."""
        return self._index if self._index is not None else MarketIndex([])

    async def load(self, reload: bool = False) -> MarketIndex:
        """
        Return the index, building it on first use or when ``reload`` is set.

        Concurrent callers share one in-flight build. A failed build is not
        cached; the next call starts a new one.
        """
        if self._index is not None and not reload:
            return self._index
        if self._building is None:
            self._building = asyncio.ensure_future(self._build())
        return await asyncio.shield(self._building)

    async def _build(self) -> MarketIndex:
        try:
            markets = await self.builder.fetch_markets()
            index = MarketIndex(markets)
            self._index = index
            logger.info(
                "market_catalog_loaded",
                exchange=self.builder.config.id,
                markets=len(index),
            )
            return index
        finally:
            self._building = None

    def market(self, symbol: str) -> Market:
        """
        Look up a market by canonical symbol or venue id.

        Raises:
            BadSymbol: If the catalog does not know the symbol.
        """
        index = self.index
        market = index.by_symbol(symbol)
        if market is None:
            market = index.get(symbol)
        if market is None:
            raise BadSymbol(f"{self.builder.config.id} does not have market symbol {symbol}")
        return market

    def normalize_symbol(self, market_id: str) -> str:
        """Catalog symbol of a venue id, or the delimiter-split fallback."""
        market = self.index.get(market_id)
        if market is not None:
            return market.symbol
        return split_symbol(market_id, self.builder.config.common_currencies)
