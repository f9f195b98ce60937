"""
Abstract base class for REST trading adapters.

This module defines the TradingAdapter interface: the venue-independent
operations a caller can rely on, returning only canonical models. A venue
implementation owns the venue's endpoints, signing and payload shapes.

The adapter pattern allows callers to:
- Work with one canonical vocabulary (Market, Ticker, Order, ...)
- Stay unaware of per-surface endpoints and auth schemes
- Receive typed errors from ``bitget_adapter.exceptions``

Example:
    >>> async with BitgetAdapter(config) as adapter:
    ...     ticker = await adapter.fetch_ticker("BTC/USDT")
    ...     print(ticker.last)
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

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


class TradingAdapter(ABC):
    """
    Abstract base class for REST trading adapters.

    Every method is a single request/response unit with no retries. Errors
    are raised as subclasses of ``BitgetError``.

    Attributes:
        exchange_name: Lowercase venue identifier.

    Note:
        All financial values in returned models use Decimal for precision.
        Never use float for prices, amounts, or costs.
    """

    @property
    @abstractmethod
    def exchange_name(self) -> str:
        """
        Return the lowercase venue identifier.

        Returns:
            str: Venue id (e.g., "bitget").
        """
        pass

    # =========================================================================
    # MARKET DATA
    # =========================================================================

    @abstractmethod
    async def load_markets(self, reload: bool = False) -> Mapping[str, Market]:
        """
        Load the market catalog once and return it.

        Concurrent first callers share a single build. With ``reload=True``
        the catalog is rebuilt and replaced atomically.

        Args:
            reload: Force a rebuild.

        Returns:
            Mapping[str, Market]: Markets keyed by venue id.
        """
        pass

    @abstractmethod
    async def fetch_markets(self) -> List[Market]:
        """Fetch every configured market type from the venue, uncached."""
        pass

    @abstractmethod
    async def fetch_time(self) -> Optional[datetime]:
        """Venue server time (UTC)."""
        pass

    @abstractmethod
    async def fetch_currencies(self) -> Dict[str, Currency]:
        """Currencies listed by the venue, keyed by common code."""
        pass

    @abstractmethod
    async def fetch_ticker(self, symbol: str) -> Ticker:
        """
        Fetch the ticker of one market.

        Args:
            symbol: Canonical symbol (e.g., "BTC/USDT") or venue id.

        Returns:
            Ticker: Normalized ticker.

        Raises:
            BadSymbol: If the market is unknown.
        """
        pass

    @abstractmethod
    async def fetch_tickers(
        self,
        symbols: Optional[List[str]] = None,
        market_type: Optional[MarketType] = None,
    ) -> Dict[str, Ticker]:
        """
        Fetch tickers of every market of one type.

        Args:
            symbols: Keep only these symbols; all when None.
            market_type: Market type; the configured default when None.

        Returns:
            Dict[str, Ticker]: Tickers keyed by symbol.
        """
        pass

    @abstractmethod
    async def fetch_order_book(self, symbol: str, limit: Optional[int] = None) -> OrderBook:
        """Fetch an order book snapshot via REST."""
        pass

    @abstractmethod
    async def fetch_trades(self, symbol: str, limit: Optional[int] = None) -> List[Trade]:
        """Fetch recent public trades."""
        pass

    @abstractmethod
    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Candle]:
        """
        Fetch OHLCV candles.

        Args:
            symbol: Canonical symbol.
            timeframe: Unified timeframe ("1m", "1h", "1d", ...).
            since: Start time in epoch milliseconds.
            limit: Maximum number of candles.

        Returns:
            List[Candle]: Candles, oldest first.
        """
        pass

    # =========================================================================
    # ACCOUNT
    # =========================================================================

    @abstractmethod
    async def fetch_accounts(self) -> List[Account]:
        """Fetch the accounts of the authenticated user."""
        pass

    @abstractmethod
    async def fetch_balance(self, market_type: Optional[MarketType] = None) -> Balances:
        """
        Fetch balances of one market type.

        Raises:
            NotSupported: If the type has no balance endpoint.
            AuthenticationError: If credentials are missing.
        """
        pass

    @abstractmethod
    async def fetch_deposits(
        self, code: str, since: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Transaction]:
        """Fetch deposits of one currency."""
        pass

    @abstractmethod
    async def fetch_withdrawals(
        self, code: str, since: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Transaction]:
        """Fetch withdrawals of one currency."""
        pass

    @abstractmethod
    async def fetch_positions(self) -> List[Position]:
        """Fetch all open swap positions."""
        pass

    @abstractmethod
    async def fetch_position(self, symbol: str) -> List[Position]:
        """Fetch the positions of one swap market."""
        pass

    # =========================================================================
    # TRADING
    # =========================================================================

    @abstractmethod
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

        Args:
            symbol: Canonical symbol.
            type: "limit" or "market".
            side: "buy" or "sell".
            amount: Amount in base units (contracts for swaps).
            price: Limit price; for spot market buys, used to compute cost.
            params: Venue-specific extras.

        Returns:
            Order: The venue acknowledgement, normalized.

        Raises:
            ArgumentsRequired: If a venue-required argument is missing.
            InvalidOrder: If the order cannot be built.
        """
        pass

    @abstractmethod
    async def cancel_order(
        self, id: str, symbol: str, params: Optional[Dict[str, Any]] = None
    ) -> Order:
        """Cancel one order."""
        pass

    @abstractmethod
    async def cancel_orders(
        self, ids: List[str], symbol: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Cancel several orders of one market."""
        pass

    @abstractmethod
    async def fetch_order(
        self, id: str, symbol: str, params: Optional[Dict[str, Any]] = None
    ) -> Order:
        """Fetch one order by venue id."""
        pass

    @abstractmethod
    async def fetch_open_orders(
        self, symbol: str, since: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Order]:
        """Fetch open orders of one market."""
        pass

    @abstractmethod
    async def fetch_closed_orders(
        self, symbol: str, since: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Order]:
        """Fetch filled orders of one market."""
        pass

    @abstractmethod
    async def fetch_my_trades(
        self, symbol: str, since: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Trade]:
        """Fetch the user's fills of one market."""
        pass

    @abstractmethod
    async def fetch_order_trades(
        self,
        id: str,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """Fetch the fills of one order."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Release transport resources.

        Must be safe to call multiple times.
        """
        pass

    async def __aenter__(self) -> "TradingAdapter":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        """Return string representation of adapter."""
        return f"{self.__class__.__name__}(exchange={self.exchange_name})"
