"""Shared fixtures for the Bitget adapter tests."""

from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock

import pytest

from bitget_adapter.adapters.bitget.adapter import BitgetAdapter
from bitget_adapter.adapters.bitget.catalog import MarketCatalogBuilder, MarketIndex
from bitget_adapter.adapters.bitget.endpoints import Endpoint
from bitget_adapter.adapters.bitget.normalizer import BitgetNormalizer
from bitget_adapter.config.models import AppConfig, Credentials, ExchangeConfig
from bitget_adapter.models import Market

# 2020-07-25T10:00:00.000Z
NOW_MS = 1595671200000

BTC_USDT_RAW = {
    "base_currency": "btc",
    "quote_currency": "usdt",
    "symbol": "btc_usdt",
    "tick_size": "2",
    "size_increment": "4",
    "status": "1",
    "base_asset_precision": "8",
}

ETH_USDT_RAW = {
    "base_currency": "eth",
    "quote_currency": "usdt",
    "symbol": "eth_usdt",
    "tick_size": "2",
    "size_increment": "4",
    "status": "1",
    "base_asset_precision": "8",
}

BTCUSD_SWAP_RAW = {
    "symbol": "btcusd",
    "underlying_index": "BTC",
    "quote_currency": "USD",
    "coin": "BTC",
    "contract_val": "1",
    "listing": None,
    "delivery": ["07:00:00", "15:00:00", "23:00:00"],
    "size_increment": "0",
    "tick_size": "1",
    "forwardContractFlag": False,
    "priceEndStep": 5,
}

SPOT_SYMBOLS_RESPONSE = {
    "status": "ok",
    "ts": 1595538241474,
    "data": [BTC_USDT_RAW, ETH_USDT_RAW],
}

SWAP_CONTRACTS_RESPONSE = [BTCUSD_SWAP_RAW]

SPOT_ACCOUNTS_RESPONSE = {
    "status": "ok",
    "ts": 1595679591824,
    "data": [{"id": "7420922606", "type": "spot", "state": "working"}],
}


class FakeRestClient:
    """
    Stands in for BitgetRestClient.

    Answers each endpoint from a response table and records every request.
    A response that is an exception instance is raised instead.
    """

    def __init__(self, responses: Optional[Dict[Endpoint, Any]] = None):
        self.responses: Dict[Endpoint, Any] = dict(responses or {})
        self.calls: List[Tuple[Endpoint, Dict[str, Any]]] = []
        self.request = AsyncMock(side_effect=self._respond)
        self.close = AsyncMock()

    def _respond(self, endpoint: Endpoint, params: Optional[Dict[str, Any]] = None) -> Any:
        self.calls.append((endpoint, dict(params or {})))
        response = self.responses[endpoint]
        if isinstance(response, Exception):
            raise response
        return response

    def calls_to(self, endpoint: Endpoint) -> List[Dict[str, Any]]:
        return [params for called, params in self.calls if called == endpoint]

    def last_params(self, endpoint: Endpoint) -> Dict[str, Any]:
        return self.calls_to(endpoint)[-1]


@pytest.fixture
def exchange_config() -> ExchangeConfig:
    return ExchangeConfig()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(api_key="test_key", secret="test_secret", password="test_passphrase")


@pytest.fixture
def app_config(credentials: Credentials) -> AppConfig:
    return AppConfig(credentials=credentials)


@pytest.fixture
def markets(exchange_config: ExchangeConfig) -> List[Market]:
    builder = MarketCatalogBuilder(exchange_config, fetch=AsyncMock())
    return builder.parse_markets([BTC_USDT_RAW, ETH_USDT_RAW, BTCUSD_SWAP_RAW])


@pytest.fixture
def market_index(markets: List[Market]) -> MarketIndex:
    return MarketIndex(markets)


@pytest.fixture
def normalizer(market_index: MarketIndex, exchange_config: ExchangeConfig) -> BitgetNormalizer:
    return BitgetNormalizer(market_index, exchange_config)


@pytest.fixture
def spot_market(market_index: MarketIndex) -> Market:
    return market_index["btc_usdt"]


@pytest.fixture
def swap_market(market_index: MarketIndex) -> Market:
    return market_index["btcusd"]


@pytest.fixture
def fake_client() -> FakeRestClient:
    return FakeRestClient(
        {
            Endpoint.SPOT_MARKETS: SPOT_SYMBOLS_RESPONSE,
            Endpoint.SWAP_MARKETS: SWAP_CONTRACTS_RESPONSE,
            Endpoint.SPOT_ACCOUNTS: SPOT_ACCOUNTS_RESPONSE,
        }
    )


@pytest.fixture
def adapter(app_config: AppConfig, fake_client: FakeRestClient) -> BitgetAdapter:
    return BitgetAdapter(app_config, client=fake_client, clock=lambda: NOW_MS)
