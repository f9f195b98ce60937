"""
Tests for BitgetRestClient with a stubbed aiohttp session.
"""

import asyncio
from decimal import Decimal
from typing import Any, Dict, List, Optional

import aiohttp
import pytest

from bitget_adapter.adapters.bitget.endpoints import Endpoint
from bitget_adapter.adapters.bitget.rest import BitgetRestClient
from bitget_adapter.adapters.bitget.signer import RequestSigner
from bitget_adapter.config.models import Credentials
from bitget_adapter.exceptions import (
    AuthenticationError,
    DDoSProtection,
    ExchangeError,
    InsufficientFunds,
    NetworkError,
    RequestTimeout,
)


class FakeResponse:
    def __init__(self, status: int, text: str):
        self.status = status
        self._text = text

    async def text(self) -> str:
        return self._text

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False


class FakeSession:
    """Records requests and replies with a canned response or error."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.closed = False
        self.requests: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, data: Any = None, headers: Any = None) -> FakeResponse:
        self.requests.append({"method": method, "url": url, "data": data, "headers": headers})
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self) -> None:
        self.closed = True


def make_client(exchange_config, session, credentials=None) -> BitgetRestClient:
    return BitgetRestClient(
        exchange_config,
        credentials,
        signer=RequestSigner(exchange_config, clock=lambda: 1595538450096),
        session=session,
    )


@pytest.mark.unit
class TestRequest:

    @pytest.mark.asyncio
    async def test_decodes_numbers_as_decimal(self, exchange_config):
        session = FakeSession(FakeResponse(200, '{"symbol":"btcusd","last":9574.5,"size":20}'))
        client = make_client(exchange_config, session)

        payload = await client.request(Endpoint.SWAP_TICKER, {"symbol": "btcusd"})

        assert payload["last"] == Decimal("9574.5")
        assert isinstance(payload["last"], Decimal)
        assert payload["size"] == 20
        assert session.requests[0]["method"] == "GET"
        assert session.requests[0]["url"] == "https://capi.bitget.com/api/swap/v3/market/ticker?symbol=btcusd"

    @pytest.mark.asyncio
    async def test_signed_post_sends_body_and_headers(self, exchange_config, credentials):
        session = FakeSession(FakeResponse(200, '{"order_id":"1","client_oid":"abc"}'))
        client = make_client(exchange_config, session, credentials)

        await client.request(Endpoint.SWAP_PLACE_ORDER, {"symbol": "cmt_btcusdt", "size": "1"})

        sent = session.requests[0]
        assert sent["method"] == "POST"
        assert sent["data"] == '{"symbol":"cmt_btcusdt","size":"1"}'
        assert sent["headers"]["ACCESS-KEY"] == "test_key"

    @pytest.mark.asyncio
    async def test_missing_credentials_fail_before_io(self, exchange_config):
        session = FakeSession(FakeResponse(200, "{}"))
        client = make_client(exchange_config, session)

        with pytest.raises(AuthenticationError):
            await client.request(Endpoint.SWAP_ACCOUNTS)

        assert session.requests == []

    @pytest.mark.asyncio
    async def test_venue_error_is_translated(self, exchange_config, credentials):
        body = '{"status":"error","err_code":"","err_msg":"your balance is low"}'
        session = FakeSession(FakeResponse(200, body))
        client = make_client(exchange_config, session, credentials)

        with pytest.raises(InsufficientFunds) as exc_info:
            await client.request(Endpoint.SPOT_PLACE_ORDER, {"symbol": "btc_usdt", "method": "place"})

        assert exc_info.value.body == body

    @pytest.mark.asyncio
    async def test_http_status_without_venue_signal(self, exchange_config):
        session = FakeSession(FakeResponse(429, "Too Many Requests"))
        client = make_client(exchange_config, session)

        with pytest.raises(DDoSProtection):
            await client.request(Endpoint.SPOT_TICKERS)

    @pytest.mark.asyncio
    async def test_non_json_success_body(self, exchange_config):
        session = FakeSession(FakeResponse(200, "<html>maintenance</html>"))
        client = make_client(exchange_config, session)

        with pytest.raises(ExchangeError) as exc_info:
            await client.request(Endpoint.SPOT_TICKERS)

        assert exc_info.value.body == "<html>maintenance</html>"

    @pytest.mark.asyncio
    async def test_empty_body_is_none(self, exchange_config):
        client = make_client(exchange_config, FakeSession(FakeResponse(200, "")))

        assert await client.request(Endpoint.SPOT_TIME) is None

    @pytest.mark.asyncio
    async def test_client_error_becomes_network_error(self, exchange_config):
        session = FakeSession(error=aiohttp.ClientConnectionError("connection reset"))
        client = make_client(exchange_config, session)

        with pytest.raises(NetworkError) as exc_info:
            await client.request(Endpoint.SPOT_TIME)

        assert isinstance(exc_info.value.__cause__, aiohttp.ClientError)

    @pytest.mark.asyncio
    async def test_timeout_becomes_request_timeout(self, exchange_config):
        client = make_client(exchange_config, FakeSession(error=asyncio.TimeoutError()))

        with pytest.raises(RequestTimeout):
            await client.request(Endpoint.SPOT_TIME)


@pytest.mark.unit
class TestSessionLifecycle:

    @pytest.mark.asyncio
    async def test_external_session_left_open(self, exchange_config):
        session = FakeSession(FakeResponse(200, "{}"))
        client = make_client(exchange_config, session)

        await client.close()

        assert session.closed is False

    @pytest.mark.asyncio
    async def test_owned_session_closed(self, exchange_config):
        client = BitgetRestClient(exchange_config)

        session = await client._ensure_session()
        await client.close()

        assert session.closed is True

    def test_repr_hides_credentials(self, exchange_config):
        client = BitgetRestClient(
            exchange_config,
            Credentials(api_key="k", secret="very_secret", password="pass_phrase"),
        )

        assert "very_secret" not in repr(client)
        assert "very_secret" not in repr(client.credentials)
