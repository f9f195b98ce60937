"""
Tests for RequestSigner.

Signatures are recomputed here with hashlib/hmac directly so that the tests
pin the wire format rather than the implementation.
"""

import base64
import hashlib
import hmac
import json
from decimal import Decimal

import pytest

from bitget_adapter.adapters.bitget.signer import (
    RequestSigner,
    implode_path,
    scheme_b_signature,
)
from bitget_adapter.config.models import ApiSurface, Credentials, ExchangeConfig
from bitget_adapter.exceptions import ArgumentsRequired, AuthenticationError

TIMESTAMP = 1595538450096


def expected_scheme_a(secret: str, message: str) -> str:
    digest = hmac.new(secret.encode(), message.encode(), hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def expected_scheme_b(secret: str, message: str) -> str:
    key = hashlib.sha1(secret.encode()).hexdigest()
    return hmac.new(key.encode(), message.encode(), hashlib.md5).hexdigest()


@pytest.fixture
def signer(exchange_config):
    return RequestSigner(exchange_config, clock=lambda: TIMESTAMP)


@pytest.mark.unit
class TestPathBuilding:

    def test_swap_surfaces_use_versioned_prefix(self, signer):
        assert signer.request_path("market/ticker", "capi") == "/api/swap/v3/market/ticker"

    def test_spot_surfaces_use_api_prefix(self, signer):
        assert signer.request_path("market/depth", "data") == "/data/v1/market/depth"
        assert signer.request_path("order/orders/place", "api") == "/api/v1/order/orders/place"

    def test_surface_accepts_enum_or_name(self, signer):
        assert signer.request_path("market/depth", ApiSurface.DATA) == signer.request_path("market/depth", "data")
        assert signer.request_path("order/detail", ApiSurface.SWAP) == "/api/swap/v3/order/detail"

    def test_implode_path_consumes_placeholders(self):
        path, rest = implode_path("accounts/{account_id}/balance", {"account_id": 42, "method": "balance"})

        assert path == "accounts/42/balance"
        assert rest == {"method": "balance"}

    def test_implode_path_missing_parameter(self):
        with pytest.raises(ArgumentsRequired):
            implode_path("order/orders/{order_id}", {})


@pytest.mark.unit
class TestPublicRequests:

    def test_capi_query_on_url(self, signer):
        request = signer.sign("market/ticker", "capi", "GET", {"symbol": "cmt_btcusdt"})

        assert request.url == "https://capi.bitget.com/api/swap/v3/market/ticker?symbol=cmt_btcusdt"
        assert request.headers == {}
        assert request.body is None

    def test_data_surface(self, signer):
        request = signer.sign("market/depth", "data", "GET", {"symbol": "btc_usdt", "type": "step0"})

        assert request.url == "https://api.bitget.com/data/v1/market/depth?symbol=btc_usdt&type=step0"

    def test_no_params_no_query(self, signer):
        request = signer.sign("common/symbols", "data")

        assert request.url == "https://api.bitget.com/data/v1/common/symbols"

    def test_public_needs_no_credentials(self, signer):
        request = signer.sign("market/time", "capi", "GET", {}, Credentials())

        assert request.method == "GET"

    def test_custom_hostname(self):
        signer = RequestSigner(ExchangeConfig(hostname="bitget.example"))

        request = signer.sign("market/time", "capi")

        assert request.url == "https://capi.bitget.example/api/swap/v3/market/time"


@pytest.mark.unit
class TestSchemeA:
    """Test HMAC-SHA256 signing of the swap private surface."""

    def test_get_signs_sorted_query(self, signer, credentials):
        params = {"symbol": "cmt_btcusdt", "limit": 5}

        request = signer.sign("order/orders", "swap", "GET", params, credentials)

        path = "/api/swap/v3/order/orders"
        query = "limit=5&symbol=cmt_btcusdt"
        assert request.url == f"https://capi.bitget.com{path}?{query}"
        assert request.body is None
        assert request.headers["ACCESS-KEY"] == "test_key"
        assert request.headers["ACCESS-TIMESTAMP"] == str(TIMESTAMP)
        assert request.headers["ACCESS-PASSPHRASE"] == "test_passphrase"
        assert request.headers["ACCESS-SIGN"] == expected_scheme_a(
            "test_secret", f"{TIMESTAMP}GET{path}?{query}"
        )

    def test_get_without_params(self, signer, credentials):
        request = signer.sign("account/accounts", "swap", "GET", {}, credentials)

        path = "/api/swap/v3/account/accounts"
        assert request.url == f"https://capi.bitget.com{path}"
        assert request.headers["ACCESS-SIGN"] == expected_scheme_a("test_secret", f"{TIMESTAMP}GET{path}")

    def test_post_signs_json_body(self, signer, credentials):
        params = {"symbol": "cmt_btcusdt", "size": Decimal("10"), "type": "1"}

        request = signer.sign("order/placeOrder", "swap", "POST", params, credentials)

        path = "/api/swap/v3/order/placeOrder"
        assert request.url == f"https://capi.bitget.com{path}"
        assert json.loads(request.body) == {"symbol": "cmt_btcusdt", "size": "10", "type": "1"}
        assert " " not in request.body
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["ACCESS-SIGN"] == expected_scheme_a(
            "test_secret", f"{TIMESTAMP}POST{path}{request.body}"
        )

    def test_missing_passphrase(self, signer):
        credentials = Credentials(api_key="test_key", secret="test_secret")

        with pytest.raises(AuthenticationError):
            signer.sign("account/accounts", "swap", "GET", {}, credentials)

    def test_missing_credentials(self, signer):
        with pytest.raises(AuthenticationError):
            signer.sign("account/accounts", "swap", "GET", {}, None)

    def test_clock_is_used_without_explicit_timestamp(self, exchange_config, credentials):
        signer = RequestSigner(exchange_config, clock=lambda: 42)

        request = signer.sign("account/accounts", "swap", "GET", {}, credentials)

        assert request.headers["ACCESS-TIMESTAMP"] == "42"


@pytest.mark.unit
class TestSchemeB:
    """Test the HMAC-MD5 double hash of the spot private surface."""

    def test_signature_uses_sha1_of_secret_as_key(self):
        assert scheme_b_signature("method=accounts", "test_secret") == expected_scheme_b(
            "test_secret", "method=accounts"
        )

    def test_signature_differs_from_raw_key_hmac(self):
        raw = hmac.new(b"test_secret", b"method=accounts", hashlib.md5).hexdigest()

        assert scheme_b_signature("method=accounts", "test_secret") != raw

    def test_signing_is_deterministic(self, signer, credentials):
        params = {"symbol": "btc_usdt", "method": "openOrders"}

        first = signer.sign("order/orders/openOrders", "api", "GET", params, credentials, TIMESTAMP)
        second = signer.sign("order/orders/openOrders", "api", "GET", dict(params), credentials, TIMESTAMP)

        assert first == second

    def test_get_appends_suffix_after_params(self, signer, credentials):
        params = {"symbol": "btc_usdt", "method": "openOrders"}

        request = signer.sign("order/orders/openOrders", "api", "GET", params, credentials)

        canonical = "method=openOrders&symbol=btc_usdt"
        signature = expected_scheme_b("test_secret", canonical)
        assert request.url == (
            "https://api.bitget.com/api/v1/order/orders/openOrders?"
            f"{canonical}&sign={signature}&req_time={TIMESTAMP}&accesskey=test_key"
        )
        assert request.body is None
        assert request.headers == {}

    def test_post_puts_suffix_on_url_and_params_in_body(self, signer, credentials):
        params = {"order_id": "671701716584665088", "method": "submitcancel"}

        request = signer.sign("order/orders/{order_id}/submitcancel", "api", "POST", params, credentials)

        signature = expected_scheme_b("test_secret", "method=submitcancel")
        assert request.url == (
            "https://api.bitget.com/api/v1/order/orders/671701716584665088/submitcancel?"
            f"sign={signature}&req_time={TIMESTAMP}&accesskey=test_key"
        )
        assert request.body == "method=submitcancel"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"

    def test_canonical_string_is_not_percent_encoded(self, signer, credentials):
        params = {"order_ids": "[1,2]", "method": "batchcancel"}

        request = signer.sign("order/orders/batchcancel", "api", "POST", params, credentials)

        assert request.body == "method=batchcancel&order_ids=[1,2]"

    def test_passphrase_not_required(self, signer):
        credentials = Credentials(api_key="test_key", secret="test_secret")

        request = signer.sign("account/accounts", "api", "GET", {"method": "accounts"}, credentials)

        assert "accesskey=test_key" in request.url

    def test_missing_secret(self, signer):
        with pytest.raises(AuthenticationError):
            signer.sign("account/accounts", "api", "GET", {}, Credentials(api_key="test_key"))
