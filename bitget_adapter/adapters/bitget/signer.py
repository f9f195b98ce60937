"""
Request Signer for the Bitget REST surfaces.

Three unrelated behaviours, selected by API surface:

    data, capi   Public. Params go on the query string, no headers.
    swap         Scheme A. HMAC-SHA256 over timestamp + method + path
                 (+ body or query), base64, sent in four ACCESS-* headers.
    api          Scheme B. HMAC-MD5 over the raw key-sorted params, keyed by
                 the hex SHA1 digest of the secret, sent as
                 sign / req_time / accesskey parameters.

The Scheme B double hash is what the venue verifies; keying the HMAC with
the raw secret produces signatures the venue rejects.

Signing is pure given a timestamp: the only hidden input is the clock, which
is injectable and bypassed when ``timestamp`` is passed explicitly.

Example:
    >>> signer = RequestSigner(ExchangeConfig())
    >>> request = signer.sign("market/ticker", "capi", "GET", {"symbol": "cmt_btcusdt"})
    >>> request.url
    'https://capi.bitget.com/api/swap/v3/market/ticker?symbol=cmt_btcusdt'
"""

import base64
import hashlib
import hmac
import json
import re
import time
from decimal import Decimal
from typing import Any, Callable, Dict, Mapping, Optional, Tuple
from urllib.parse import urlencode

from pydantic import BaseModel, Field

from bitget_adapter.config.models import ApiSurface, Credentials, ExchangeConfig
from bitget_adapter.exceptions import ArgumentsRequired, AuthenticationError
from bitget_adapter.precise import to_plain_string

_PATH_PARAM = re.compile(r"\{([A-Za-z0-9_]+)\}")

PUBLIC_SURFACES = (ApiSurface.DATA, ApiSurface.CAPI)


class SignedRequest(BaseModel):
    """Fully addressed request, ready for the transport."""

    model_config = {"frozen": True, "extra": "forbid"}

    url: str
    method: str
    body: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)


def _milliseconds() -> int:
    return int(time.time() * 1000)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return to_plain_string(value)
    return str(value)


def _keysort(params: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: params[key] for key in sorted(params)}


def _rawencode(params: Mapping[str, Any]) -> str:
    """k=v&k=v without percent-encoding."""
    return "&".join(f"{key}={_stringify(value)}" for key, value in params.items())


def _urlencode(params: Mapping[str, Any]) -> str:
    return urlencode({key: _stringify(value) for key, value in params.items()})


def implode_path(path: str, params: Mapping[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Substitute ``{name}`` placeholders of a path from params.

    Args:
        path: Path template, e.g. "accounts/{account_id}/balance".
        params: Request parameters.

    Returns:
        Tuple of the concrete path and the params left for the query.

    Raises:
        ArgumentsRequired: If a placeholder has no parameter.
    """
    names = _PATH_PARAM.findall(path)
    for name in names:
        if params.get(name) is None:
            raise ArgumentsRequired(f"Path {path} requires parameter '{name}'")
    concrete = _PATH_PARAM.sub(lambda m: _stringify(params[m.group(1)]), path)
    remaining = {k: v for k, v in params.items() if k not in names}
    return concrete, remaining


class RequestSigner:
    """
    Builds signed requests for every API surface.

    Args:
        config: Exchange configuration (hosts, version).
        clock: Millisecond clock; defaults to wall-clock time.
    """

    def __init__(
        self,
        config: ExchangeConfig,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.config = config
        self._clock = clock or _milliseconds

    def request_path(self, path: str, api: "ApiSurface | str") -> str:
        """Versioned path prefix per surface."""
        api = ApiSurface(api)
        if api in (ApiSurface.CAPI, ApiSurface.SWAP):
            return f"/api/swap/{self.config.version}/{path}"
        return f"/{api.value}/v1/{path}"

    def sign(
        self,
        path: str,
        api: "ApiSurface | str",
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        credentials: Optional[Credentials] = None,
        timestamp: Optional[int] = None,
    ) -> SignedRequest:
        """
        Produce the signed request for one call.

        Args:
            path: Endpoint path template relative to the surface.
            api: API surface.
            method: HTTP method ("GET" or "POST").
            params: Request parameters; path placeholders are consumed.
            credentials: Required for the swap and api surfaces.
            timestamp: Milliseconds to sign with; defaults to the clock.

        Returns:
            SignedRequest: url, method, body and headers.

        Raises:
            AuthenticationError: Required credentials are missing.
            ArgumentsRequired: A path placeholder has no parameter.
        """
        api = ApiSurface(api)
        method = method.upper()
        concrete, query = implode_path(path, params or {})
        request = self.request_path(concrete, api)
        url = self.config.api_url(api) + request

        if api in PUBLIC_SURFACES:
            if query:
                url += "?" + _urlencode(query)
            return SignedRequest(url=url, method=method)

        credentials = credentials or Credentials()
        ts = str(timestamp if timestamp is not None else self._clock())
        if api == ApiSurface.SWAP:
            return self._sign_scheme_a(url, request, method, query, credentials, ts)
        return self._sign_scheme_b(url, method, query, credentials, ts)

    def _sign_scheme_a(
        self,
        url: str,
        request: str,
        method: str,
        query: Dict[str, Any],
        credentials: Credentials,
        timestamp: str,
    ) -> SignedRequest:
        self._require(credentials, "api_key", "secret", "password")

        body: Optional[str] = None
        auth = timestamp + method + request
        if method == "POST":
            body = json.dumps(
                {k: _json_value(v) for k, v in query.items()},
                separators=(",", ":"),
            )
            auth += body
        elif query:
            encoded = _urlencode(_keysort(query))
            url += "?" + encoded
            auth += "?" + encoded

        digest = hmac.new(
            credentials.secret_value().encode(),
            auth.encode(),
            hashlib.sha256,
        ).digest()
        headers = {
            "ACCESS-KEY": credentials.api_key,
            "ACCESS-SIGN": base64.b64encode(digest).decode(),
            "ACCESS-TIMESTAMP": timestamp,
            "ACCESS-PASSPHRASE": credentials.password_value(),
        }
        if method == "POST":
            headers["Content-Type"] = "application/json"
        return SignedRequest(url=url, method=method, body=body, headers=headers)

    def _sign_scheme_b(
        self,
        url: str,
        method: str,
        query: Dict[str, Any],
        credentials: Credentials,
        timestamp: str,
    ) -> SignedRequest:
        self._require(credentials, "api_key", "secret")

        auth = _rawencode(_keysort(query))
        signature = scheme_b_signature(auth, credentials.secret_value())
        suffix = f"sign={signature}&req_time={timestamp}&accesskey={credentials.api_key}"

        if method == "POST":
            return SignedRequest(
                url=url + "?" + suffix,
                method=method,
                body=auth,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        signed = f"{auth}&{suffix}" if auth else suffix
        return SignedRequest(url=url + "?" + signed, method=method)

    @staticmethod
    def _require(credentials: Credentials, *fields: str) -> None:
        for field in fields:
            if not getattr(credentials, field):
                raise AuthenticationError(f"Credential '{field}' is required for signing")

    def __repr__(self) -> str:
        return f"RequestSigner(hostname={self.config.hostname}, version={self.config.version})"


def scheme_b_signature(canonical: str, secret: str) -> str:
    """
    HMAC-MD5 of the canonical string, keyed by the hex SHA1 of the secret.

    Example:
        >>> len(scheme_b_signature("symbol=btcusdt", "secret"))
        32
    """
    key = hashlib.sha1(secret.encode()).hexdigest()
    return hmac.new(key.encode(), canonical.encode(), hashlib.md5).hexdigest()


def _json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return to_plain_string(value)
    return value
