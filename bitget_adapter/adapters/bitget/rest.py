"""
Async REST transport for Bitget.

One call is: sign -> send -> translate venue errors -> decode. The client
never retries; a failure surfaces as a typed BitgetError and the caller
decides what to do with it.

Error mapping:
    - Venue error payloads: ErrorTranslator tables
    - Non-2xx without a venue signal: HTTP status table
    - aiohttp.ClientError: NetworkError
    - asyncio.TimeoutError: RequestTimeout

Signed URLs and headers carry the API key and signature, so log events only
name the endpoint, never the URL.

Example:
    >>> client = BitgetRestClient(config.exchange, config.credentials)
    >>> payload = await client.request(Endpoint.SWAP_TICKER, {"symbol": "cmt_btcusdt"})
    >>> await client.close()
"""

import asyncio
import json
from decimal import Decimal
from typing import Any, Dict, Optional

import aiohttp
import structlog

from bitget_adapter.adapters.bitget.endpoints import Endpoint
from bitget_adapter.adapters.bitget.error_translator import ErrorTranslator
from bitget_adapter.adapters.bitget.signer import RequestSigner
from bitget_adapter.config.models import Credentials, ExchangeConfig
from bitget_adapter.exceptions import ExchangeError, NetworkError, RequestTimeout

logger = structlog.get_logger(__name__)


class BitgetRestClient:
    """
    Async REST client for every Bitget API surface.

    Attributes:
        config: Exchange configuration.
        signer: Request signer.
        translator: Error translator.

    Args:
        config: Exchange configuration (hosts, timeout, user agent).
        credentials: API credentials; only needed for private endpoints.
        signer: Signer to use; built from ``config`` when omitted.
        translator: Error translator; default tables when omitted.
        session: Externally owned aiohttp session. When given, ``close()``
            leaves it open.
    """

    def __init__(
        self,
        config: ExchangeConfig,
        credentials: Optional[Credentials] = None,
        signer: Optional[RequestSigner] = None,
        translator: Optional[ErrorTranslator] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.config = config
        self.credentials = credentials or Credentials()
        self.signer = signer or RequestSigner(config)
        self.translator = translator or ErrorTranslator(exchange_id=config.id)
        self.timeout_seconds = config.connection.timeout_seconds

        self._session = session
        self._owns_session = session is None

        logger.info(
            "rest_client_initialized",
            exchange=config.id,
            hostname=config.hostname,
            authenticated=self.credentials.api_key is not None,
        )

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session is created."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": self.config.connection.user_agent},
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            logger.debug("rest_client_session_closed", exchange=self.config.id)

    async def request(
        self,
        endpoint: Endpoint,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Perform one request.

        Args:
            endpoint: Venue endpoint.
            params: Request parameters (path placeholders included).

        Returns:
            Any: Decoded JSON payload.

        Raises:
            AuthenticationError: Missing credentials for a private endpoint
                (raised before any network I/O).
            BitgetError: Translated venue or HTTP error.
            NetworkError: Connection failure.
            RequestTimeout: Request exceeded the configured timeout.
        """
        signed = self.signer.sign(
            endpoint.path,
            endpoint.api,
            endpoint.method,
            params or {},
            self.credentials,
        )
        session = await self._ensure_session()

        try:
            async with session.request(
                signed.method,
                signed.url,
                data=signed.body,
                headers=signed.headers,
            ) as response:
                status = response.status
                text = await response.text()
        except asyncio.TimeoutError as e:
            logger.error(
                "rest_timeout",
                exchange=self.config.id,
                endpoint=endpoint.name,
                timeout=self.timeout_seconds,
            )
            raise RequestTimeout(
                f"{self.config.id} {endpoint.method} {endpoint.path} timed out "
                f"after {self.timeout_seconds}s"
            ) from e
        except aiohttp.ClientError as e:
            logger.error(
                "rest_client_error",
                exchange=self.config.id,
                endpoint=endpoint.name,
                error=str(e),
            )
            raise NetworkError(
                f"{self.config.id} {endpoint.method} {endpoint.path} failed: {e}"
            ) from e

        payload = self._decode(text)

        logger.debug(
            "rest_response_received",
            exchange=self.config.id,
            endpoint=endpoint.name,
            status=status,
        )

        self.translator.translate(payload, text)
        if status >= 400:
            logger.warning(
                "rest_http_error",
                exchange=self.config.id,
                endpoint=endpoint.name,
                status=status,
            )
            self.translator.translate_http_status(status, text, payload)

        if payload is None and text.strip():
            raise ExchangeError(
                f"{self.config.id} returned a non-JSON body for {endpoint.path}",
                body=text,
            )
        return payload

    @staticmethod
    def _decode(text: str) -> Any:
        if not text or not text.strip():
            return None
        try:
            return json.loads(text, parse_float=Decimal)
        except ValueError:
            return None

    def __repr__(self) -> str:
        return f"BitgetRestClient(hostname={self.config.hostname}, timeout={self.timeout_seconds}s)"
