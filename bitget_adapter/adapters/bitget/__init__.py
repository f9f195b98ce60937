"""
Bitget venue adapter module.

Components:
    BitgetAdapter: Main adapter implementing the TradingAdapter interface
    BitgetRestClient: Signed aiohttp transport
    BitgetNormalizer: Payload normalization
    MarketCatalog: Load-once market registry
    RequestSigner: Public, Scheme A and Scheme B request signing
    ErrorTranslator: Venue error payloads to typed exceptions

Example:
    >>> from bitget_adapter.adapters.bitget import BitgetAdapter
    >>> adapter = BitgetAdapter(app_config)
    >>> ticker = await adapter.fetch_ticker("BTC/USDT")
"""

from bitget_adapter.adapters.bitget.adapter import BitgetAdapter
from bitget_adapter.adapters.bitget.catalog import (
    MarketCatalog,
    MarketCatalogBuilder,
    MarketIndex,
)
from bitget_adapter.adapters.bitget.endpoints import Endpoint
from bitget_adapter.adapters.bitget.error_translator import ErrorTranslator
from bitget_adapter.adapters.bitget.normalizer import BitgetNormalizer, EntityKind
from bitget_adapter.adapters.bitget.rest import BitgetRestClient
from bitget_adapter.adapters.bitget.signer import RequestSigner, SignedRequest

__all__ = [
    "BitgetAdapter",
    "BitgetRestClient",
    "BitgetNormalizer",
    "EntityKind",
    "Endpoint",
    "ErrorTranslator",
    "MarketCatalog",
    "MarketCatalogBuilder",
    "MarketIndex",
    "RequestSigner",
    "SignedRequest",
]
