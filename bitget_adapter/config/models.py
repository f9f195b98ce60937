"""
Pydantic models for adapter configuration.

This module defines the configuration that is validated when loading the YAML
configuration file. Every model is frozen: the configuration is built once at
adapter initialization and threaded into each component as an immutable value.

Configuration file:
    - config/exchange.yaml: venue hosts, market types, OHLCV and timeframe
      tables, fees, logging

Example:
    >>> from bitget_adapter.config.models import AppConfig
    >>> config = AppConfig()
    >>> config.exchange.api_url("swap")
    'https://capi.bitget.com'
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

from bitget_adapter.models.market import MarketType


# =============================================================================
# ENUMS
# =============================================================================


class ApiSurface(str, Enum):
    """REST surfaces of the venue; each has its own host and auth scheme."""

    DATA = "data"  # spot public
    API = "api"  # spot private, Scheme B
    CAPI = "capi"  # swap public
    SWAP = "swap"  # swap private, Scheme A


class LogFormat(str, Enum):
    """Logging format options."""

    JSON = "json"
    TEXT = "text"


class LogLevel(str, Enum):
    """Logging level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# =============================================================================
# EXCHANGE CONFIGURATION
# =============================================================================


class ApiUrls(BaseModel):
    """URL templates per API surface; ``{hostname}`` is substituted."""

    model_config = {"frozen": True, "extra": "forbid"}

    data: str = Field(default="https://api.{hostname}")
    api: str = Field(default="https://api.{hostname}")
    capi: str = Field(default="https://capi.{hostname}")
    swap: str = Field(default="https://capi.{hostname}")


class VolumeSelector(BaseModel):
    """
    Where to read candle volume for one market type.

    Exactly one of ``field`` (object-form candles) or ``index`` (array-form
    candles) must be set. A selector that does not fit the payload form
    resolves to no volume.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    field: Optional[str] = Field(
        default=None,
        description="Named field of an object-form candle",
    )
    index: Optional[int] = Field(
        default=None,
        description="Position in an array-form candle",
        ge=0,
    )

    @model_validator(mode="after")
    def validate_selector(self) -> "VolumeSelector":
        """Ensure exactly one source is configured."""
        if (self.field is None) == (self.index is None):
            raise ValueError("VolumeSelector needs exactly one of 'field' or 'index'")
        return self


class TradingFees(BaseModel):
    """Default maker/taker rates attached to markets of one type."""

    model_config = {"frozen": True, "extra": "forbid"}

    maker: Decimal = Field(..., description="Maker fee rate")
    taker: Decimal = Field(..., description="Taker fee rate")

    @field_validator("maker", "taker", mode="before")
    @classmethod
    def coerce_rate(cls, v: Any) -> Decimal:
        """Keep YAML floats exact."""
        return Decimal(str(v))


class ConnectionSettings(BaseModel):
    """HTTP transport settings."""

    model_config = {"frozen": True, "extra": "forbid"}

    timeout_seconds: int = Field(
        default=10,
        description="Total request timeout",
        ge=1,
        le=120,
    )
    user_agent: str = Field(
        default="bitget-adapter/1.0",
        description="User-Agent header sent with every request",
    )


def _default_ohlcv_volume() -> Dict[MarketType, VolumeSelector]:
    return {
        MarketType.SPOT: VolumeSelector(field="amount"),
        MarketType.SWAP: VolumeSelector(index=5),
    }


def _default_timeframes() -> Dict[MarketType, Dict[str, str]]:
    return {
        MarketType.SPOT: {
            "1m": "1min",
            "5m": "5min",
            "15m": "15min",
            "30m": "30min",
            "1h": "60min",
            "2h": "120min",
            "4h": "240min",
            "6h": "360min",
            "12h": "720min",
            "1d": "1day",
            "1w": "1week",
        },
        MarketType.SWAP: {
            "1m": "60",
            "5m": "300",
            "15m": "900",
            "30m": "1800",
            "1h": "3600",
            "2h": "7200",
            "4h": "14400",
            "6h": "21600",
            "12h": "43200",
            "1d": "86400",
            "1w": "604800",
        },
    }


def _default_fees() -> Dict[MarketType, TradingFees]:
    return {
        MarketType.SPOT: TradingFees(maker=Decimal("0.002"), taker=Decimal("0.002")),
        MarketType.SWAP: TradingFees(maker=Decimal("0.0004"), taker=Decimal("0.0006")),
    }


def _default_common_currencies() -> Dict[str, str]:
    return {
        "XBT": "BTC",
        "BCC": "BCH",
        "DRK": "DASH",
        "BCHABC": "BCH",
        "BCHSV": "BSV",
    }


class ExchangeConfig(BaseModel):
    """
    Venue configuration.

    Replaces a mutable options bag: every table the normalizer, signer and
    adapter consult lives here and is fixed once the adapter is built.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(default="bitget", min_length=1)
    hostname: str = Field(default="bitget.com", min_length=1)
    version: str = Field(
        default="v3",
        description="Swap API version segment",
    )
    urls: ApiUrls = Field(default_factory=ApiUrls)
    default_type: MarketType = Field(
        default=MarketType.SPOT,
        description="Market type used when a call does not name one",
    )
    fetch_markets: List[MarketType] = Field(
        default_factory=lambda: [MarketType.SPOT, MarketType.SWAP],
        description="Ordered market types loaded into the catalog",
    )
    ohlcv_volume: Dict[MarketType, VolumeSelector] = Field(
        default_factory=_default_ohlcv_volume,
        description="Candle volume source per market type",
    )
    timeframes: Dict[MarketType, Dict[str, str]] = Field(
        default_factory=_default_timeframes,
        description="Unified timeframe -> venue interval per market type",
    )
    fees: Dict[MarketType, TradingFees] = Field(default_factory=_default_fees)
    common_currencies: Dict[str, str] = Field(
        default_factory=_default_common_currencies,
        description="Venue currency aliases mapped to common codes",
    )
    create_market_buy_order_requires_price: bool = Field(
        default=True,
        description="Spot market buys compute cost from amount * price",
    )
    account_id: Optional[str] = Field(
        default=None,
        description="Spot account id; looked up by type when unset",
    )
    connection: ConnectionSettings = Field(default_factory=ConnectionSettings)

    def api_url(self, api: "ApiSurface | str") -> str:
        """
        Resolve the base URL of an API surface.

        Args:
            api: Surface name ("data", "api", "capi", "swap").

        Returns:
            str: Base URL with the hostname substituted.
        """
        name = api.value if isinstance(api, ApiSurface) else api
        template = getattr(self.urls, name)
        return template.replace("{hostname}", self.hostname)

    def market_types(self) -> List[MarketType]:
        """Types to load into the catalog, falling back to the default type."""
        return list(self.fetch_markets) or [self.default_type]


# =============================================================================
# CREDENTIALS
# =============================================================================


class Credentials(BaseModel):
    """
    API credentials.

    Secrets are SecretStr so they never show up in reprs or log events.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    api_key: Optional[str] = Field(default=None)
    secret: Optional[SecretStr] = Field(default=None)
    password: Optional[SecretStr] = Field(
        default=None,
        description="API passphrase",
    )

    def secret_value(self) -> Optional[str]:
        return self.secret.get_secret_value() if self.secret else None

    def password_value(self) -> Optional[str]:
        return self.password.get_secret_value() if self.password else None


# =============================================================================
# LOGGING / ROOT
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    format: LogFormat = Field(
        default=LogFormat.JSON,
        description="Log output format",
    )
    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Default log level",
    )


class AppConfig(BaseModel):
    """
    Root configuration.

    Example:
        >>> config = AppConfig(credentials=Credentials(api_key="key"))
        >>> config.exchange.default_type
        <MarketType.SPOT: 'spot'>
    """

    model_config = {"frozen": True, "extra": "forbid"}

    exchange: ExchangeConfig = Field(default_factory=ExchangeConfig)
    credentials: Credentials = Field(default_factory=Credentials)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
