"""
Configuration management for the Bitget adapter.

Configuration is loaded from ``config/exchange.yaml`` and validated with
Pydantic models. Credentials come only from the environment.

Example:
    >>> from bitget_adapter.config import load_config
    >>> config = load_config()
    >>> config.exchange.api_url("data")
    'https://api.bitget.com'
"""

from bitget_adapter.config.loader import ConfigLoadError, ConfigLoader, load_config
from bitget_adapter.config.models import (
    ApiSurface,
    ApiUrls,
    AppConfig,
    ConnectionSettings,
    Credentials,
    ExchangeConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    TradingFees,
    VolumeSelector,
)

__all__: list[str] = [
    # Loader
    "load_config",
    "ConfigLoader",
    "ConfigLoadError",
    # Enums
    "ApiSurface",
    "LogFormat",
    "LogLevel",
    # Models
    "ApiUrls",
    "VolumeSelector",
    "TradingFees",
    "ConnectionSettings",
    "ExchangeConfig",
    "Credentials",
    "LoggingConfig",
    "AppConfig",
]
