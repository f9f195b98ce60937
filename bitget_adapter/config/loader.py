"""
Configuration loader for YAML-based adapter configuration.

Loads ``exchange.yaml`` from a configuration directory, validates it with the
Pydantic models in ``bitget_adapter.config.models`` and merges credentials and
logging settings from the environment.

Configuration file expected:
    - config/exchange.yaml: venue settings and logging

Environment variables override:
    - BITGET_API_KEY: API key
    - BITGET_SECRET: API secret
    - BITGET_PASSWORD: API passphrase
    - LOG_LEVEL: Application log level
    - LOG_FORMAT: "json" or "text"

Example:
    >>> from bitget_adapter.config.loader import load_config
    >>> config = load_config("config")
    >>> config.exchange.market_types()
    [<MarketType.SPOT: 'spot'>, <MarketType.SWAP: 'swap'>]
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from bitget_adapter.config.models import (
    AppConfig,
    Credentials,
    ExchangeConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
)


class ConfigLoadError(Exception):
    """
    Raised when configuration loading fails.

    Attributes:
        message: Error message describing what went wrong.
        file_path: Path to the file that caused the error, if applicable.
        cause: Original exception that caused the error, if any.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.file_path = file_path
        self.cause = cause
        super().__init__(message)


class ConfigLoader:
    """
    Loads and validates adapter configuration.

    Expects the following directory structure:
        config/
        └── exchange.yaml    - venue settings and logging

    Example:
        >>> loader = ConfigLoader("config")
        >>> config = loader.load()
        >>> config.exchange.hostname
        'bitget.com'
    """

    FILENAME = "exchange.yaml"

    def __init__(self, config_dir: Path | str = "config"):
        """
        Initialize config loader.

        Args:
            config_dir: Path to configuration directory (default: 'config').

        Raises:
            ConfigLoadError: If config directory does not exist.
        """
        self.config_dir = Path(config_dir)
        if not self.config_dir.exists():
            raise ConfigLoadError(
                f"Configuration directory not found: {self.config_dir}",
                file_path=self.config_dir,
            )
        if not self.config_dir.is_dir():
            raise ConfigLoadError(
                f"Configuration path is not a directory: {self.config_dir}",
                file_path=self.config_dir,
            )

    def _load_yaml(self, filename: str) -> Dict[str, Any]:
        """
        Load a YAML file from the config directory.

        Raises:
            ConfigLoadError: If file not found, empty, or invalid YAML.
        """
        file_path = self.config_dir / filename
        if not file_path.exists():
            raise ConfigLoadError(
                f"Configuration file not found: {file_path}",
                file_path=file_path,
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
                if data is None:
                    raise ConfigLoadError(
                        f"Configuration file is empty: {file_path}",
                        file_path=file_path,
                    )
                return data
        except yaml.YAMLError as e:
            raise ConfigLoadError(
                f"Invalid YAML syntax in {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e
        except OSError as e:
            raise ConfigLoadError(
                f"Error reading {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e

    def _load_exchange(self, data: Dict[str, Any]) -> ExchangeConfig:
        """Validate the ``exchange`` section."""
        try:
            return ExchangeConfig(**data.get("exchange", {}))
        except ValidationError as e:
            raise ConfigLoadError(
                f"Invalid exchange configuration: {e}",
                file_path=self.config_dir / self.FILENAME,
                cause=e,
            ) from e

    def _load_credentials(self) -> Credentials:
        """
        Load credentials from environment.

        Credentials are never read from the YAML file.

        Environment variables:
            - BITGET_API_KEY, BITGET_SECRET, BITGET_PASSWORD
        """
        return Credentials(
            api_key=os.getenv("BITGET_API_KEY") or None,
            secret=os.getenv("BITGET_SECRET") or None,
            password=os.getenv("BITGET_PASSWORD") or None,
        )

    def _load_logging(self, data: Dict[str, Any]) -> LoggingConfig:
        """
        Load logging settings, with environment taking precedence.

        Unknown LOG_LEVEL / LOG_FORMAT values fall back to the file value.
        """
        base = LoggingConfig(**data.get("logging", {}))

        level = base.level
        level_str = os.getenv("LOG_LEVEL")
        if level_str:
            try:
                level = LogLevel(level_str.upper())
            except ValueError:
                pass

        fmt = base.format
        format_str = os.getenv("LOG_FORMAT")
        if format_str:
            try:
                fmt = LogFormat(format_str.lower())
            except ValueError:
                pass

        return LoggingConfig(level=level, format=fmt)

    def load(self) -> AppConfig:
        """
        Load and validate the configuration.

        Returns:
            AppConfig: Validated configuration.

        Raises:
            ConfigLoadError: If any configuration is invalid or missing.
        """
        data = self._load_yaml(self.FILENAME)

        try:
            return AppConfig(
                exchange=self._load_exchange(data),
                credentials=self._load_credentials(),
                logging=self._load_logging(data),
            )
        except ConfigLoadError:
            raise
        except ValidationError as e:
            raise ConfigLoadError(
                f"Configuration validation failed: {e}",
                cause=e,
            ) from e


def load_config(config_dir: Path | str = "config") -> AppConfig:
    """
    Convenience function to load adapter configuration.

    Args:
        config_dir: Path to configuration directory (default: 'config').

    Returns:
        AppConfig: Validated configuration.

    Raises:
        ConfigLoadError: If configuration loading fails.
    """
    loader = ConfigLoader(config_dir)
    return loader.load()
