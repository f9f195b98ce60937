"""
Structured logging setup.

Call :func:`setup_logging` once at program start. Modules obtain their logger
with ``structlog.get_logger(__name__)`` and log snake_case events with
key/value context.
"""

import logging
from typing import Optional

import structlog

from bitget_adapter.config.models import LogFormat, LoggingConfig


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """
    Configure structlog on top of the standard library logging module.

    Args:
        config: Logging settings; defaults to JSON at INFO.
    """
    config = config or LoggingConfig()

    renderer = (
        structlog.processors.JSONRenderer()
        if config.format == LogFormat.JSON
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, config.level.value),
    )

    # aiohttp logs every connection at DEBUG
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
