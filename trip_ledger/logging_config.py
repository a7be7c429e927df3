"""
Logging Configuration

Configures structlog on top of the standard library logging module so that
every module can log with structlog.get_logger(__name__).
"""

import logging
import sys
from typing import Optional

import structlog

from trip_ledger.config.settings import get_settings


def configure_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure structlog and the root logger.

    Args:
        level: Log level name; defaults to LOG_LEVEL from settings.
        json_logs: Render JSON lines instead of console output; defaults to JSON_LOGS.
    """
    app_settings = get_settings().app
    level = (level or app_settings.log_level).upper()
    if json_logs is None:
        json_logs = app_settings.json_logs

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
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
            renderer
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
