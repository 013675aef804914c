"""
Logging setup for DocDB core.

Library modules only obtain loggers; the embedding process calls
setup_logging() once at startup.
"""

from __future__ import annotations

import logging

import json_log_formatter

from .config import CoreConfig


def setup_logging(config: CoreConfig) -> None:
    """Configure logging based on configuration.

    Args:
        config: Core configuration
    """
    level = getattr(logging, config.observability.log_level.upper(), logging.INFO)

    if config.observability.log_format == "json":
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # Reduce noise from asyncio's slow-callback warnings
    logging.getLogger("asyncio").setLevel(logging.WARNING)
