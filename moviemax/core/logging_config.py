"""Utilities to configure stdlib logging from environment settings."""

from __future__ import annotations

import logging

from moviemax.core.config import get_settings


def configure_logging() -> None:
    """Apply LOG_LEVEL to the root logger and quiet the HTTP client."""

    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger().setLevel(level)
    # httpx logs every request at INFO, including the api_key query string.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
