"""Single-attempt HTTP GET helpers for TMDb data and artwork."""

from __future__ import annotations

import logging

import httpx

from moviemax.core.config import get_settings
from moviemax.services.errors import TransportError


logger = logging.getLogger(__name__)


async def fetch(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
) -> bytes:
    """GET ``url`` once and return the raw body.

    The status code is not inspected: an error page is still bytes. A
    transport failure, or a response without a body, raises TransportError.
    """

    logger.debug("GET %s", _redact(url))
    try:
        if client is not None:
            response = await client.get(url)
        else:
            async with httpx.AsyncClient(timeout=timeout or get_settings().http_timeout) as session:
                response = await session.get(url)
    # A closed client raises RuntimeError instead of an httpx error.
    except (httpx.HTTPError, httpx.InvalidURL, RuntimeError) as exc:
        logger.warning("Request to %s failed: %s", _redact(url), exc)
        raise TransportError(str(exc) or exc.__class__.__name__) from exc

    if not response.content:
        raise TransportError("empty response body")
    return response.content


async def fetch_image(url: str, *, client: httpx.AsyncClient | None = None) -> bytes | None:
    """Download artwork bytes, or None so the caller can show a placeholder."""

    try:
        if client is not None:
            response = await client.get(url)
        else:
            async with httpx.AsyncClient(timeout=get_settings().http_timeout) as session:
                response = await session.get(url)
        response.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("Error loading image %s: %s", url, exc)
        return None
    if not response.content:
        logger.warning("No image data returned for %s", url)
        return None
    return response.content


def _redact(url: str) -> str:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return url
    if "api_key" not in parsed.params:
        return url
    return str(parsed.copy_set_param("api_key", "***"))
