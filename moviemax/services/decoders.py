"""Decode TMDb response bodies into typed records.

The detail endpoint is decoded strictly: one bad field fails the whole
payload. The list endpoint is lenient per item, so malformed entries are
dropped and the rest of the page still renders.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from moviemax.services.errors import DecodeError, InvalidStructureError
from moviemax.services.models import CatalogEntry, MovieDetail


logger = logging.getLogger(__name__)


def decode_detail(data: bytes) -> MovieDetail:
    try:
        return MovieDetail.model_validate_json(data)
    except ValidationError as exc:
        raise DecodeError(f"Invalid movie detail payload: {exc}") from exc


def decode_list(data: bytes) -> list[CatalogEntry]:
    """Decode a ``{"results": [...]}`` page, skipping malformed entries."""

    try:
        payload = json.loads(data)
    except (ValueError, TypeError, RecursionError) as exc:
        raise DecodeError(f"Invalid JSON: {exc}") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("results"), list):
        raise InvalidStructureError()

    entries: list[CatalogEntry] = []
    for position, item in enumerate(payload["results"]):
        entry = _decode_entry(item)
        if entry is None:
            logger.debug("Skipping malformed catalog entry at index %d", position)
            continue
        entries.append(entry)
    return entries


def _decode_entry(item: Any) -> CatalogEntry | None:
    # poster_path may be null on the wire; the list only keeps entries with artwork.
    if not isinstance(item, dict) or not isinstance(item.get("poster_path"), str):
        return None
    try:
        return CatalogEntry.model_validate(item)
    except ValidationError:
        return None
