"""Fetch/decode/dispatch pipeline for the TMDb list and detail endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Awaitable, Callable, Generic, TypeVar

import httpx

from moviemax.core.config import Settings, get_settings
from moviemax.services.decoders import decode_detail, decode_list
from moviemax.services.errors import (
    CatalogError,
    ConfigurationError,
    PaginationInProgressError,
    UnexpectedError,
)
from moviemax.services.http import fetch as http_fetch
from moviemax.services.models import CatalogEntry, MovieDetail


logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetcher = Callable[[str], Awaitable[bytes]]
Decoder = Callable[[bytes], T]
Dispatcher = Callable[[Callable[[], None]], Any]


def build_list_url(settings: Settings, page: int) -> str:
    base = settings.tmdb_base_url.rstrip("/")
    url = httpx.URL(
        f"{base}{settings.tmdb_list_path}",
        params={"api_key": _require_api_key(settings), "page": page},
    )
    return str(url)


def build_detail_url(settings: Settings, movie_id: int) -> str:
    base = settings.tmdb_base_url.rstrip("/")
    url = httpx.URL(
        f"{base}{settings.tmdb_detail_path}/{movie_id}",
        params={"api_key": _require_api_key(settings)},
    )
    return str(url)


def _require_api_key(settings: Settings) -> str:
    if not settings.tmdb_api_key:
        raise ConfigurationError("TMDB_API_KEY is not configured")
    return settings.tmdb_api_key


async def fetch_and_decode(url: str, decode: Decoder[T], *, fetch: Fetcher) -> T:
    """Run one request through ``fetch`` and hand the body to ``decode``."""

    data = await fetch(url)
    return decode(data)


def _call_inline(callback: Callable[[], None]) -> None:
    callback()


@dataclass
class PageCursor:
    """Next results page to request for one browsing session."""

    page: int = 1

    def advance(self) -> int:
        self.page += 1
        return self.page


@dataclass
class ResultHandler(Generic[T]):
    """Success/failure callback pair; setting a slot replaces the old one."""

    on_success: Callable[[T], None] | None = None
    on_failure: Callable[[CatalogError], None] | None = None
    dispatch: Dispatcher = _call_inline

    def succeed(self, value: T) -> None:
        if self.on_success is None:
            logger.warning("No success handler registered, dropping result")
            return
        self.dispatch(partial(self.on_success, value))

    def fail(self, error: CatalogError) -> None:
        if self.on_failure is None:
            logger.warning("No failure handler registered, dropping error: %s", error)
            return
        self.dispatch(partial(self.on_failure, error))


async def _capture(awaitable: Awaitable[T]) -> tuple[T | None, CatalogError | None]:
    try:
        return await awaitable, None
    except CatalogError as exc:
        return None, exc
    except Exception as exc:
        logger.exception("Unexpected error while loading from TMDb")
        error = UnexpectedError(str(exc) or exc.__class__.__name__)
        error.__cause__ = exc
        return None, error


class DetailManager:
    """Loads one movie's details and reports through the callback pair."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        fetch: Fetcher | None = None,
        dispatch: Dispatcher | None = None,
        on_success: Callable[[MovieDetail], None] | None = None,
        on_failure: Callable[[CatalogError], None] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._fetch = fetch or partial(http_fetch, client=client, timeout=self.settings.http_timeout)
        self._handler: ResultHandler[MovieDetail] = ResultHandler(
            on_success, on_failure, dispatch or _call_inline
        )

    def set_callbacks(
        self,
        on_success: Callable[[MovieDetail], None],
        on_failure: Callable[[CatalogError], None],
    ) -> None:
        self._handler.on_success = on_success
        self._handler.on_failure = on_failure

    async def fetch_details(self, movie_id: int) -> None:
        """Fire exactly one of ``on_success`` / ``on_failure`` for ``movie_id``."""

        movie, error = await _capture(self._request(movie_id))
        if error is not None:
            logger.info("Movie %s details failed: %s", movie_id, error)
            self._handler.fail(error)
            return
        self._handler.succeed(movie)

    async def _request(self, movie_id: int) -> MovieDetail:
        url = build_detail_url(self.settings, movie_id)
        return await fetch_and_decode(url, decode_detail, fetch=self._fetch)


class ListManager:
    """Loads catalog pages one at a time, advancing its cursor on success.

    Only one page load may be in flight per manager. A second call made
    while the first is pending fails with PaginationInProgressError and
    leaves the cursor alone, so pages are never skipped or fetched twice.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        cursor: PageCursor | None = None,
        client: httpx.AsyncClient | None = None,
        fetch: Fetcher | None = None,
        dispatch: Dispatcher | None = None,
        on_success: Callable[[list[CatalogEntry]], None] | None = None,
        on_failure: Callable[[CatalogError], None] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.cursor = cursor if cursor is not None else PageCursor()
        self._fetch = fetch or partial(http_fetch, client=client, timeout=self.settings.http_timeout)
        self._handler: ResultHandler[list[CatalogEntry]] = ResultHandler(
            on_success, on_failure, dispatch or _call_inline
        )
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def set_callbacks(
        self,
        on_success: Callable[[list[CatalogEntry]], None],
        on_failure: Callable[[CatalogError], None],
    ) -> None:
        self._handler.on_success = on_success
        self._handler.on_failure = on_failure

    async def fetch_next_page(self) -> None:
        if self._in_flight:
            self._handler.fail(
                PaginationInProgressError(f"page {self.cursor.page} is already loading")
            )
            return

        page = self.cursor.page
        self._in_flight = True
        try:
            entries, error = await _capture(self._request(page))
        finally:
            self._in_flight = False

        if error is not None:
            logger.info("Catalog page %d failed: %s", page, error)
            self._handler.fail(error)
            return
        self.cursor.advance()
        logger.debug("Catalog page %d returned %d entries", page, len(entries))
        self._handler.succeed(entries)

    async def _request(self, page: int) -> list[CatalogEntry]:
        url = build_list_url(self.settings, page)
        return await fetch_and_decode(url, decode_list, fetch=self._fetch)
