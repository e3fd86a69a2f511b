"""State for one catalog browsing session."""

from __future__ import annotations

import logging

import httpx

from moviemax.core.config import Settings
from moviemax.services.errors import CatalogError, PaginationInProgressError
from moviemax.services.models import CatalogEntry
from moviemax.services.search import SearchView, apply_search
from moviemax.services.tmdb import Fetcher, ListManager, PageCursor


logger = logging.getLogger(__name__)


class CatalogSession:
    """Working set, page cursor and search query for a single browser.

    Each session owns its cursor, so two sessions paginating at the same
    time never share or skip pages. The working set is append-only.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        fetch: Fetcher | None = None,
    ) -> None:
        self.cursor = PageCursor()
        self.working_set: list[CatalogEntry] = []
        self.query = ""
        self.search = SearchView()
        self.last_error: CatalogError | None = None
        self._latest_page: list[CatalogEntry] = []
        self._manager = ListManager(
            settings,
            cursor=self.cursor,
            client=client,
            fetch=fetch,
            on_success=self._handle_page,
            on_failure=self._handle_failure,
        )

    @property
    def page(self) -> int:
        """Next page number that will be requested."""
        return self.cursor.page

    @property
    def loading(self) -> bool:
        return self._manager.in_flight

    @property
    def visible_entries(self) -> list[CatalogEntry]:
        return self.search.visible(self.working_set)

    async def load_next_page(self) -> list[CatalogEntry]:
        """Fetch the next page and return the entries it appended."""

        self._latest_page = []
        await self._manager.fetch_next_page()
        return self._latest_page

    def set_query(self, query: str) -> SearchView:
        self.query = query
        self.search = apply_search(self.working_set, query)
        return self.search

    def _handle_page(self, entries: list[CatalogEntry]) -> None:
        self.last_error = None
        self.working_set.extend(entries)
        self._latest_page = list(entries)
        if self.search.active:
            self.search = apply_search(self.working_set, self.query)

    def _handle_failure(self, error: CatalogError) -> None:
        if isinstance(error, PaginationInProgressError):
            # The page already loading will report its own outcome.
            logger.debug("Catalog page %d is already loading", self.cursor.page)
            return
        logger.warning("Error loading catalog page %d: %s", self.cursor.page, error)
        self.last_error = error
