"""Case-insensitive title search over the accumulated catalog."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from moviemax.services.models import CatalogEntry


@dataclass(frozen=True, slots=True)
class SearchView:
    active: bool = False
    matches: tuple[CatalogEntry, ...] = ()

    def visible(self, working_set: Sequence[CatalogEntry]) -> list[CatalogEntry]:
        """Matches while searching, otherwise the whole working set."""

        return list(self.matches) if self.active else list(working_set)


def apply_search(working_set: Sequence[CatalogEntry], query: str) -> SearchView:
    if not query:
        return SearchView()
    needle = query.lower()
    return SearchView(
        active=True,
        matches=tuple(entry for entry in working_set if needle in entry.title.lower()),
    )
