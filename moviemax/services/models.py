"""Typed records for catalog entries and movie details.

Both records decode straight from TMDb JSON (wire names are kept as
aliases) and are immutable once built. Presentation values such as the
release year, artwork URLs and human-readable runtime/revenue are derived
on access rather than stored.
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field

from moviemax.core.config import get_settings

NOT_AVAILABLE_DURATION = "N/A"
NOT_AVAILABLE_REVENUE = "Not Available"

_REVENUE_UNITS = (
    (Decimal(1_000_000_000), "B"),
    (Decimal(1_000_000), "M"),
    (Decimal(1_000), "K"),
)


def parse_year(release_date: str | None) -> int | None:
    """Return the calendar year of a ``YYYY-MM-DD`` date, or None."""

    if not release_date:
        return None
    try:
        return datetime.strptime(release_date, "%Y-%m-%d").year
    except ValueError:
        return None


def build_image_url(path: str | None, *, base: str | None = None) -> str | None:
    if not path:
        return None
    image_base = (base or get_settings().tmdb_image_base).rstrip("/")
    return f"{image_base}/{path.lstrip('/')}"


def format_duration(runtime_minutes: int | None) -> str:
    if runtime_minutes is None:
        return NOT_AVAILABLE_DURATION
    hours, minutes = divmod(runtime_minutes, 60)
    return f"{hours}H {minutes}M"


def format_revenue(amount: int) -> str:
    """Abbreviate a box-office figure: 1_500_000_000 -> "$1.5B", 0 -> "Not Available"."""

    if amount == 0:
        return NOT_AVAILABLE_REVENUE
    value = Decimal(amount)
    for unit, suffix in _REVENUE_UNITS:
        scaled = value / unit
        if scaled >= 1:
            rounded = scaled.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
            return f"${rounded}{suffix}"
    return f"${amount}"


class CatalogEntry(BaseModel):
    """Movie summary shown in the catalog list."""

    model_config = ConfigDict(frozen=True, strict=True)

    id: int
    title: str
    release_date: str
    poster_path: str | None = None

    @property
    def year(self) -> int | None:
        return parse_year(self.release_date)

    @property
    def poster_url(self) -> str | None:
        return build_image_url(self.poster_path)

    # Catalog id is the identity key.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CatalogEntry):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class MovieDetail(BaseModel):
    """Full record for a single movie."""

    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True)

    title: str = Field(alias="original_title")
    backdrop_path: str | None = None
    vote_count: int = Field(ge=0)
    vote_average: float
    overview: str
    revenue: int = Field(ge=0)
    runtime_minutes: int | None = Field(default=None, ge=0, alias="runtime")

    @property
    def backdrop_url(self) -> str | None:
        return build_image_url(self.backdrop_path)

    @property
    def formatted_duration(self) -> str:
        return format_duration(self.runtime_minutes)

    @property
    def formatted_revenue(self) -> str:
        return format_revenue(self.revenue)
