"""Exceptions surfaced by the catalog client to its callbacks."""

from __future__ import annotations


class CatalogError(Exception):
    """Base exception for catalog-related failures."""


class TransportError(CatalogError):
    """Raised when the HTTP request fails or returns no data."""


class DecodeError(CatalogError):
    """Raised when a payload does not match the expected structure."""


class InvalidStructureError(DecodeError):
    """Raised when a list payload has no top-level ``results`` array."""

    def __init__(self, message: str = "Invalid JSON structure") -> None:
        super().__init__(message)


class ConfigurationError(CatalogError):
    """Raised when TMDB_API_KEY is not configured."""


class PaginationInProgressError(CatalogError):
    """Raised when a page is requested while another page is still loading."""


class UnexpectedError(CatalogError):
    """Raised when fetching or decoding fails in a way no other error covers."""
