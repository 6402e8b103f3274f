"""Scraping client for IMDb watchlists, ratings and custom lists."""

from .client import ImdbClient
from .config import ImdbConfig
from .exceptions import (
    ImdbError,
    ConfigurationError,
    AuthorizationError,
    ResourceNotFoundError,
    UnexpectedStatusError,
    ScrapeError,
    TransportError,
    MalformedExportError,
)
from .exports import format_slug
from .models import CatalogItem, ClientIdentity, CollectionPair, NamedCollection

__all__ = [
    "ImdbClient",
    "ImdbConfig",
    "ImdbError",
    "ConfigurationError",
    "AuthorizationError",
    "ResourceNotFoundError",
    "UnexpectedStatusError",
    "ScrapeError",
    "TransportError",
    "MalformedExportError",
    "format_slug",
    "CatalogItem",
    "ClientIdentity",
    "CollectionPair",
    "NamedCollection",
]
