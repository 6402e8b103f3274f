from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass(frozen=True)
class SessionCredentials:
    session_token: str
    secondary_token: str

    def __repr__(self) -> str:
        # Tokens are secrets; keep them out of logs and tracebacks
        return "SessionCredentials(session_token=***, secondary_token=***)"


@dataclass(frozen=True)
class ClientIdentity:
    user_id: str
    watchlist_id: str


@dataclass(frozen=True)
class CatalogItem:
    """
    One title from an export.

    ``rating`` and ``rated_on`` are only set for rating exports, and always together.
    """
    external_id: str
    title_type: str
    rating: int | None = None
    rated_on: date | None = None

    def __post_init__(self):
        if (self.rating is None) != (self.rated_on is None):
            raise ValueError(
                f"rating and rated_on must both be set or both be empty for {self.external_id}"
            )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.external_id,
            "title_type": self.title_type,
        }
        if self.rating is not None:
            data["rating"] = self.rating
            data["rated_on"] = self.rated_on.isoformat()
        return data


@dataclass(frozen=True)
class NamedCollection:
    list_id: str
    name: str
    items: tuple[CatalogItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "list_id": self.list_id,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class CollectionPair:
    """An IMDb list together with the slug it maps to on the sync target."""
    collection: NamedCollection
    target_slug: str

    def to_dict(self) -> dict[str, Any]:
        data = self.collection.to_dict()
        data["target_slug"] = self.target_slug
        return data
