from typing import Optional, Protocol

from domain.models import ProviderPlace


class PlaceLookup(Protocol):
    """Text search and detail fetch against a places provider."""

    def find_place_id_from_text(self, query: str) -> Optional[str]:
        """Top-ranked place id for the query, or None when there are no results."""
        ...

    def get_place_details(self, place_id: str) -> ProviderPlace:
        ...


class LinkFollower(Protocol):
    """Follows a shared short link to its long-form URL."""

    def follow(self, url: str) -> str:
        ...
