"""
Resolve free-form title/description (e.g. from a link preview) to a canonical cafe.

Flow: text search -> place details (cache first) -> cafe (existing or new).
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from sqlalchemy.orm import Session

from domain.errors import DuplicateProviderReference, EmptyPlaceQuery, NoCandidateFound
from domain.models import Cafe, ExternalReferences, ProviderPlace, ResolutionResult
from repositories import CafesRepository, PlaceDetailsCache
from services.places_client import get_default_places_client
from services.places_types import PlaceLookup
from settings import settings

logger = logging.getLogger(__name__)


def build_query(
    title: Optional[str],
    description: Optional[str],
    hint: Optional[str] = None,
    hint_equivalents: Optional[Iterable[str]] = None,
) -> str:
    """
    Join title and description, appending the category hint when the text
    mentions none of its equivalents. An empty hint disables biasing.
    """
    hint = settings.PLACES_QUERY_HINT if hint is None else hint
    equivalents = list(settings.PLACES_QUERY_HINT_EQUIVALENTS if hint_equivalents is None else hint_equivalents)
    t = (title or "").strip()
    d = (description or "").strip()
    query = f"{t} {d}".strip()
    if not hint:
        return query
    lowered = query.lower()
    terms = [hint.lower()] + [e.lower() for e in equivalents]
    if not any(term in lowered for term in terms):
        query = f"{query} {hint}".strip()
    return query


def cafe_from_place(place: ProviderPlace) -> Cafe:
    return Cafe(
        name=place.name or place.formatted_address or place.place_id,
        address=place.formatted_address,
        location=place.location,
        features=None,
        average_rating=place.rating if place.rating is not None else 0.0,
        total_reviews=place.rating_count if place.rating_count is not None else 0,
        images=[],
        website=place.website,
        opening_hours=place.opening_hours,
        external_references=ExternalReferences(google_place=place.place_id, redbook_id=None),
    )


def get_or_create_cafe(session: Session, cafes_repo: CafesRepository, cafe: Cafe) -> tuple[Cafe, bool]:
    """
    Return the cafe referencing cafe.google_place, creating it when absent.

    The second value is True when this call inserted the row. Losing a
    concurrent insert race returns the winner instead of failing.
    """
    google_place = cafe.google_place
    if google_place:
        existing = cafes_repo.find_by_google_place(session, google_place)
        if existing:
            return existing, False
    try:
        return cafes_repo.create_cafe(session, cafe), True
    except DuplicateProviderReference:
        logger.info("Lost cafe creation race for google_place=%s, returning existing cafe", google_place)
        winner = cafes_repo.find_by_google_place(session, google_place)
        if winner is None:
            raise
        return winner, False


class MetadataResolver:
    def __init__(
        self,
        lookup: Optional[PlaceLookup] = None,
        cafes_repo: Optional[CafesRepository] = None,
        details_cache: Optional[PlaceDetailsCache] = None,
        hint: Optional[str] = None,
        hint_equivalents: Optional[Sequence[str]] = None,
    ):
        self.lookup = lookup or get_default_places_client()
        self.cafes_repo = cafes_repo or CafesRepository()
        self.details_cache = details_cache or PlaceDetailsCache()
        self.hint = hint
        self.hint_equivalents = hint_equivalents

    def resolve_from_metadata(
        self,
        session: Session,
        title: Optional[str],
        description: Optional[str],
        original_url: Optional[str] = None,
    ) -> ResolutionResult:
        query = build_query(title, description, self.hint, self.hint_equivalents)
        if not query:
            raise EmptyPlaceQuery()
        logger.info("Resolving place id via text query: %s (url=%s)", query, original_url)

        place_id = self.lookup.find_place_id_from_text(query)
        if not place_id:
            raise NoCandidateFound(f"No place candidates found for query: {query}")

        place = self.details_cache.get(session, place_id)
        if place is not None:
            skipped_details = True
            logger.info("Found cached place details for place_id=%s", place_id)
        else:
            place = self.details_cache.put(session, self.lookup.get_place_details(place_id))
            skipped_details = False
            logger.info("Stored place details cache for place_id=%s", place_id)

        cafe, created = get_or_create_cafe(session, self.cafes_repo, cafe_from_place(place))
        if created:
            logger.info("Created cafe from place details. cafe_id=%s, place_id=%s", cafe.id, place_id)

        return ResolutionResult(place_id=place_id, skipped_details=skipped_details, cafe=cafe)
