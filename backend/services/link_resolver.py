"""
Resolve a shared Google Maps link to link place data and, optionally, a cafe.

    sharing URL -> follow redirects -> feature id
        -> existing cafe?        (entity_hit)
        -> stored link place?    (cache_hit)
        -> parse resolved URL    (fresh_parse) -> store link place [-> create cafe]
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional
from urllib.parse import unquote

from sqlalchemy.orm import Session

from domain.errors import ClientError, FeatureIdExtractionError, InvalidMapsUrlError, LinkResolutionFailed
from domain.models import Cafe, ExternalReferences, LinkPlace, LinkResolutionResult, LinkSource
from repositories import CafesRepository, LinkPlacesRepository
from services import maps_url
from services.link_follower import get_default_link_follower
from services.metadata_resolver import get_or_create_cafe
from services.places_types import LinkFollower
from settings import settings

logger = logging.getLogger(__name__)


def parse_link_place(resolved_url: str, sharing_url: str, feature_id: str) -> LinkPlace:
    """Best-effort name, coordinates and category from a resolved Maps URL."""
    decoded = unquote(resolved_url)
    now = datetime.utcnow()
    return LinkPlace(
        feature_id=feature_id,
        name=maps_url.extract_place_name(decoded),
        location=maps_url.extract_coordinates(decoded),
        category=maps_url.guess_category(decoded),
        original_sharing_url=sharing_url,
        resolved_full_url=resolved_url,
        google_maps_url=resolved_url,
        created_at=now,
        updated_at=now,
    )


def cafe_from_link_place(place: LinkPlace) -> Cafe:
    return Cafe(
        name=place.name or place.feature_id,
        address=place.address,
        location=place.location,
        average_rating=place.rating or 0.0,
        total_reviews=place.review_count or 0,
        website=place.website,
        external_references=ExternalReferences(google_place=place.feature_id),
    )


class LinkResolver:
    def __init__(
        self,
        follower: Optional[LinkFollower] = None,
        cafes_repo: Optional[CafesRepository] = None,
        link_places_repo: Optional[LinkPlacesRepository] = None,
        auto_create_cafe: Optional[bool] = None,
    ):
        self.follower = follower or get_default_link_follower()
        self.cafes_repo = cafes_repo or CafesRepository()
        self.link_places_repo = link_places_repo or LinkPlacesRepository()
        self.auto_create_cafe = (
            settings.LINK_AUTO_CREATE_CAFE if auto_create_cafe is None else auto_create_cafe
        )

    def resolve_from_shared_link(self, session: Session, sharing_url: str) -> LinkResolutionResult:
        logger.info("Resolving Google Maps sharing URL: %s", sharing_url)
        if not maps_url.is_http_url(sharing_url):
            raise InvalidMapsUrlError(f"Invalid Google Maps URL: {sharing_url!r}")
        sharing_url = sharing_url.strip()

        try:
            return self._resolve(session, sharing_url)
        except ClientError:
            raise
        except Exception as exc:
            logger.exception("Error resolving Google Maps URL: %s", sharing_url)
            raise LinkResolutionFailed(f"Failed to resolve Google Maps URL: {exc}") from exc

    def _resolve(self, session: Session, sharing_url: str) -> LinkResolutionResult:
        resolved_url = self.follower.follow(sharing_url)
        logger.info("Resolved URL: %s", resolved_url)

        feature_id = maps_url.extract_feature_id(resolved_url)
        if feature_id is None:
            raise FeatureIdExtractionError(
                f"Could not extract feature ID from Google Maps URL: {resolved_url}"
            )
        logger.info("Extracted feature ID: %s", feature_id)

        existing_cafe = self.cafes_repo.find_by_google_place(session, feature_id)
        if existing_cafe:
            logger.info("Found existing cafe for feature ID: %s", feature_id)
            now = datetime.utcnow()
            stub = LinkPlace(
                feature_id=feature_id,
                original_sharing_url=sharing_url,
                resolved_full_url=resolved_url,
                google_maps_url=resolved_url,
                created_at=now,
                updated_at=now,
            )
            return LinkResolutionResult(
                feature_id=feature_id,
                link_place=stub,
                source=LinkSource.ENTITY_HIT,
                cafe=existing_cafe,
            )

        cached = self.link_places_repo.find_by_feature_id(session, feature_id)
        if cached is not None:
            logger.info("Found existing link place for feature ID: %s", feature_id)
            return LinkResolutionResult(
                feature_id=feature_id,
                link_place=cached,
                source=LinkSource.CACHE_HIT,
                cafe=self._maybe_create_cafe(session, cached),
            )

        link_place = self.link_places_repo.save(
            session, parse_link_place(resolved_url, sharing_url, feature_id)
        )
        logger.info("Saved new link place id=%s feature_id=%s", link_place.id, feature_id)
        return LinkResolutionResult(
            feature_id=feature_id,
            link_place=link_place,
            source=LinkSource.FRESH_PARSE,
            cafe=self._maybe_create_cafe(session, link_place),
        )

    def _maybe_create_cafe(self, session: Session, place: LinkPlace) -> Optional[Cafe]:
        if not self.auto_create_cafe:
            return None
        cafe, created = get_or_create_cafe(session, self.cafes_repo, cafe_from_link_place(place))
        if created:
            logger.info("Created cafe from link place. cafe_id=%s, feature_id=%s", cafe.id, place.feature_id)
        return cafe
