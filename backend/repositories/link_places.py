"""
Link place repository: places parsed from shared Google Maps links.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from domain.models import GeoPoint, LinkPlace, new_id
from repositories.models import LinkPlaceORM


def _link_place_from_orm(orm: LinkPlaceORM) -> LinkPlace:
    location = GeoPoint(orm.lat, orm.lon) if orm.lat is not None and orm.lon is not None else None
    return LinkPlace(
        id=orm.id,
        feature_id=orm.feature_id,
        name=orm.name,
        address=orm.address,
        location=location,
        original_sharing_url=orm.original_sharing_url,
        resolved_full_url=orm.resolved_full_url,
        google_maps_url=orm.google_maps_url,
        phone_number=orm.phone_number,
        website=orm.website,
        category=orm.category,
        rating=orm.rating,
        review_count=orm.review_count,
        created_at=orm.created_at,
        updated_at=orm.updated_at,
    )


class LinkPlacesRepository:
    def find_by_feature_id(self, session: Session, feature_id: str) -> Optional[LinkPlace]:
        orm = (
            session.query(LinkPlaceORM)
            .filter(LinkPlaceORM.feature_id == feature_id)
            .first()
        )
        return _link_place_from_orm(orm) if orm else None

    def save(self, session: Session, place: LinkPlace) -> LinkPlace:
        """Insert a link place; if the feature id is already stored, return the stored row."""
        now = datetime.utcnow()
        orm = LinkPlaceORM(
            id=place.id or new_id(),
            feature_id=place.feature_id,
            name=place.name,
            address=place.address,
            lat=place.location.lat if place.location else None,
            lon=place.location.lon if place.location else None,
            original_sharing_url=place.original_sharing_url,
            resolved_full_url=place.resolved_full_url,
            google_maps_url=place.google_maps_url,
            phone_number=place.phone_number,
            website=place.website,
            category=place.category,
            rating=place.rating,
            review_count=place.review_count,
            created_at=place.created_at or now,
            updated_at=place.updated_at or now,
        )
        session.add(orm)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            existing = self.find_by_feature_id(session, place.feature_id)
            if existing is None:
                raise
            return existing
        session.refresh(orm)
        return _link_place_from_orm(orm)
