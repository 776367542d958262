"""
Persistent cache of Places detail records, keyed by provider place id.

Entries are written once per place id; a second put for the same id
overwrites instead of failing so concurrent resolvers can both store.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from domain.models import GeoPoint, ProviderPlace
from repositories.models import PlaceDetailsORM

logger = logging.getLogger(__name__)


def _place_from_orm(orm: PlaceDetailsORM) -> ProviderPlace:
    location = GeoPoint(orm.lat, orm.lon) if orm.lat is not None and orm.lon is not None else None
    return ProviderPlace(
        place_id=orm.place_id,
        name=orm.name,
        formatted_address=orm.formatted_address,
        location=location,
        website=orm.website,
        phone=orm.phone,
        opening_hours=orm.opening_hours,
        rating=orm.rating,
        rating_count=orm.rating_count,
        raw=orm.raw or {},
    )


def _copy_into(orm: PlaceDetailsORM, place: ProviderPlace) -> None:
    orm.name = place.name
    orm.formatted_address = place.formatted_address
    orm.lat = place.location.lat if place.location else None
    orm.lon = place.location.lon if place.location else None
    orm.website = place.website
    orm.phone = place.phone
    orm.opening_hours = place.opening_hours
    orm.rating = place.rating
    orm.rating_count = place.rating_count
    orm.raw = place.raw


class PlaceDetailsCache:
    """Read-through store for ProviderPlace records."""

    def get(self, session: Session, place_id: str) -> Optional[ProviderPlace]:
        orm = (
            session.query(PlaceDetailsORM)
            .filter(PlaceDetailsORM.place_id == place_id)
            .first()
        )
        if orm is None:
            logger.debug("place details cache miss place_id=%s", place_id)
            return None
        logger.debug("place details cache hit place_id=%s", place_id)
        return _place_from_orm(orm)

    def put(self, session: Session, place: ProviderPlace) -> ProviderPlace:
        now = datetime.utcnow()
        orm = PlaceDetailsORM(place_id=place.place_id, created_at=now, updated_at=now)
        _copy_into(orm, place)
        session.add(orm)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            existing = (
                session.query(PlaceDetailsORM)
                .filter(PlaceDetailsORM.place_id == place.place_id)
                .one()
            )
            _copy_into(existing, place)
            existing.updated_at = now
            session.commit()
            orm = existing
        session.refresh(orm)
        return _place_from_orm(orm)
