"""
Cafe repository backed by SQLAlchemy.
"""
import math
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from domain.errors import CafeNotFound, DuplicateProviderReference
from domain.models import Cafe, CafeFeatures, CafeImage, ExternalReferences, GeoPoint, new_id
from repositories.models import CafeORM

EARTH_RADIUS_KM = 6371.0088


def _cafe_from_orm(orm: CafeORM) -> Cafe:
    location = GeoPoint(orm.lat, orm.lon) if orm.lat is not None and orm.lon is not None else None
    refs = None
    if orm.google_place_id or orm.redbook_id:
        refs = ExternalReferences(google_place=orm.google_place_id, redbook_id=orm.redbook_id)
    return Cafe(
        id=orm.id,
        name=orm.name,
        address=orm.address,
        location=location,
        features=CafeFeatures.from_dict(orm.features),
        average_rating=orm.average_rating or 0.0,
        total_reviews=orm.total_reviews or 0,
        images=[CafeImage(url=i.get("url", ""), caption=i.get("caption")) for i in orm.images or []],
        website=orm.website,
        opening_hours=orm.opening_hours,
        external_references=refs,
        created_at=orm.created_at,
        updated_at=orm.updated_at,
    )


def _apply_editable_fields(orm: CafeORM, cafe: Cafe) -> None:
    orm.name = cafe.name
    orm.address = cafe.address
    orm.lat = cafe.location.lat if cafe.location else None
    orm.lon = cafe.location.lon if cafe.location else None
    orm.features = cafe.features.to_dict() if cafe.features else None
    orm.average_rating = cafe.average_rating
    orm.total_reviews = cafe.total_reviews
    orm.images = [img.to_dict() for img in cafe.images] if cafe.images else None
    orm.website = cafe.website
    orm.opening_hours = cafe.opening_hours


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    lat1, lon1, lat2, lon2 = map(math.radians, (a.lat, a.lon, b.lat, b.lon))
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


class CafesRepository:
    """CRUD operations for cafes, plus the provider-reference lookup used by resolvers."""

    def list_cafes(self, session: Session) -> List[Cafe]:
        rows = session.query(CafeORM).order_by(CafeORM.created_at.asc()).all()
        return [_cafe_from_orm(r) for r in rows]

    def get_cafe(self, session: Session, cafe_id: str) -> Optional[Cafe]:
        orm = session.get(CafeORM, cafe_id)
        return _cafe_from_orm(orm) if orm else None

    def find_by_google_place(self, session: Session, google_place: str) -> Optional[Cafe]:
        orm = (
            session.query(CafeORM)
            .filter(CafeORM.google_place_id == google_place)
            .first()
        )
        return _cafe_from_orm(orm) if orm else None

    def create_cafe(self, session: Session, cafe: Cafe) -> Cafe:
        """
        Insert a new cafe.

        Raises DuplicateProviderReference if another cafe already holds the
        same google_place; the session is rolled back before raising.
        """
        now = datetime.utcnow()
        refs = cafe.external_references or ExternalReferences()
        orm = CafeORM(
            id=cafe.id or new_id(),
            google_place_id=refs.google_place,
            redbook_id=refs.redbook_id,
            created_at=cafe.created_at or now,
            updated_at=cafe.updated_at or now,
        )
        _apply_editable_fields(orm, cafe)
        session.add(orm)
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            if refs.google_place and self.find_by_google_place(session, refs.google_place):
                raise DuplicateProviderReference(refs.google_place) from exc
            raise
        session.refresh(orm)
        return _cafe_from_orm(orm)

    def update_cafe(self, session: Session, cafe_id: str, cafe: Cafe) -> Cafe:
        # external references are not editable here; resolution owns them
        orm = session.get(CafeORM, cafe_id)
        if not orm:
            raise CafeNotFound(f"Cafe not found: {cafe_id}")
        _apply_editable_fields(orm, cafe)
        orm.updated_at = datetime.utcnow()
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _cafe_from_orm(orm)

    def delete_cafe(self, session: Session, cafe_id: str) -> None:
        orm = session.get(CafeORM, cafe_id)
        if not orm:
            raise CafeNotFound(f"Cafe not found: {cafe_id}")
        session.delete(orm)
        session.commit()

    def find_nearby(
        self, session: Session, lat: float, lon: float, radius_km: float
    ) -> List[Tuple[Cafe, float]]:
        """Cafes within radius_km of (lat, lon), nearest first, with distances."""
        dlat = math.degrees(radius_km / EARTH_RADIUS_KM)
        cos_lat = math.cos(math.radians(lat))
        dlon = 180.0 if cos_lat < 1e-6 else min(180.0, dlat / cos_lat)
        rows = (
            session.query(CafeORM)
            .filter(
                CafeORM.lat.isnot(None),
                CafeORM.lon.isnot(None),
                CafeORM.lat.between(lat - dlat, lat + dlat),
            )
            .all()
        )
        center = GeoPoint(lat, lon)
        hits: List[Tuple[Cafe, float]] = []
        for orm in rows:
            # longitude delta taken modulo 360 so windows crossing the antimeridian match
            if dlon < 180.0 and abs(((orm.lon - lon + 180.0) % 360.0) - 180.0) > dlon:
                continue
            distance = haversine_km(center, GeoPoint(orm.lat, orm.lon))
            if distance <= radius_km:
                hits.append((_cafe_from_orm(orm), distance))
        hits.sort(key=lambda pair: pair[1])
        return hits
