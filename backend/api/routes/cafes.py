"""
Cafes API routes.
"""
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from api.envelope import Envelope, success
from db import SessionLocal
from domain.errors import CafeNotFound, DuplicateCafeReference, DuplicateProviderReference
from domain.models import Cafe, CafeFeatures, CafeImage, ExternalReferences, GeoPoint
from repositories import CafesRepository

router = APIRouter()
cafes_repo = CafesRepository()


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocationSchema(_CamelModel):
    type: Literal["Point"] = "Point"
    coordinates: List[float]  # [longitude, latitude]

    @field_validator("coordinates")
    @classmethod
    def _lon_lat(cls, value: List[float]) -> List[float]:
        if len(value) != 2:
            raise ValueError("coordinates must be [longitude, latitude]")
        lon, lat = value
        if not (-180.0 <= lon <= 180.0 and -90.0 <= lat <= 90.0):
            raise ValueError("coordinates out of range")
        return value

    def to_point(self) -> GeoPoint:
        return GeoPoint(lat=self.coordinates[1], lon=self.coordinates[0])


class FeaturesSchema(_CamelModel):
    wifi_available: Optional[bool] = None
    outlets_available: Optional[bool] = None
    quietness_level: Optional[Literal["quiet", "moderate", "noisy"]] = None
    temperature: Optional[Literal["cold", "just right", "warm"]] = None
    unlimited_duration: Optional[bool] = None
    limit_duration_minutes: Optional[int] = Field(default=None, ge=0)
    google_rating: Optional[float] = Field(default=None, ge=0.0, le=5.0)


class ImageSchema(_CamelModel):
    url: str
    caption: Optional[str] = None


class ExternalReferencesSchema(_CamelModel):
    google_place: Optional[str] = None
    redbook_id: Optional[str] = None


class CafeUpdate(_CamelModel):
    name: str = Field(min_length=1)
    location: LocationSchema
    address: str = Field(min_length=1)
    features: Optional[FeaturesSchema] = None
    average_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    total_reviews: int = Field(default=0, ge=0)
    images: List[ImageSchema] = Field(default_factory=list)
    website: Optional[str] = None
    opening_hours: Optional[Dict[str, str]] = None

    def to_domain(self) -> Cafe:
        return Cafe(
            name=self.name.strip(),
            address=self.address.strip(),
            location=self.location.to_point(),
            features=CafeFeatures(**self.features.model_dump()) if self.features else None,
            average_rating=self.average_rating,
            total_reviews=self.total_reviews,
            images=[CafeImage(url=i.url, caption=i.caption) for i in self.images],
            website=self.website,
            opening_hours=self.opening_hours,
        )


class CafeCreate(CafeUpdate):
    external_references: Optional[ExternalReferencesSchema] = None

    def to_domain(self) -> Cafe:
        cafe = super().to_domain()
        if self.external_references:
            cafe.external_references = ExternalReferences(
                google_place=self.external_references.google_place or None,
                redbook_id=self.external_references.redbook_id or None,
            )
        return cafe


@router.post("", response_model=Envelope, status_code=201)
def create_cafe(data: CafeCreate):
    """Create a cafe from user input."""
    with SessionLocal() as session:
        try:
            cafe = cafes_repo.create_cafe(session, data.to_domain())
        except DuplicateProviderReference as exc:
            raise DuplicateCafeReference(str(exc)) from exc
    body = success(cafe.to_dict(), message="Cafe created successfully", code=201)
    return JSONResponse(status_code=201, content=body.model_dump())


@router.get("", response_model=Envelope)
def list_cafes():
    with SessionLocal() as session:
        cafes = cafes_repo.list_cafes(session)
    return success([c.to_dict() for c in cafes])


@router.get("/nearby", response_model=Envelope)
def find_nearby_cafes(
    latitude: float = Query(ge=-90.0, le=90.0),
    longitude: float = Query(ge=-180.0, le=180.0),
    radius_km: float = Query(default=3.0, gt=0.0, le=100.0),
):
    """Cafes within radius_km of a point, nearest first."""
    with SessionLocal() as session:
        hits = cafes_repo.find_nearby(session, latitude, longitude, radius_km)
    return success([{**cafe.to_dict(), "distance_km": round(dist, 3)} for cafe, dist in hits])


@router.get("/{cafe_id}", response_model=Envelope)
def get_cafe(cafe_id: str):
    with SessionLocal() as session:
        cafe = cafes_repo.get_cafe(session, cafe_id)
    if not cafe:
        raise CafeNotFound(f"Cafe not found: {cafe_id}")
    return success(cafe.to_dict())


@router.put("/{cafe_id}", response_model=Envelope)
def update_cafe(cafe_id: str, data: CafeUpdate):
    with SessionLocal() as session:
        cafe = cafes_repo.update_cafe(session, cafe_id, data.to_domain())
    return success(cafe.to_dict(), message="Cafe updated successfully")


@router.delete("/{cafe_id}", response_model=Envelope)
def delete_cafe(cafe_id: str):
    with SessionLocal() as session:
        cafes_repo.delete_cafe(session, cafe_id)
    return success(message="Cafe deleted successfully")
