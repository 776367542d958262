"""
Core domain models for the cafe directory.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid


def new_id() -> str:
    """Store-side identifier for new records."""
    return uuid.uuid4().hex


class LinkSource(str, Enum):
    """Which path a shared-link resolution took."""
    ENTITY_HIT = "entity_hit"
    CACHE_HIT = "cache_hit"
    FRESH_PARSE = "fresh_parse"


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float

    def to_geojson(self) -> Dict[str, Any]:
        # GeoJSON orders coordinates [longitude, latitude]
        return {"type": "Point", "coordinates": [self.lon, self.lat]}


@dataclass(frozen=True)
class ProviderPlace:
    """
    Snapshot of a place as returned by the Places provider.

    Written once to the details cache and never changed afterwards.
    `raw` keeps the provider payload as plain JSON so new provider fields
    survive without schema changes.
    """
    place_id: str
    name: Optional[str] = None
    formatted_address: Optional[str] = None
    location: Optional[GeoPoint] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    opening_hours: Optional[Dict[str, str]] = None  # "Monday" -> "8:00 AM – 5:00 PM"
    rating: Optional[float] = None
    rating_count: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CafeFeatures:
    wifi_available: Optional[bool] = None
    outlets_available: Optional[bool] = None
    quietness_level: Optional[str] = None  # "quiet", "moderate", "noisy"
    temperature: Optional[str] = None  # "cold", "just right", "warm"
    unlimited_duration: Optional[bool] = None
    limit_duration_minutes: Optional[int] = None
    google_rating: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wifi_available": self.wifi_available,
            "outlets_available": self.outlets_available,
            "quietness_level": self.quietness_level,
            "temperature": self.temperature,
            "unlimited_duration": self.unlimited_duration,
            "limit_duration_minutes": self.limit_duration_minutes,
            "google_rating": self.google_rating,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["CafeFeatures"]:
        if data is None:
            return None
        return cls(
            wifi_available=data.get("wifi_available"),
            outlets_available=data.get("outlets_available"),
            quietness_level=data.get("quietness_level"),
            temperature=data.get("temperature"),
            unlimited_duration=data.get("unlimited_duration"),
            limit_duration_minutes=data.get("limit_duration_minutes"),
            google_rating=data.get("google_rating"),
        )


@dataclass
class CafeImage:
    url: str
    caption: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "caption": self.caption}


@dataclass
class ExternalReferences:
    google_place: Optional[str] = None  # Places id or Maps feature id
    redbook_id: Optional[str] = None  # RedNote POI id


@dataclass
class Cafe:
    """
    A cafe in our own namespace.

    At most one cafe may reference a given google_place identifier.
    """
    name: str
    id: Optional[str] = None
    address: Optional[str] = None
    location: Optional[GeoPoint] = None
    features: Optional[CafeFeatures] = None
    average_rating: float = 0.0
    total_reviews: int = 0
    images: List[CafeImage] = field(default_factory=list)
    website: Optional[str] = None
    opening_hours: Optional[Dict[str, str]] = None
    external_references: Optional[ExternalReferences] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def google_place(self) -> Optional[str]:
        refs = self.external_references
        return refs.google_place if refs else None

    def to_dict(self) -> Dict[str, Any]:
        refs = self.external_references
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "location": self.location.to_geojson() if self.location else None,
            "features": self.features.to_dict() if self.features else None,
            "average_rating": self.average_rating,
            "total_reviews": self.total_reviews,
            "images": [img.to_dict() for img in self.images],
            "website": self.website,
            "opening_hours": self.opening_hours,
            "external_references": (
                {"google_place": refs.google_place, "redbook_id": refs.redbook_id}
                if refs
                else None
            ),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class LinkPlace:
    """Place data recovered from a shared Google Maps link."""
    feature_id: str
    id: Optional[str] = None
    name: Optional[str] = None
    address: Optional[str] = None
    location: Optional[GeoPoint] = None
    original_sharing_url: Optional[str] = None
    resolved_full_url: Optional[str] = None
    google_maps_url: Optional[str] = None
    phone_number: Optional[str] = None
    website: Optional[str] = None
    category: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "feature_id": self.feature_id,
            "address": self.address,
            "latitude": self.location.lat if self.location else None,
            "longitude": self.location.lon if self.location else None,
            "original_sharing_url": self.original_sharing_url,
            "resolved_full_url": self.resolved_full_url,
            "google_maps_url": self.google_maps_url,
            "phone_number": self.phone_number,
            "website": self.website,
            "category": self.category,
            "rating": self.rating,
            "review_count": self.review_count,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class ResolutionResult:
    place_id: str
    skipped_details: bool  # True when details came from the cache
    cafe: Cafe

    def to_dict(self) -> Dict[str, Any]:
        return {
            "place_id": self.place_id,
            "skipped_details": self.skipped_details,
            "cafe": self.cafe.to_dict(),
        }


@dataclass
class LinkResolutionResult:
    feature_id: str
    link_place: LinkPlace
    source: LinkSource
    cafe: Optional[Cafe] = None

    @property
    def skipped_details(self) -> bool:
        return self.source != LinkSource.FRESH_PARSE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "feature_id": self.feature_id,
            "source": self.source.value,
            "skipped_details": self.skipped_details,
            "cafe": self.cafe.to_dict() if self.cafe else None,
            "google_maps_data": self.link_place.to_dict(),
        }
