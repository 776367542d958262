"""
SQLAlchemy ORM models for persistence.
"""
from datetime import datetime
from sqlalchemy import Column, DateTime, Float, Integer, JSON, String

from db import Base


class CafeORM(Base):
    __tablename__ = "cafes"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    lat = Column(Float, nullable=True, index=True)
    lon = Column(Float, nullable=True, index=True)
    features = Column(JSON, nullable=True)
    average_rating = Column(Float, nullable=False, default=0.0)
    total_reviews = Column(Integer, nullable=False, default=0)
    images = Column(JSON, nullable=True)
    website = Column(String, nullable=True)
    opening_hours = Column(JSON, nullable=True)
    # One cafe per provider place; this constraint is what makes resolution race-safe.
    google_place_id = Column(String, nullable=True, unique=True, index=True)
    redbook_id = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class PlaceDetailsORM(Base):
    __tablename__ = "place_details"

    id = Column(Integer, primary_key=True, autoincrement=True)
    place_id = Column(String, nullable=False, unique=True, index=True)
    name = Column(String, nullable=True)
    formatted_address = Column(String, nullable=True)
    lat = Column(Float, nullable=True)
    lon = Column(Float, nullable=True)
    website = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    opening_hours = Column(JSON, nullable=True)
    rating = Column(Float, nullable=True)
    rating_count = Column(Integer, nullable=True)
    raw = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class LinkPlaceORM(Base):
    __tablename__ = "link_places"

    id = Column(String, primary_key=True, index=True)
    feature_id = Column(String, nullable=False, unique=True, index=True)
    name = Column(String, nullable=True)
    address = Column(String, nullable=True)
    lat = Column(Float, nullable=True)
    lon = Column(Float, nullable=True)
    original_sharing_url = Column(String, nullable=True, index=True)
    resolved_full_url = Column(String, nullable=True)
    google_maps_url = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    website = Column(String, nullable=True)
    category = Column(String, nullable=True)
    rating = Column(Float, nullable=True)
    review_count = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
