"""
Google Maps resolution API routes.
"""
import logging
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from api.envelope import Envelope, success
from db import SessionLocal
from services.link_resolver import LinkResolver
from services.metadata_resolver import MetadataResolver

router = APIRouter()
metadata_resolver = MetadataResolver()
link_resolver = LinkResolver()
logger = logging.getLogger(__name__)


class ResolveLinkRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sharing_url: str = Field(alias="sharingUrl")


class ResolvePlaceRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None  # original link, recorded in logs only


@router.post("/resolve", response_model=Envelope)
def resolve_google_maps_link(data: ResolveLinkRequest):
    """Resolve a shared Google Maps link to link place data and any matching cafe."""
    logger.info("Received request to resolve Google Maps URL: %s", data.sharing_url)
    with SessionLocal() as session:
        result = link_resolver.resolve_from_shared_link(session, data.sharing_url)
    return success(result.to_dict(), message="Google Maps link resolved successfully")


@router.post("/resolve-place", response_model=Envelope)
def resolve_place(data: ResolvePlaceRequest):
    """Resolve link-preview metadata (title/description) to a cafe via Places text search."""
    with SessionLocal() as session:
        result = metadata_resolver.resolve_from_metadata(
            session, data.title, data.description, data.url
        )
    return success(result.to_dict(), message="Place resolved successfully")
