"""
Google Places (New) client: text search for a place id and place detail fetch.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from domain.errors import IdentifierNotFound, LookupUnavailable
from domain.models import GeoPoint, ProviderPlace
from services.http import request_with_retry
from settings import settings

SEARCH_FIELD_MASK = "places.id"
DETAILS_FIELD_MASK = ",".join(
    [
        "id",
        "displayName",
        "formattedAddress",
        "location",
        "websiteUri",
        "nationalPhoneNumber",
        "internationalPhoneNumber",
        "regularOpeningHours",
        "rating",
        "userRatingCount",
    ]
)


def _as_float(value: Any) -> Optional[float]:
    try:
        return None if value is None else float(value)
    except (TypeError, ValueError):
        return None


def _as_int(value: Any) -> Optional[int]:
    try:
        return None if value is None else int(value)
    except (TypeError, ValueError):
        return None


def _opening_hours(lines: Any) -> Optional[Dict[str, str]]:
    """Turn ["Monday: 8:00 AM – 5:00 PM", ...] into {"Monday": "8:00 AM – 5:00 PM"}."""
    if not lines:
        return None
    hours: Dict[str, str] = {}
    for line in lines:
        if not isinstance(line, str):
            continue
        day, sep, text = line.partition(":")
        if sep:
            hours[day.strip()] = text.strip()
        else:
            hours[line.strip()] = ""
    return hours or None


def place_from_payload(place_id: str, payload: Dict[str, Any]) -> ProviderPlace:
    """
    Map a Places detail payload to a ProviderPlace.

    Accepts the Places API (New) shape (displayName/location/regularOpeningHours)
    and the legacy shape (name/geometry/opening_hours) so cached raw payloads
    from either API can be re-read.
    """
    display = payload.get("displayName")
    name = display.get("text") if isinstance(display, dict) else display
    if not name and "displayName" not in payload:
        name = payload.get("name")

    location = None
    loc = payload.get("location")
    if isinstance(loc, dict):
        lat, lon = _as_float(loc.get("latitude")), _as_float(loc.get("longitude"))
    else:
        geo = (payload.get("geometry") or {}).get("location") or {}
        lat, lon = _as_float(geo.get("lat")), _as_float(geo.get("lng"))
    if lat is not None and lon is not None:
        location = GeoPoint(lat=lat, lon=lon)

    hours_block = payload.get("regularOpeningHours") or payload.get("opening_hours") or {}
    weekday_lines = hours_block.get("weekdayDescriptions") or hours_block.get("weekday_text")

    rating = _as_float(payload.get("rating"))
    if rating is not None and not 0.0 <= rating <= 5.0:
        rating = None
    rating_count = _as_int(payload.get("userRatingCount", payload.get("user_ratings_total")))
    if rating_count is not None and rating_count < 0:
        rating_count = None

    return ProviderPlace(
        place_id=place_id,
        name=name,
        formatted_address=payload.get("formattedAddress") or payload.get("formatted_address"),
        location=location,
        website=payload.get("websiteUri") or payload.get("website"),
        phone=(
            payload.get("nationalPhoneNumber")
            or payload.get("internationalPhoneNumber")
            or payload.get("formatted_phone_number")
        ),
        opening_hours=_opening_hours(weekday_lines),
        rating=rating,
        rating_count=rating_count,
        raw=dict(payload),
    )


class GooglePlacesClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        language_code: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GOOGLE_PLACES_API_KEY
        self.base_url = (base_url or settings.GOOGLE_PLACES_BASE_URL).rstrip("/")
        self.language_code = language_code or settings.PLACES_LANGUAGE_CODE
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def _headers(self, field_mask: str) -> Dict[str, str]:
        if not self.api_key:
            raise LookupUnavailable("GOOGLE_PLACES_API_KEY is not configured")
        return {
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": field_mask,
            "Content-Type": "application/json",
        }

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return request_with_retry(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise LookupUnavailable(f"Places request failed: {exc.__class__.__name__}") from exc

    def find_place_id_from_text(self, query: str) -> Optional[str]:
        body: Dict[str, Any] = {"textQuery": query}
        if self.language_code:
            body["languageCode"] = self.language_code
        resp = self._send(
            "POST",
            f"{self.base_url}/places:searchText",
            json=body,
            headers=self._headers(SEARCH_FIELD_MASK),
        )
        if resp.status_code != 200:
            self.logger.error("Places text search failed status=%d query=%r", resp.status_code, query)
            raise LookupUnavailable(f"Places text search returned {resp.status_code}")
        try:
            places = resp.json().get("places") or []
        except ValueError as exc:
            raise LookupUnavailable("Places text search returned invalid JSON") from exc
        if not places:
            self.logger.warning("Text search returned no places for query: %s", query)
            return None
        place_id = places[0].get("id")
        self.logger.info("Found place id via text search: %s", place_id)
        return place_id or None

    def get_place_details(self, place_id: str) -> ProviderPlace:
        params = {"languageCode": self.language_code} if self.language_code else None
        resp = self._send(
            "GET",
            f"{self.base_url}/places/{place_id}",
            params=params,
            headers=self._headers(DETAILS_FIELD_MASK),
        )
        if resp.status_code in (400, 404):
            raise IdentifierNotFound(f"Place id not found at provider: {place_id}")
        if resp.status_code != 200:
            self.logger.error("Place details failed status=%d place_id=%s", resp.status_code, place_id)
            raise LookupUnavailable(f"Place details returned {resp.status_code}")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise LookupUnavailable("Place details returned invalid JSON") from exc
        return place_from_payload(place_id, payload or {})


_default_places_client: Optional[GooglePlacesClient] = None


def get_default_places_client() -> GooglePlacesClient:
    global _default_places_client
    if _default_places_client is None:
        _default_places_client = GooglePlacesClient()
    return _default_places_client
