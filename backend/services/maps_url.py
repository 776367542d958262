"""
Pattern extraction from long-form Google Maps URLs.

    https://www.google.com/maps/place/Blue+Bottle/@37.7765,-122.4233,17z/data=!4m6!3m5!1s0x8085...:0x1b2c...!8m2...

All helpers take an already resolved URL and never touch the network.
"""
import re
from typing import Optional
from urllib.parse import unquote, urlparse

from domain.models import GeoPoint

FEATURE_ID_RE = re.compile(r"!1s([^!]+)")
PLACE_NAME_RE = re.compile(r"/place/([^/@]+)")
COORDINATES_RE = re.compile(r"@(-?\d+\.\d+),(-?\d+\.\d+)")

CATEGORY_KEYWORDS = (
    ("Cafe", ("cafe", "coffee", "咖啡")),
    ("Restaurant", ("restaurant",)),
    ("Hotel", ("hotel",)),
)


def is_http_url(url: Optional[str]) -> bool:
    if not url or not url.strip():
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def extract_feature_id(url: str) -> Optional[str]:
    """Token after `!1s` up to the next `!`, e.g. `0x31da196ef0f8f641:0x1dd15592bb6ae1ae`."""
    match = FEATURE_ID_RE.search(url)
    if not match:
        return None
    return unquote(match.group(1)) or None


def extract_place_name(url: str) -> Optional[str]:
    match = PLACE_NAME_RE.search(url)
    if not match:
        return None
    name = unquote(match.group(1).replace("+", " ")).strip()
    return name or None


def extract_coordinates(url: str) -> Optional[GeoPoint]:
    match = COORDINATES_RE.search(url)
    if not match:
        return None
    lat, lon = float(match.group(1)), float(match.group(2))
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return GeoPoint(lat=lat, lon=lon)


def guess_category(url: str) -> str:
    lowered = url.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(k in lowered for k in keywords):
            return category
    return "Place"
