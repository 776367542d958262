"""
Follows shared Google Maps short links (maps.app.goo.gl, goo.gl/maps) to the long URL.
"""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urljoin

import requests

from services.http import request_with_retry
from settings import settings

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; coffeemode-link-resolver/0.1)",
}


class RedirectFollower:
    """
    Resolve a link by reading Location headers hop by hop.

    A HEAD request is tried first; if it carries no redirect, a GET is tried.
    When neither redirects the original URL is returned, since a long-form
    Maps URL is valid input on its own. Transport errors also fall back to
    the last URL reached.
    """

    def __init__(self, max_redirects: Optional[int] = None, timeout: Optional[float] = None):
        self.max_redirects = settings.LINK_MAX_REDIRECTS if max_redirects is None else max_redirects
        self.timeout = timeout

    def _location(self, method: str, url: str) -> Optional[str]:
        resp = request_with_retry(
            method,
            url,
            timeout=self.timeout,
            headers=BROWSER_HEADERS,
            allow_redirects=False,
        )
        location = resp.headers.get("Location")
        if not location:
            return None
        return urljoin(url, location)

    def follow(self, url: str) -> str:
        current = url
        try:
            for hop in range(self.max_redirects):
                location = self._location("HEAD", current)
                if location is None and hop == 0:
                    location = self._location("GET", current)
                if location is None or location == current:
                    break
                logger.debug("redirect hop %d: %s -> %s", hop + 1, current, location)
                current = location
        except requests.RequestException as exc:
            logger.warning("Failed to follow redirects for URL: %s, using %s (%s)", url, current, exc)
        return current


_default_follower: Optional[RedirectFollower] = None


def get_default_link_follower() -> RedirectFollower:
    global _default_follower
    if _default_follower is None:
        _default_follower = RedirectFollower()
    return _default_follower
