"""Shared HTTP session for outbound provider calls, with retry on transient failures."""

from __future__ import annotations

import logging
import random
import time
from typing import Any

import requests

from settings import settings

logger = logging.getLogger(__name__)
_session = requests.Session()

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def _backoff_delay(attempt: int, base_delay: float) -> float:
    delay = base_delay * (2**attempt)
    return delay + random.uniform(0, delay * 0.25)


def request_with_retry(
    method: str,
    url: str,
    *,
    timeout: float | None = None,
    max_attempts: int | None = None,
    base_delay: float | None = None,
    **kwargs: Any,
) -> requests.Response:
    """Send a request, retrying timeouts, connection errors and 429/5xx with exponential backoff.

    Non-retryable responses (including 4xx) are returned to the caller as-is.
    The last retryable response is also returned rather than raised so callers
    can classify it.
    """
    timeout = settings.PLACES_HTTP_TIMEOUT if timeout is None else timeout
    attempts = max(1, settings.PLACES_HTTP_MAX_ATTEMPTS if max_attempts is None else max_attempts)
    base = settings.PLACES_HTTP_BACKOFF if base_delay is None else base_delay

    for attempt in range(attempts):
        is_last = attempt == attempts - 1
        try:
            resp = _session.request(method, url, timeout=timeout, **kwargs)
        except (requests.Timeout, requests.ConnectionError) as exc:
            if is_last:
                raise
            delay = _backoff_delay(attempt, base)
            logger.warning(
                "%s %s failed (%s), retrying in %.2fs (attempt %d/%d)",
                method, url, exc.__class__.__name__, delay, attempt + 1, attempts,
            )
            time.sleep(delay)
            continue

        if resp.status_code not in RETRYABLE_STATUS_CODES or is_last:
            return resp

        delay = _backoff_delay(attempt, base)
        logger.warning(
            "%s %s returned %d, retrying in %.2fs (attempt %d/%d)",
            method, url, resp.status_code, delay, attempt + 1, attempts,
        )
        time.sleep(delay)

    raise RuntimeError("Request failed after all retry attempts")  # pragma: no cover
