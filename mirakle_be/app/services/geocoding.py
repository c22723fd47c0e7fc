"""Reverse geocoding through the Google Geocoding API."""
import logging
from typing import Any, Dict

import httpx

from app.config import get_settings
from app.utils.errors import InternalError

logger = logging.getLogger(__name__)


def reverse_geocode(lat: float, lng: float) -> Dict[str, Any]:
    settings = get_settings()
    try:
        response = httpx.get(
            settings.GEOCODE_API_URL,
            params={"latlng": f"{lat},{lng}", "key": settings.GOOGLE_MAPS_API_KEY},
            timeout=httpx.Timeout(settings.HTTP_TIMEOUT_SECONDS, connect=5.0),
        )
        response.raise_for_status()
        return response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Reverse geocoding for %s,%s failed: %s", lat, lng, e)
        raise InternalError("Reverse geocoding failed") from e
