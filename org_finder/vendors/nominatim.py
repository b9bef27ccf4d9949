"""Client utilities for the OpenStreetMap Nominatim search API."""

import logging
from typing import Optional

import requests

from org_finder.core.config import Settings, get_settings
from org_finder.core.errors import GeocodingError, LocationNotFoundError
from org_finder.models import Coordinate

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
REQUEST_TIMEOUT = 10


def geocode(location: str, settings: Optional[Settings] = None) -> Coordinate:
    """Resolve a free-text place name to the first candidate's coordinates."""
    query = (location or "").strip()
    if not query:
        raise ValueError("Please enter a location to search.")

    settings = settings or get_settings()
    params = {"format": "json", "limit": 1, "addressdetails": 1, "q": query}
    try:
        response = _SESSION.get(
            settings.nominatim_url,
            params=params,
            headers={"User-Agent": settings.user_agent},
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("geocode failed for %s: %s", query, exc)
        raise GeocodingError(
            "Unable to find location. Please check your internet connection and try again."
        ) from exc

    if not isinstance(payload, list) or not payload:
        logger.info("No geocoding candidates for %s", query)
        raise LocationNotFoundError(
            "Location not found. Please try a different location or be more specific."
        )

    first = payload[0] if isinstance(payload[0], dict) else {}
    try:
        coordinate = Coordinate(lat=float(first["lat"]), lon=float(first["lon"]))
    except (KeyError, TypeError, ValueError) as exc:
        logger.error("geocode returned a malformed candidate for %s: %s", query, first)
        raise GeocodingError("Geocoding service returned an unreadable response.") from exc

    logger.info("Geocoded %s to %.5f,%.5f", query, coordinate.lat, coordinate.lon)
    return coordinate
