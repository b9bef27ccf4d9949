"""Client utilities for the Overpass venue database."""

import logging
import time
from typing import List, Optional, Sequence, Tuple

import requests

from org_finder.core.config import Settings, get_settings
from org_finder.core.errors import OverpassError
from org_finder.models import Coordinate, RawVenueRecord

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
REQUEST_TIMEOUT = 30
QUERY_TIMEOUT_SECONDS = 20

# Each entry renders to one tag filter; every filter is emitted for nodes and ways.
CATEGORY_PREDICATES: Sequence[Tuple[str, ...]] = (
    ('["tourism"~"^(gallery|museum|zoo|aquarium)$"]',),
    ('["amenity"~"^(arts_centre|library|theatre|music_venue|concert_hall|community_centre|studio)$"]',),
    ('["historic"~"^(museum|heritage|archaeological_site)$"]',),
    ('["leisure"="garden"]', '["garden:type"="botanical"]'),
    ('["craft"~"^(pottery|artist|sculptor)$"]',),
)
ELEMENT_KINDS = ("node", "way")


def radius_km_to_meters(radius_km: int) -> int:
    if radius_km <= 0:
        raise ValueError("radius must be positive")
    return int(radius_km) * 1000


def build_overpass_query(coordinate: Coordinate, radius_m: int) -> str:
    around = f"(around:{int(radius_m)},{coordinate.lat},{coordinate.lon})"
    lines = [f"[out:json][timeout:{QUERY_TIMEOUT_SECONDS}];", "("]
    for kind in ELEMENT_KINDS:
        for predicate in CATEGORY_PREDICATES:
            lines.append(f"  {kind}{''.join(predicate)}{around};")
    lines.append(");")
    lines.append("out center;")
    return "\n".join(lines)


def search_venues(
    coordinate: Coordinate,
    radius_m: int,
    settings: Optional[Settings] = None,
) -> List[RawVenueRecord]:
    """Run the catalog query once and return the raw venue records in response order."""
    settings = settings or get_settings()
    query = build_overpass_query(coordinate, radius_m)

    if settings.overpass_delay_seconds > 0:
        time.sleep(settings.overpass_delay_seconds)

    logger.info(
        "Querying Overpass around %.5f,%.5f radius=%dm", coordinate.lat, coordinate.lon, radius_m
    )
    try:
        response = _SESSION.post(
            settings.overpass_url,
            data={"data": query},
            headers={"User-Agent": settings.user_agent},
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Overpass query failed: %s", exc)
        raise OverpassError("Unable to search for arts organizations. Please try again.") from exc

    if not isinstance(payload, dict):
        raise OverpassError("Overpass returned an unexpected payload.")

    elements = payload.get("elements")
    if not isinstance(elements, list):
        logger.warning("Overpass response missing elements list. keys=%s", list(payload.keys())[:10])
        return []

    records = [RawVenueRecord.from_element(element) for element in elements if isinstance(element, dict)]
    logger.info("Fetched %d venue records", len(records))
    return records
