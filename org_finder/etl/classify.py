"""Rule tables that exclude irrelevant venues and map tags to organization types."""

import logging
from typing import Callable, Mapping, Optional, Sequence, Tuple

from org_finder.models import OrganizationType

logger = logging.getLogger(__name__)

Tags = Mapping[str, str]

# Checked in order; the first category whose value is listed wins.
TYPE_TABLE: Sequence[Tuple[str, Mapping[str, OrganizationType]]] = (
    (
        "tourism",
        {
            "gallery": OrganizationType.ART_GALLERY,
            "museum": OrganizationType.MUSEUM,
            "zoo": OrganizationType.ZOO,
            "aquarium": OrganizationType.AQUARIUM,
        },
    ),
    (
        "amenity",
        {
            "arts_centre": OrganizationType.ARTS_CENTRE,
            "library": OrganizationType.LIBRARY,
            "theatre": OrganizationType.THEATRE,
            "music_venue": OrganizationType.MUSIC_VENUE,
            "concert_hall": OrganizationType.CONCERT_HALL,
            "community_centre": OrganizationType.COMMUNITY_ARTS_CENTRE,
            "studio": OrganizationType.STUDIO,
        },
    ),
    (
        "historic",
        {
            "museum": OrganizationType.HISTORICAL_MUSEUM,
            "heritage": OrganizationType.HERITAGE_SITE,
            "archaeological_site": OrganizationType.ARCHAEOLOGICAL_SITE,
        },
    ),
    (
        "craft",
        {
            "pottery": OrganizationType.POTTERY_STUDIO,
            "sculptor": OrganizationType.SCULPTURE_STUDIO,
            "artist": OrganizationType.ARTIST_STUDIO,
        },
    ),
)

# Leisure, garden and wellness cases that need more than one key.
SPECIAL_CASES: Sequence[Tuple[Callable[[Tags], bool], OrganizationType]] = (
    (lambda tags: tags.get("garden:type") == "botanical", OrganizationType.BOTANICAL_GARDEN),
    (lambda tags: tags.get("leisure") == "nature_reserve", OrganizationType.NATURE_CENTRE),
    (lambda tags: tags.get("leisure") == "wildlife_park", OrganizationType.WILDLIFE_PARK),
    (lambda tags: tags.get("leisure") == "dance", OrganizationType.DANCE_STUDIO),
    (lambda tags: tags.get("sport") == "yoga", OrganizationType.YOGA_STUDIO),
    (
        lambda tags: tags.get("amenity") == "spa" or tags.get("healthcare") == "alternative",
        OrganizationType.WELLNESS_CENTRE,
    ),
    (lambda tags: bool(tags.get("cultural")), OrganizationType.CULTURAL_CENTRE),
)

GENERIC_LEISURE = {"playground", "sports_centre", "pitch", "stadium", "fitness_centre", "track"}
EDUCATION_AMENITIES = {"university", "college", "school", "kindergarten"}
NIGHTLIFE_AMENITIES = {"bar", "pub", "nightclub", "biergarten"}
COMMERCIAL_AMENITIES = {"parking", "marketplace", "fast_food", "restaurant", "cafe"}
COMMERCIAL_BUILDINGS = {"retail", "commercial", "university", "college", "school"}
EXCLUDED_NAME_KEYWORDS = (
    "university",
    "college",
    "concert",
    "symphony",
    "orchestra",
    "retail",
    "outlet",
    "mall",
)


def _is_generic_park(tags: Tags, name: str) -> bool:
    return tags.get("leisure") == "park" and not (
        tags.get("garden:type") or tags.get("attraction") or tags.get("historic")
    )


def _is_sports_or_parking(tags: Tags, name: str) -> bool:
    return tags.get("leisure") in GENERIC_LEISURE or tags.get("amenity") == "parking"


def _is_education(tags: Tags, name: str) -> bool:
    return tags.get("amenity") in EDUCATION_AMENITIES


def _is_commercial(tags: Tags, name: str) -> bool:
    return (
        bool(tags.get("shop"))
        or tags.get("amenity") in COMMERCIAL_AMENITIES
        or tags.get("building") in COMMERCIAL_BUILDINGS
    )


def _is_nightlife(tags: Tags, name: str) -> bool:
    return tags.get("amenity") in NIGHTLIFE_AMENITIES


def _has_excluded_keyword(tags: Tags, name: str) -> bool:
    lowered = (name or "").lower()
    return any(keyword in lowered for keyword in EXCLUDED_NAME_KEYWORDS)


EXCLUSION_RULES: Sequence[Tuple[str, Callable[[Tags, str], bool]]] = (
    ("generic_park", _is_generic_park),
    ("sports_or_parking", _is_sports_or_parking),
    ("education", _is_education),
    ("commercial", _is_commercial),
    ("nightlife", _is_nightlife),
    ("excluded_keyword", _has_excluded_keyword),
)


def exclusion_reason(tags: Tags, name: str = "") -> Optional[str]:
    """Return the name of the first exclusion rule matching the record, if any."""
    for reason, predicate in EXCLUSION_RULES:
        if predicate(tags, name):
            return reason
    return None


def is_excluded(tags: Tags, name: str = "") -> bool:
    return exclusion_reason(tags, name) is not None


def classify(tags: Tags) -> OrganizationType:
    """Map a tag set onto the closed organization type enumeration."""
    for category, mapping in TYPE_TABLE:
        value = tags.get(category)
        if isinstance(value, str) and value in mapping:
            return mapping[value]

    for predicate, org_type in SPECIAL_CASES:
        if predicate(tags):
            return org_type

    return OrganizationType.CULTURAL_ORGANIZATION
