"""Core data models shared by the organization search pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


class OrganizationType(str, Enum):
    MUSEUM = "Museum"
    ART_GALLERY = "Art Gallery"
    ARTS_CENTRE = "Arts Centre"
    LIBRARY = "Library"
    THEATRE = "Theatre"
    MUSIC_VENUE = "Music Venue"
    CONCERT_HALL = "Concert Hall"
    COMMUNITY_ARTS_CENTRE = "Community Arts Centre"
    STUDIO = "Studio"
    ZOO = "Zoo"
    AQUARIUM = "Aquarium"
    HISTORICAL_MUSEUM = "Historical Museum"
    HERITAGE_SITE = "Heritage Site"
    ARCHAEOLOGICAL_SITE = "Archaeological Site"
    POTTERY_STUDIO = "Pottery Studio"
    SCULPTURE_STUDIO = "Sculpture Studio"
    ARTIST_STUDIO = "Artist Studio"
    BOTANICAL_GARDEN = "Botanical Garden"
    NATURE_CENTRE = "Nature Centre"
    WILDLIFE_PARK = "Wildlife Park"
    DANCE_STUDIO = "Dance Studio"
    YOGA_STUDIO = "Yoga Studio"
    WELLNESS_CENTRE = "Wellness Centre"
    CULTURAL_CENTRE = "Cultural Centre"
    ART_MUSEUM = "Art Museum"
    NATURAL_HISTORY_MUSEUM = "Natural History Museum"
    ART_SCHOOL = "Art School"
    CULTURAL_ORGANIZATION = "Cultural Organization"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float


@dataclass(frozen=True)
class RawVenueRecord:
    """Read-only snapshot of an Overpass element and its tags."""

    id: Optional[int] = None
    element_type: str = "node"
    lat: Optional[float] = None
    lon: Optional[float] = None
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))

    @classmethod
    def from_element(cls, element: Dict[str, Any]) -> "RawVenueRecord":
        raw_tags = element.get("tags")
        tags: Dict[str, str] = {}
        if isinstance(raw_tags, dict):
            tags = {
                key: value
                for key, value in raw_tags.items()
                if isinstance(key, str) and isinstance(value, str)
            }

        center = element.get("center") if isinstance(element.get("center"), dict) else {}
        lat = _safe_float(element.get("lat"))
        lon = _safe_float(element.get("lon"))
        if lat is None or lon is None:
            lat = _safe_float(center.get("lat"))
            lon = _safe_float(center.get("lon"))

        element_id = element.get("id")
        return cls(
            id=element_id if isinstance(element_id, int) else None,
            element_type=str(element.get("type") or "node"),
            lat=lat,
            lon=lon,
            tags=tags,
        )


@dataclass(slots=True)
class OrganizationRecord:
    """Normalized organization row produced by the classification pipeline."""

    name: str
    type: OrganizationType = OrganizationType.CULTURAL_ORGANIZATION
    website: str = ""
    email: str = ""
    phone: str = ""
    contact_page: str = ""
    address: str = ""
    lat: float = 0.0
    lon: float = 0.0

    @property
    def contact(self) -> str:
        """Primary direct contact, preferring email over phone."""
        return self.email or self.phone

    @property
    def needs_contact_discovery(self) -> bool:
        return bool(self.website) and not self.contact and not self.contact_page

    def assign_contact_page(self, url: str) -> None:
        if self.contact_page:
            raise ValueError(f"contact page already assigned for {self.name}")
        self.contact_page = url

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "website": self.website,
            "email": self.email,
            "phone": self.phone,
            "contact": self.contact,
            "contact_page": self.contact_page,
            "address": self.address,
            "lat": self.lat,
            "lon": self.lon,
        }


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None
