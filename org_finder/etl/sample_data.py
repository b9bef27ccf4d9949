"""Known-good demonstration records used when the live venue query fails."""

import random
from typing import List, Optional

from org_finder.models import Coordinate, OrganizationRecord, OrganizationType

SAMPLE_CENTER = Coordinate(lat=39.9526, lon=-75.1652)
JITTER_DEGREES = 0.1

SAMPLE_ORGANIZATIONS = (
    ("Philadelphia Museum of Art", "https://www.philamuseum.org", "info@philamuseum.org", OrganizationType.MUSEUM),
    ("Mural Arts Philadelphia", "https://www.muralarts.org", "info@muralarts.org", OrganizationType.ARTS_CENTRE),
    ("Pennsylvania Academy of the Fine Arts", "https://www.pafa.org", "admissions@pafa.org", OrganizationType.ART_SCHOOL),
    ("Morris Arboretum & Gardens", "https://www.morrisarboretum.org", "info@morrisarboretum.org", OrganizationType.BOTANICAL_GARDEN),
    ("Academy of Natural Sciences", "https://www.ansp.org", "education@ansp.org", OrganizationType.NATURAL_HISTORY_MUSEUM),
    ("Barnes Foundation", "https://www.barnesfoundation.org", "info@barnesfoundation.org", OrganizationType.ART_MUSEUM),
    ("Philadelphia Zoo", "https://www.philadelphiazoo.org", "info@philadelphiazoo.org", OrganizationType.ZOO),
)


def sample_organizations(rng: Optional[random.Random] = None) -> List[OrganizationRecord]:
    """Return fresh sample records scattered around central Philadelphia."""
    rng = rng or random.Random()
    records = []
    for name, website, email, org_type in SAMPLE_ORGANIZATIONS:
        records.append(
            OrganizationRecord(
                name=name,
                type=org_type,
                website=website,
                email=email,
                lat=SAMPLE_CENTER.lat + (rng.random() - 0.5) * JITTER_DEGREES,
                lon=SAMPLE_CENTER.lon + (rng.random() - 0.5) * JITTER_DEGREES,
            )
        )
    return records
