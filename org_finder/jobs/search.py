"""Run one organization search and optionally write the CSV export."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from org_finder.core.config import Settings, get_settings
from org_finder.core.contact_discovery import ContactPageFinder
from org_finder.core.enrichment import BatchReport, enrich_contact_pages
from org_finder.core.errors import LocationNotFoundError, OrgFinderError, UpstreamServiceError
from org_finder.core.session import SORTABLE_COLUMNS, SearchSession
from org_finder.etl.export import csv_filename, to_csv
from org_finder.etl.sample_data import sample_organizations
from org_finder.etl.transform import process_records
from org_finder.models import Coordinate, OrganizationRecord
from org_finder.vendors import nominatim, overpass

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    location: str
    coordinate: Coordinate
    radius_m: int
    organizations: List[OrganizationRecord]
    report: BatchReport = field(default_factory=BatchReport)
    used_sample_data: bool = False
    published: bool = True

    def to_dict(self) -> dict:
        return {
            "location": self.location,
            "coordinate": {"lat": self.coordinate.lat, "lon": self.coordinate.lon},
            "radius_m": self.radius_m,
            "count": len(self.organizations),
            "used_sample_data": self.used_sample_data,
            "discovery": self.report.summary(),
            "organizations": [organization.to_dict() for organization in self.organizations],
        }


def run_search(
    location: str,
    *,
    radius_km: Optional[int] = None,
    session: Optional[SearchSession] = None,
    settings: Optional[Settings] = None,
    finder: Optional[ContactPageFinder] = None,
    require_contact: Optional[bool] = None,
) -> SearchResult:
    """Geocode, query, filter and enrich; publish into ``session`` if still current."""
    settings = settings or get_settings()
    query = (location or "").strip()
    if not query:
        raise ValueError("Please enter a location to search.")

    radius_m = overpass.radius_km_to_meters(radius_km or settings.default_radius_km)
    if require_contact is None:
        require_contact = settings.require_contact

    session = session or SearchSession()
    token = session.begin_search(query)

    coordinate = nominatim.geocode(query, settings=settings)

    report = BatchReport()
    used_sample_data = False
    try:
        records = overpass.search_venues(coordinate, radius_m, settings=settings)
    except UpstreamServiceError as exc:
        if not settings.sample_fallback:
            raise
        logger.warning("Venue search failed, using sample data: %s", exc)
        organizations = sample_organizations()
        used_sample_data = True
    else:
        organizations = process_records(records, require_contact=require_contact)
        finder = finder or ContactPageFinder(settings=settings)
        report = enrich_contact_pages(
            organizations,
            finder,
            batch_size=settings.discovery_batch_size,
            batch_delay=settings.discovery_batch_delay,
            token=token,
        )

    published = session.publish(token, organizations)
    logger.info(
        "Search for %s finished: organizations=%d sample=%s published=%s",
        query,
        len(organizations),
        used_sample_data,
        published,
    )
    return SearchResult(
        location=query,
        coordinate=coordinate,
        radius_m=radius_m,
        organizations=organizations,
        report=report,
        used_sample_data=used_sample_data,
        published=published,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find arts and cultural organizations near a place")
    parser.add_argument("location", help="Place name, e.g. 'Philadelphia, PA'")
    parser.add_argument(
        "--radius",
        dest="radius_km",
        type=int,
        default=get_settings().default_radius_km,
        help="Search radius in kilometres",
    )
    parser.add_argument("--output", dest="output", help="CSV path (defaults to a dated filename)")
    parser.add_argument("--sort", dest="sort", choices=SORTABLE_COLUMNS, help="Column to sort by")
    parser.add_argument(
        "--allow-contactless",
        dest="allow_contactless",
        action="store_true",
        help="Keep organizations without any contact channel",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    session = SearchSession()
    try:
        result = run_search(
            args.location,
            radius_km=args.radius_km,
            session=session,
            require_contact=False if args.allow_contactless else None,
        )
    except LocationNotFoundError as exc:
        logger.error("%s", exc)
        return 2
    except (OrgFinderError, ValueError) as exc:
        logger.error("Search failed: %s", exc)
        return 1

    if args.sort:
        session.sort(args.sort)

    output = Path(args.output or csv_filename(result.location))
    output.write_text(to_csv(session.results), encoding="utf-8")
    logger.info("Wrote %d organizations to %s", len(session.results), output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
