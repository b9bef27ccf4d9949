"""Utilities for transforming raw Overpass records into organization rows."""

import logging
from typing import Iterable, List, Set

from org_finder.etl import tags as tag_access
from org_finder.etl.classify import classify, exclusion_reason
from org_finder.models import OrganizationRecord, RawVenueRecord

logger = logging.getLogger(__name__)


def to_organization(record: RawVenueRecord) -> OrganizationRecord:
    tags = record.tags
    return OrganizationRecord(
        name=tag_access.name_of(tags),
        type=classify(tags),
        website=tag_access.website_of(tags),
        email=tag_access.email_of(tags),
        phone=tag_access.phone_of(tags),
        address=tag_access.address_of(tags),
        lat=record.lat if record.lat is not None else 0.0,
        lon=record.lon if record.lon is not None else 0.0,
    )


def process_records(
    records: Iterable[RawVenueRecord],
    *,
    require_contact: bool = True,
) -> List[OrganizationRecord]:
    """Deduplicate, filter and classify records, preserving arrival order.

    A name is only marked as seen once its record has been retained, so a
    contact-less duplicate never shadows a later one that passes every gate.
    """
    organizations: List[OrganizationRecord] = []
    seen_names: Set[str] = set()
    skipped = {"duplicate": 0, "excluded": 0, "no_contact": 0}

    for record in records:
        name = tag_access.name_of(record.tags)
        normalized_name = tag_access.normalize_name(name)
        if normalized_name in seen_names:
            skipped["duplicate"] += 1
            logger.debug("Skipping duplicate %s", name)
            continue

        reason = exclusion_reason(record.tags, name)
        if reason:
            skipped["excluded"] += 1
            logger.debug("Skipping %s: %s", name, reason)
            continue

        organization = to_organization(record)
        if require_contact and not tag_access.is_valid_contact(organization.contact, organization.website):
            skipped["no_contact"] += 1
            logger.debug("Skipping %s without usable contact information", name)
            continue

        seen_names.add(normalized_name)
        organizations.append(organization)

    logger.info(
        "Retained %d organizations (duplicates=%d excluded=%d no_contact=%d)",
        len(organizations),
        skipped["duplicate"],
        skipped["excluded"],
        skipped["no_contact"],
    )
    return organizations
