"""Batched contact page enrichment for a search's organization list."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from org_finder.core.contact_discovery import ContactPageFinder
from org_finder.core.errors import DiscoveryError
from org_finder.models import OrganizationRecord

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 5
DEFAULT_BATCH_DELAY = 0.5


class CancellationToken:
    """Per-search flag that stops a superseded search from touching results."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class DiscoveryOutcome:
    organization: OrganizationRecord
    contact_page: str = ""
    error: Optional[DiscoveryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchReport:
    outcomes: List[DiscoveryOutcome] = field(default_factory=list)
    batches: int = 0
    cancelled: bool = False

    @property
    def found(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok and outcome.contact_page)

    @property
    def not_found(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok and not outcome.contact_page)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.ok)

    def summary(self) -> dict:
        return {
            "attempted": len(self.outcomes),
            "found": self.found,
            "not_found": self.not_found,
            "failed": self.failed,
            "batches": self.batches,
            "cancelled": self.cancelled,
        }


def _discover_one(finder: ContactPageFinder, organization: OrganizationRecord) -> DiscoveryOutcome:
    try:
        return DiscoveryOutcome(organization, contact_page=finder.find(organization.website))
    except DiscoveryError as exc:
        logger.warning("Contact discovery failed for %s: %s", organization.name, exc)
        return DiscoveryOutcome(organization, error=exc)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Unexpected contact discovery error for %s: %s", organization.name, exc)
        return DiscoveryOutcome(organization, error=DiscoveryError(str(exc)))


def enrich_contact_pages(
    organizations: Sequence[OrganizationRecord],
    finder: ContactPageFinder,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    batch_delay: float = DEFAULT_BATCH_DELAY,
    token: Optional[CancellationToken] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchReport:
    """Discover contact pages for website-only organizations in throttled batches.

    Every outcome of a batch is collected before the next batch starts. A failed
    lookup resolves to "no contact page" for that organization only.
    """
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")

    token = token or CancellationToken()
    pending = [organization for organization in organizations if organization.needs_contact_discovery]
    report = BatchReport()
    if not pending:
        return report

    logger.info("Discovering contact pages for %d organizations", len(pending))
    with ThreadPoolExecutor(max_workers=batch_size) as executor:
        for start in range(0, len(pending), batch_size):
            if token.cancelled:
                report.cancelled = True
                break

            batch = pending[start : start + batch_size]
            futures = [executor.submit(_discover_one, finder, organization) for organization in batch]
            outcomes = [future.result() for future in futures]
            report.batches += 1

            if token.cancelled:
                report.cancelled = True
                break

            for outcome in outcomes:
                if outcome.ok and outcome.contact_page:
                    outcome.organization.assign_contact_page(outcome.contact_page)
            report.outcomes.extend(outcomes)

            if start + batch_size < len(pending):
                sleep(batch_delay)

    logger.info("Contact discovery summary: %s", report.summary())
    return report
