"""Search-scoped state: current results, sort state and cancellation."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from org_finder.core.enrichment import CancellationToken
from org_finder.etl.export import display_contact
from org_finder.models import OrganizationRecord

logger = logging.getLogger(__name__)

ASCENDING = "asc"
DESCENDING = "desc"

# Columns whose empty values always sort last.
PRESENCE_COLUMNS: Dict[str, Callable[[OrganizationRecord], str]] = {
    "website": lambda org: org.website,
    "contact": display_contact,
    "email": lambda org: org.email,
    "phone": lambda org: org.phone,
    "contact_page": lambda org: org.contact_page,
    "address": lambda org: org.address,
}
PLAIN_COLUMNS: Dict[str, Callable[[OrganizationRecord], str]] = {
    "name": lambda org: org.name,
    "type": lambda org: org.type.value,
}
SORTABLE_COLUMNS = tuple(PLAIN_COLUMNS) + tuple(PRESENCE_COLUMNS)


@dataclass
class SortState:
    column: Optional[str] = None
    direction: str = ASCENDING

    def select(self, column: str) -> "SortState":
        if column == self.column:
            self.direction = DESCENDING if self.direction == ASCENDING else ASCENDING
        else:
            self.column = column
            self.direction = ASCENDING
        return self

    def reset(self) -> None:
        self.column = None
        self.direction = ASCENDING


def sort_records(
    records: Sequence[OrganizationRecord],
    column: str,
    direction: str = ASCENDING,
) -> List[OrganizationRecord]:
    """Stable sort by column; empty values of contact-like columns go last."""
    if column not in SORTABLE_COLUMNS:
        raise ValueError(f"Unknown sort column: {column}")
    if direction not in (ASCENDING, DESCENDING):
        raise ValueError(f"Unknown sort direction: {direction}")

    reverse = direction == DESCENDING
    if column in PLAIN_COLUMNS:
        return sorted(records, key=PLAIN_COLUMNS[column], reverse=reverse)

    getter = PRESENCE_COLUMNS[column]
    present = [record for record in records if getter(record)]
    missing = [record for record in records if not getter(record)]
    return sorted(present, key=getter, reverse=reverse) + missing


class SearchSession:
    """Holds the displayed result list for one consumer.

    Starting a search cancels the previous search's token; only the holder of
    the current token may publish results.
    """

    def __init__(self) -> None:
        self.location: str = ""
        self.results: List[OrganizationRecord] = []
        self.sort_state = SortState()
        self._token: Optional[CancellationToken] = None
        self._lock = threading.Lock()

    def begin_search(self, location: str) -> CancellationToken:
        with self._lock:
            if self._token is not None and not self._token.cancelled:
                logger.info("Cancelling superseded search for %s", self.location)
                self._token.cancel()
            self._token = CancellationToken()
            self.location = location
            self.results = []
            self.sort_state.reset()
            return self._token

    def publish(self, token: CancellationToken, results: Sequence[OrganizationRecord]) -> bool:
        with self._lock:
            if token is not self._token or token.cancelled:
                logger.info("Discarding results from a superseded search")
                return False
            self.results = list(results)
            return True

    def sort(self, column: str) -> List[OrganizationRecord]:
        if column not in SORTABLE_COLUMNS:
            raise ValueError(f"Unknown sort column: {column}")
        with self._lock:
            self.sort_state.select(column)
            self.results = sort_records(self.results, column, self.sort_state.direction)
            return list(self.results)
