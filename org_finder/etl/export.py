"""CSV export of organization results."""

import re
from datetime import date
from typing import Iterable, List, Optional

from org_finder.models import OrganizationRecord

CSV_HEADER = (
    "Organization Name",
    "Website",
    "Contact",
    "Type",
    "Email",
    "Phone",
    "Contact Page",
    "Address",
)
_FILENAME_UNSAFE = re.compile(r"[^a-zA-Z0-9]")


def escape_csv_value(value: Optional[object]) -> str:
    """Quote a field when it holds a comma, quote or newline; double inner quotes."""
    if value is None or value == "":
        return ""
    text = str(value)
    if any(ch in text for ch in (",", '"', "\n", "\r")):
        return '"' + text.replace('"', '""') + '"'
    return text


def display_contact(organization: OrganizationRecord) -> str:
    return organization.contact or organization.contact_page or organization.website


def to_row(organization: OrganizationRecord) -> List[str]:
    return [
        organization.name,
        organization.website,
        display_contact(organization),
        organization.type.value,
        organization.email,
        organization.phone,
        organization.contact_page,
        organization.address,
    ]


def to_csv(organizations: Iterable[OrganizationRecord]) -> str:
    lines = [",".join(CSV_HEADER)]
    for organization in organizations:
        lines.append(",".join(escape_csv_value(value) for value in to_row(organization)))
    return "\n".join(lines) + "\n"


def csv_filename(location: str, today: Optional[date] = None) -> str:
    slug = _FILENAME_UNSAFE.sub("_", (location or "").strip()) or "search"
    today = today or date.today()
    return f"arts_organizations_{slug}_{today.isoformat()}.csv"
