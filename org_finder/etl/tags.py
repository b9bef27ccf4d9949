"""Typed accessors over OpenStreetMap tag mappings.

Each accessor owns its fallback-key priority list so downstream code never
reaches into the raw mapping with ad hoc keys.
"""

from __future__ import annotations

import re
from typing import Mapping, Optional, Sequence
from urllib.parse import urlparse, urlunparse

UNNAMED_ORGANIZATION = "Unnamed Organization"

NAME_KEYS = ("name", "name:en")
WEBSITE_KEYS = ("website", "contact:website", "url")
EMAIL_KEYS = ("email", "contact:email")
PHONE_KEYS = ("phone", "contact:phone")
ADDRESS_KEYS = ("addr:housenumber", "addr:street", "addr:city", "addr:state", "addr:postcode")

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_CHAR_REGEX = re.compile(r"[\d+\-().]")
MIN_PHONE_CHARS = 7
_HOST_REGEX = re.compile(r"^[A-Za-z0-9.-]+(:\d+)?$")


def first_tag(tags: Mapping[str, str], keys: Sequence[str]) -> str:
    """Return the first non-blank value among ``keys``, stripped."""
    for key in keys:
        value = tags.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def name_of(tags: Mapping[str, str]) -> str:
    return first_tag(tags, NAME_KEYS) or UNNAMED_ORGANIZATION


def normalize_name(name: str) -> str:
    return (name or "").strip().lower()


def raw_website(tags: Mapping[str, str]) -> str:
    return first_tag(tags, WEBSITE_KEYS)


def email_of(tags: Mapping[str, str]) -> str:
    """Return the tagged email when it is well formed, else an empty string."""
    value = first_tag(tags, EMAIL_KEYS)
    return value if is_valid_email(value) else ""


def phone_of(tags: Mapping[str, str]) -> str:
    value = first_tag(tags, PHONE_KEYS)
    return value if is_valid_phone(value) else ""


def address_of(tags: Mapping[str, str]) -> str:
    parts = [first_tag(tags, (key,)) for key in ADDRESS_KEYS]
    return ", ".join(part for part in parts if part)


def is_valid_email(value: str) -> bool:
    return bool(value) and bool(EMAIL_REGEX.match(value))


def is_valid_phone(value: str) -> bool:
    if not value or "@" in value:
        return False
    return len(PHONE_CHAR_REGEX.findall(value)) >= MIN_PHONE_CHARS


def is_valid_contact(contact: str, website: Optional[str]) -> bool:
    """Gate a record on its direct contact, falling back to the website."""
    if contact:
        if "@" in contact:
            return is_valid_email(contact)
        return is_valid_phone(contact)
    return bool(website)


def normalize_website(raw_url: Optional[str]) -> str:
    """Normalise raw website strings into absolute URLs without trailing slashes.

    Values without a scheme get ``https://``; anything that does not parse into
    an http(s) URL with a plausible host becomes an empty string.
    """

    if not raw_url or not isinstance(raw_url, str):
        return ""

    url = raw_url.strip().rstrip("/")
    if not url or any(ch.isspace() for ch in url):
        return ""

    if not url.lower().startswith(("http://", "https://")):
        if "://" in url:
            return ""
        url = f"https://{url}"

    try:
        parsed = urlparse(url)
        # Accessing .port validates the numeric port.
        parsed.port
    except ValueError:
        return ""

    host = parsed.netloc.rsplit("@", 1)[-1]
    if not host or not _HOST_REGEX.match(host):
        return ""
    hostname = parsed.hostname or ""
    if "." not in hostname and hostname != "localhost":
        return ""

    normalized = parsed._replace(scheme=parsed.scheme.lower(), netloc=parsed.netloc.lower(), fragment="")
    return urlunparse(normalized).rstrip("/")


def website_of(tags: Mapping[str, str]) -> str:
    return normalize_website(raw_website(tags))


def origin_of(url: str) -> str:
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return ""
    return f"{parsed.scheme}://{parsed.netloc}"
