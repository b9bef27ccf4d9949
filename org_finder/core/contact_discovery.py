"""Contact page discovery for organizations that only publish a website."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional, Set, Tuple
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup, Tag

from org_finder.core.config import Settings, get_settings
from org_finder.core.contact_cache import ContactPageCache, get_default_contact_cache
from org_finder.core.errors import DiscoveryError
from org_finder.etl.tags import normalize_website, origin_of

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 4
PROBE_TIMEOUT = 3
CONTACT_PATHS = (
    "/contact",
    "/contact-us",
    "/about/contact",
    "/info",
    "/about",
)
CONTACT_KEYWORDS = ("contact", "reach", "touch", "connect")
FALSE_POSITIVES = ("contractor", "contracts", "contact lens", "contact sport")
SKIPPED_HREF_PREFIXES = ("#", "mailto:", "tel:", "javascript:")

NAVIGATION_SELECTORS = (
    "nav a[href]",
    "header a[href]",
    "[role='navigation'] a[href]",
    "[class*='menu'] a[href]",
    "[id*='menu'] a[href]",
    "[class*='nav'] a[href]",
    "[id*='nav'] a[href]",
)
CONTACT_HREF_SELECTORS = ("a[href*='contact' i]",)
FOOTER_SELECTORS = (
    "footer a[href]",
    "[class*='footer'] a[href]",
    "[id*='footer'] a[href]",
)


def resolve_href(href: str, origin: str) -> str:
    """Turn an anchor href into an absolute URL rooted at ``origin``."""
    href = (href or "").strip()
    lowered = href.lower()
    if not href or lowered.startswith(SKIPPED_HREF_PREFIXES):
        return ""
    if lowered.startswith(("http://", "https://")):
        return href
    if href.startswith("//"):
        scheme = urlparse(origin).scheme or "https"
        return f"{scheme}:{href}"
    if href.startswith("/"):
        return f"{origin}{href}"
    return f"{origin}/{href}"


def is_contact_link(text: str, href: str) -> bool:
    """True when anchor text or href path signals contact intent."""
    path = urlparse((href or "").strip()).path
    haystack = f"{(text or '').lower()} {path.lower()}"
    if any(phrase in haystack for phrase in FALSE_POSITIVES):
        return False
    return any(keyword in haystack for keyword in CONTACT_KEYWORDS)


def _iter_candidate_anchors(soup: BeautifulSoup) -> Iterator[Tag]:
    seen: Set[int] = set()
    for selector_group in (NAVIGATION_SELECTORS, CONTACT_HREF_SELECTORS, FOOTER_SELECTORS):
        for selector in selector_group:
            for anchor in soup.select(selector):
                if id(anchor) in seen:
                    continue
                seen.add(id(anchor))
                yield anchor


def find_contact_link(soup: BeautifulSoup, origin: str) -> str:
    """Return the first qualifying contact URL on a parsed page, or empty."""
    for anchor in _iter_candidate_anchors(soup):
        href = anchor.get("href")
        if not isinstance(href, str):
            continue
        text = anchor.get_text(" ", strip=True)
        if not is_contact_link(text, href):
            continue
        resolved = resolve_href(href, origin)
        if resolved:
            return resolved
    return ""


class ContactPageFinder:
    """Locate a contact page for a website by link scoring, then path probing."""

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        cache: Optional[ContactPageCache] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.strategy = self.settings.discovery_strategy
        self.cache = cache or get_default_contact_cache(self.settings.contact_cache_ttl_seconds)
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", self.settings.user_agent)
        self.session.headers.setdefault("Accept", "text/html,application/xhtml+xml")
        self.session.headers.setdefault("Accept-Language", "en-US,en;q=0.9")

    def find(self, website: str) -> str:
        """Return the contact page for ``website``, consulting the cache first."""
        key = normalize_website(website)
        if not key:
            return ""

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Contact cache hit for %s", key)
            return cached.resolved_url

        try:
            resolved = self.discover(key)
        except (requests.RequestException, ValueError) as exc:
            self.cache.put(key, "")
            raise DiscoveryError(f"contact discovery failed for {key}: {exc}") from exc

        self.cache.put(key, resolved)
        return resolved

    def discover(self, base_url: str) -> str:
        """Run the configured strategies; re-raise when every one failed on transport."""
        content_error: Optional[requests.RequestException] = None
        if self.strategy == "scoring":
            try:
                found = self.find_by_content(base_url)
            except requests.RequestException as exc:
                content_error = exc
                found = ""
            if found:
                return found
            logger.debug("No contact link scored on %s; probing paths", base_url)

        try:
            return self.find_by_probing(base_url)
        except requests.RequestException as exc:
            if self.strategy == "scoring" and content_error is None:
                logger.debug("Base site %s did not answer HEAD: %s", base_url, exc)
                return ""
            raise

    def find_by_content(self, base_url: str) -> str:
        fetched = self.fetch_homepage(base_url)
        if not fetched:
            return ""
        final_url, html = fetched
        origin = origin_of(final_url) or origin_of(base_url)
        soup = BeautifulSoup(html, "html.parser")
        return find_contact_link(soup, origin)

    def fetch_homepage(self, url: str) -> Optional[Tuple[str, str]]:
        """
        Fetch a homepage directly, falling back to the configured proxy.
        Raises the transport error when no attempt got an answer at all.
        """
        transport_error: Optional[requests.RequestException] = None
        try:
            response = self.session.get(url, timeout=FETCH_TIMEOUT, allow_redirects=True)
            content_type = response.headers.get("Content-Type", "").lower()
            if response.ok and "html" in content_type:
                return response.url or url, response.text
            logger.debug(
                "Direct fetch of %s unusable (status=%s, content-type=%s)",
                url,
                response.status_code,
                content_type,
            )
        except requests.RequestException as exc:
            logger.debug("Direct fetch of %s failed: %s", url, exc)
            transport_error = exc

        if not self.settings.fetch_proxy_url:
            if transport_error is not None:
                raise transport_error
            return None

        try:
            return self._fetch_via_proxy(url)
        except requests.RequestException as exc:
            logger.warning("Proxy fetch of %s failed: %s", url, exc)
            if transport_error is not None:
                raise
            return None

    def _fetch_via_proxy(self, url: str) -> Optional[Tuple[str, str]]:
        response = self.session.get(
            self.settings.fetch_proxy_url,
            params={"url": url},
            timeout=FETCH_TIMEOUT,
        )
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Proxy returned malformed JSON for %s: %s", url, exc)
            return None

        contents = payload.get("contents") if isinstance(payload, dict) else None
        if not isinstance(contents, str) or not contents:
            return None
        return url, contents

    def head_status(self, url: str) -> int:
        response = self.session.head(url, timeout=PROBE_TIMEOUT, allow_redirects=True)
        return response.status_code

    def is_reachable(self, url: str) -> bool:
        """True when ``url`` answers HEAD without an error status."""
        try:
            return self.head_status(url) < 400
        except requests.RequestException:
            return False

    def find_by_probing(self, base_url: str) -> str:
        """
        Try well-known contact paths; fall back to the site itself.
        Any HTTP answer from the base site counts as up, and a transport
        failure on it propagates.
        """
        status = self.head_status(base_url)
        logger.debug("Base site %s answered HEAD with %s", base_url, status)

        origin = origin_of(base_url) or base_url
        candidates: List[str] = [f"{origin}{path}" for path in CONTACT_PATHS]
        with ThreadPoolExecutor(max_workers=len(candidates)) as executor:
            reachable = list(executor.map(self.is_reachable, candidates))

        for candidate, ok in zip(candidates, reachable):
            if ok:
                return candidate
        return base_url

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ContactPageFinder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: D401
        self.close()
