"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from org_finder.core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "ArtsOrganizationFinder/1.0"
DISCOVERY_STRATEGIES = ("scoring", "probe")


@dataclass(frozen=True)
class Settings:
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    user_agent: str = DEFAULT_USER_AGENT
    fetch_proxy_url: str = ""
    default_radius_km: int = 25
    overpass_delay_seconds: float = 0.0
    discovery_strategy: str = "scoring"
    discovery_batch_size: int = 5
    discovery_batch_delay: float = 0.5
    contact_cache_ttl_seconds: int = 300
    require_contact: bool = True
    sample_fallback: bool = True
    port: int = 8080


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes"}


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be numeric, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    user_agent = os.getenv("ORG_FINDER_USER_AGENT", "").strip()
    if not user_agent:
        logger.warning(
            "ORG_FINDER_USER_AGENT not set; using fallback UA. Nominatim asks for an identifying UA."
        )
        user_agent = DEFAULT_USER_AGENT

    discovery_strategy = os.getenv("DISCOVERY_STRATEGY", "scoring").strip().lower()
    if discovery_strategy not in DISCOVERY_STRATEGIES:
        raise ConfigError(
            f"DISCOVERY_STRATEGY must be one of {', '.join(DISCOVERY_STRATEGIES)}, got {discovery_strategy!r}"
        )

    batch_size = _env_number("DISCOVERY_BATCH_SIZE", 5, int)
    if batch_size <= 0:
        raise ConfigError("DISCOVERY_BATCH_SIZE must be positive")

    fetch_proxy_url = os.getenv("FETCH_PROXY_URL", "").strip()
    if not fetch_proxy_url:
        logger.info("FETCH_PROXY_URL is not configured; homepages are fetched directly.")

    return Settings(
        nominatim_url=os.getenv("NOMINATIM_URL", Settings.nominatim_url),
        overpass_url=os.getenv("OVERPASS_URL", Settings.overpass_url),
        user_agent=user_agent,
        fetch_proxy_url=fetch_proxy_url,
        default_radius_km=_env_number("DEFAULT_RADIUS_KM", 25, int),
        overpass_delay_seconds=_env_number("OVERPASS_DELAY_SECONDS", 0.0, float),
        discovery_strategy=discovery_strategy,
        discovery_batch_size=batch_size,
        discovery_batch_delay=_env_number("DISCOVERY_BATCH_DELAY", 0.5, float),
        contact_cache_ttl_seconds=_env_number("CONTACT_CACHE_TTL_SECONDS", 300, int),
        require_contact=_env_flag("REQUIRE_CONTACT", True),
        sample_fallback=_env_flag("SAMPLE_FALLBACK", True),
        port=_env_number("PORT", 8080, int),
    )
