import pytest

from org_finder.core import config
from org_finder.core.errors import ConfigError

ENV_VARS = (
    "ORG_FINDER_USER_AGENT",
    "FETCH_PROXY_URL",
    "DEFAULT_RADIUS_KM",
    "DISCOVERY_STRATEGY",
    "DISCOVERY_BATCH_SIZE",
    "DISCOVERY_BATCH_DELAY",
    "CONTACT_CACHE_TTL_SECONDS",
    "REQUIRE_CONTACT",
    "SAMPLE_FALLBACK",
    "PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


def test_get_settings_reads_env(monkeypatch):
    monkeypatch.setenv("ORG_FINDER_USER_AGENT", "finder-test/1.0")
    monkeypatch.setenv("DEFAULT_RADIUS_KM", "40")
    monkeypatch.setenv("DISCOVERY_STRATEGY", "probe")
    monkeypatch.setenv("DISCOVERY_BATCH_SIZE", "8")
    monkeypatch.setenv("DISCOVERY_BATCH_DELAY", "0.1")
    monkeypatch.setenv("REQUIRE_CONTACT", "false")
    monkeypatch.setenv("FETCH_PROXY_URL", "https://proxy.example/get")

    settings = config.get_settings()

    assert settings.user_agent == "finder-test/1.0"
    assert settings.default_radius_km == 40
    assert settings.discovery_strategy == "probe"
    assert settings.discovery_batch_size == 8
    assert settings.discovery_batch_delay == 0.1
    assert settings.require_contact is False
    assert settings.fetch_proxy_url == "https://proxy.example/get"


def test_get_settings_defaults_and_warns(caplog):
    with caplog.at_level("WARNING"):
        settings = config.get_settings()

    assert "ORG_FINDER_USER_AGENT not set" in " ".join(caplog.messages)
    assert settings.user_agent == config.DEFAULT_USER_AGENT
    assert settings.default_radius_km == 25
    assert settings.discovery_strategy == "scoring"
    assert settings.discovery_batch_size == 5
    assert settings.contact_cache_ttl_seconds == 300
    assert settings.require_contact is True
    assert settings.sample_fallback is True


def test_get_settings_rejects_unknown_strategy(monkeypatch):
    monkeypatch.setenv("DISCOVERY_STRATEGY", "crawl")
    with pytest.raises(ConfigError):
        config.get_settings()


def test_get_settings_rejects_bad_numbers(monkeypatch):
    monkeypatch.setenv("DISCOVERY_BATCH_SIZE", "many")
    with pytest.raises(ConfigError):
        config.get_settings()

    config.get_settings.cache_clear()
    monkeypatch.setenv("DISCOVERY_BATCH_SIZE", "0")
    with pytest.raises(ConfigError):
        config.get_settings()
