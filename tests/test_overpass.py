import pytest
import requests

from org_finder.core.config import Settings
from org_finder.core.errors import OverpassError
from org_finder.models import Coordinate
from org_finder.vendors import overpass


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = DummyResponse()

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append((url, data, headers, timeout))
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(overpass, "_SESSION", session)
    return session


CENTER = Coordinate(lat=39.95, lon=-75.17)


def test_radius_km_to_meters():
    assert overpass.radius_km_to_meters(25) == 25000
    with pytest.raises(ValueError):
        overpass.radius_km_to_meters(0)


def test_build_overpass_query_covers_catalog_for_nodes_and_ways():
    query = overpass.build_overpass_query(CENTER, 25000)

    assert query.startswith("[out:json][timeout:20];")
    assert query.rstrip().endswith("out center;")
    assert query.count("(around:25000,39.95,-75.17)") == 10
    assert 'node["tourism"~"^(gallery|museum|zoo|aquarium)$"]' in query
    assert 'way["leisure"="garden"]["garden:type"="botanical"]' in query
    assert '["craft"~"^(pottery|artist|sculptor)$"]' in query
    assert "arts_centre" in query and "theatre" in query


def test_search_venues_parses_points_and_centers(patch_session):
    patch_session.response = DummyResponse(
        payload={
            "elements": [
                {"type": "node", "id": 1, "lat": 39.9, "lon": -75.1, "tags": {"name": "Gallery One"}},
                {"type": "way", "id": 2, "center": {"lat": 39.8, "lon": -75.2}, "tags": {"name": "Museum Two"}},
                {"type": "node", "id": 3},
            ]
        }
    )

    records = overpass.search_venues(CENTER, 25000, settings=Settings())

    assert [record.id for record in records] == [1, 2, 3]
    assert records[1].lat == 39.8 and records[1].lon == -75.2
    assert records[2].tags == {}
    url, data, headers, timeout = patch_session.calls[0]
    assert url == Settings().overpass_url
    assert "around:25000" in data["data"]
    assert len(patch_session.calls) == 1


def test_search_venues_drops_non_string_tags(patch_session):
    patch_session.response = DummyResponse(
        payload={"elements": [{"type": "node", "id": 1, "tags": {"name": "Hall", "levels": 3}}]}
    )
    records = overpass.search_venues(CENTER, 1000, settings=Settings())
    assert dict(records[0].tags) == {"name": "Hall"}


def test_search_venues_failure_raises(patch_session):
    patch_session.response = DummyResponse(status_code=504)
    with pytest.raises(OverpassError):
        overpass.search_venues(CENTER, 25000, settings=Settings())


def test_search_venues_waits_configured_delay(patch_session, monkeypatch):
    slept = []
    monkeypatch.setattr(overpass.time, "sleep", slept.append)
    overpass.search_venues(CENTER, 25000, settings=Settings(overpass_delay_seconds=1.5))
    assert slept == [1.5]
