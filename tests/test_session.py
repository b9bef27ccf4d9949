import pytest

from org_finder.core.enrichment import CancellationToken
from org_finder.core.session import SearchSession, SortState, sort_records
from org_finder.models import OrganizationRecord, OrganizationType


def _orgs():
    return [
        OrganizationRecord(name="Zoo Philly", type=OrganizationType.ZOO, website="https://zoo.org"),
        OrganizationRecord(name="alpha Gallery", type=OrganizationType.ART_GALLERY, email="a@alpha.org"),
        OrganizationRecord(name="Barnes", type=OrganizationType.MUSEUM, website="https://barnes.org", phone="215 555 0100"),
        OrganizationRecord(name="Clay", type=OrganizationType.POTTERY_STUDIO),
    ]


def test_sort_state_toggles_and_resets():
    state = SortState()
    state.select("name")
    assert (state.column, state.direction) == ("name", "asc")
    state.select("name")
    assert state.direction == "desc"
    state.select("type")
    assert (state.column, state.direction) == ("type", "asc")
    state.reset()
    assert (state.column, state.direction) == (None, "asc")


def test_plain_columns_compare_case_sensitively():
    names = [org.name for org in sort_records(_orgs(), "name")]
    assert names == ["Barnes", "Clay", "Zoo Philly", "alpha Gallery"]


@pytest.mark.parametrize("direction", ["asc", "desc"])
def test_empty_websites_sort_last_in_both_directions(direction):
    websites = [org.website for org in sort_records(_orgs(), "website", direction)]
    assert websites[2:] == ["", ""]
    expected = ["https://barnes.org", "https://zoo.org"]
    assert websites[:2] == (expected if direction == "asc" else expected[::-1])


def test_contact_column_uses_primary_contact():
    names = [org.name for org in sort_records(_orgs(), "contact")]
    assert names == ["Barnes", "alpha Gallery", "Zoo Philly", "Clay"]


def test_contact_column_falls_back_to_website_like_the_export():
    names = [org.name for org in sort_records(_orgs(), "contact", "desc")]
    assert names == ["Zoo Philly", "alpha Gallery", "Barnes", "Clay"]


def test_sort_idempotent_and_toggle_round_trip():
    session = SearchSession()
    token = session.begin_search("Philadelphia")
    session.publish(token, _orgs())

    first = [org.name for org in session.sort("name")]
    again = [org.name for org in sort_records(session.results, "name", "asc")]
    assert first == again

    descending = [org.name for org in session.sort("name")]
    assert descending == first[::-1]
    back = [org.name for org in session.sort("name")]
    assert back == first


def test_unknown_column_rejected():
    with pytest.raises(ValueError):
        sort_records(_orgs(), "rating")
    with pytest.raises(ValueError):
        SearchSession().sort("rating")


def test_new_search_cancels_previous_token_and_resets_sort():
    session = SearchSession()
    first = session.begin_search("Philadelphia")
    session.publish(first, _orgs())
    session.sort("name")

    second = session.begin_search("Pittsburgh")

    assert first.cancelled is True
    assert second.cancelled is False
    assert session.results == []
    assert session.sort_state.column is None
    assert session.publish(first, _orgs()) is False
    assert session.results == []
    assert session.publish(second, _orgs()[:1]) is True
    assert len(session.results) == 1


def test_foreign_token_cannot_publish():
    session = SearchSession()
    session.begin_search("Philadelphia")
    assert session.publish(CancellationToken(), _orgs()) is False
